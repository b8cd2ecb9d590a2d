import uuid
from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy.dialects import postgresql

from funding_api.crud.card import CardCRUD, attach_stage_funding, format_amount
from funding_api.crud.query import build_card_query
from funding_api.db.models import Card, CardStageFunding


class _Result:
    def __init__(self, value):
        self._value = value

    def scalar_one(self):
        return self._value

    def scalar_one_or_none(self):
        return self._value

    def scalars(self):
        return self

    def all(self):
        return self._value

    def one(self):
        return SimpleNamespace(_mapping=self._value)


class RecordingSession:
    def __init__(self, value=None):
        self.value = value
        self.statements = []

    async def execute(self, stmt):
        self.statements.append(stmt)
        return _Result(self.value)


def _card(**overrides) -> Card:
    values = dict(id=uuid.uuid4(), title="Card", visibility="PUBLIC")
    values.update(overrides)
    return Card(**values)


def _row(card: Card, amount: str | None, **overrides) -> CardStageFunding:
    return CardStageFunding(
        card_id=card.id,
        stage=overrides.pop("stage", "DESIGN"),
        funding_requested=Decimal(amount) if amount is not None else None,
        **overrides,
    )


@pytest.mark.parametrize(
    "value,expected",
    [
        (Decimal("0"), "0.00000000"),
        (Decimal("3.75"), "3.75000000"),
        (Decimal("0.123456789"), "0.12345679"),
        (Decimal("1E+2"), "100.00000000"),
    ],
)
def test_format_amount(value, expected):
    assert format_amount(value) == expected


def test_attach_sums_each_cards_rows():
    first, second = _card(), _card()
    rows = [_row(first, "1.5"), _row(second, "4"), _row(first, "2.25", stage="DEVELOP")]

    enriched = attach_stage_funding([first, second], rows)

    assert [card.id for card in enriched] == [first.id, second.id]
    assert enriched[0].total_funding_requested == "3.75000000"
    assert [entry.stage for entry in enriched[0].stage_funding] == ["DESIGN", "DEVELOP"]
    assert enriched[1].total_funding_requested == "4.00000000"


def test_attach_card_without_rows():
    card = _card()
    enriched = attach_stage_funding([card], [_row(_card(), "9")])
    assert enriched[0].stage_funding == []
    assert enriched[0].total_funding_requested == "0.00000000"


def test_attach_defaults_currency_and_note():
    card = _card()
    rows = [_row(card, "1", currency=None, note=""), _row(card, None, currency="USD", note="audit")]

    entries = attach_stage_funding([card], rows)[0].stage_funding

    assert entries[0].currency == "ZEC"
    assert entries[0].note is None
    assert entries[1].currency == "USD"
    assert entries[1].note == "audit"
    assert entries[1].funding_requested is None


def test_attach_matches_grouped_sum():
    cards = [_card() for _ in range(3)]
    amounts = {cards[0].id: ["0.1", "0.2", "0.3"], cards[2].id: ["100.00000001"]}
    rows = [_row(card, amount) for card in cards for amount in amounts.get(card.id, [])]

    enriched = {card.id: card for card in attach_stage_funding(cards, rows)}

    for card in cards:
        expected = sum((Decimal(a) for a in amounts.get(card.id, [])), Decimal("0"))
        assert enriched[card.id].total_funding_requested == format_amount(expected)
    assert enriched[cards[0].id].total_funding_requested == "0.60000000"


@pytest.mark.asyncio
async def test_get_by_id_requires_public_visibility():
    session = RecordingSession(value=None)
    card_id = uuid.uuid4()

    assert await CardCRUD(session).get_by_id(str(card_id)) is None

    compiled = session.statements[0].compile(dialect=postgresql.dialect())
    assert "cards.visibility = " in str(compiled)
    assert "PUBLIC" in compiled.params.values()
    assert card_id in compiled.params.values()


@pytest.mark.asyncio
async def test_get_by_id_with_malformed_id_skips_query():
    session = RecordingSession()
    assert await CardCRUD(session).get_by_id("not-a-uuid") is None
    assert session.statements == []


@pytest.mark.asyncio
async def test_count_and_list_page_execute_query_plan():
    query = build_card_query(priority="LOW")

    count_session = RecordingSession(value=7)
    assert await CardCRUD(count_session).count(query) == 7

    page_session = RecordingSession(value=[])
    assert await CardCRUD(page_session).list_page(query) == []
    assert "LIMIT" in str(page_session.statements[0].compile(dialect=postgresql.dialect()))


@pytest.mark.asyncio
async def test_summary_over_no_rows_is_null():
    empty = {
        "total_earned": None,
        "total_spent": None,
        "total_requested": None,
        "total_received": None,
        "total_available": None,
    }
    session = RecordingSession(value=empty)

    assert await CardCRUD(session).summary() == empty

    sql = str(session.statements[0].compile(dialect=postgresql.dialect()))
    assert "sum(cards.funding_earned)" in sql
    assert "cards.visibility = " in sql
