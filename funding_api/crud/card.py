import uuid
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from funding_api.core.logging_config import get_logger
from funding_api.crud.query import CardQuery, public_only
from funding_api.db.models import Card, CardStageFunding
from funding_api.schemas.card import DEFAULT_CURRENCY, CardResponse, CardWithFunding, StageFundingResponse

logger = get_logger(__name__)

EIGHT_PLACES = Decimal("0.00000000")


def format_amount(value: Decimal) -> str:
    return f"{value.quantize(EIGHT_PLACES, rounding=ROUND_HALF_UP):.8f}"


def group_stage_funding(rows: Iterable[CardStageFunding]) -> dict[uuid.UUID, list[StageFundingResponse]]:
    groups: dict[uuid.UUID, list[StageFundingResponse]] = defaultdict(list)
    for row in rows:
        groups[row.card_id].append(
            StageFundingResponse(
                stage=row.stage,
                funding_requested=row.funding_requested,
                currency=row.currency or DEFAULT_CURRENCY,
                note=row.note or None,
            )
        )
    return groups


def attach_stage_funding(cards: Iterable[Card], rows: Iterable[CardStageFunding]) -> list[CardWithFunding]:
    """Join stage funding rows onto cards in memory.

    Cards without rows get an empty list and a ``0.00000000`` total.
    """
    groups = group_stage_funding(rows)
    enriched: list[CardWithFunding] = []
    for card in cards:
        entries = groups.get(card.id, [])
        total = sum((entry.funding_requested or Decimal("0") for entry in entries), Decimal("0"))
        enriched.append(
            CardWithFunding(
                **CardResponse.model_validate(card).model_dump(),
                stage_funding=entries,
                total_funding_requested=format_amount(total),
            )
        )
    return enriched


class CardCRUD:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def count(self, query: CardQuery) -> int:
        result = await self.db.execute(query.count_statement())
        total = int(result.scalar_one())
        logger.debug(
            "Counted public cards",
            extra={"details": {"event": "card_count", "extra": {"total": total}}},
        )
        return total

    async def list_page(self, query: CardQuery) -> list[Card]:
        result = await self.db.execute(query.page_statement())
        cards = list(result.scalars().all())
        logger.debug(
            "Listed page of public cards",
            extra={
                "details": {
                    "event": "card_list",
                    "extra": {
                        "page": query.page,
                        "limit": query.limit,
                        "sort_by": query.sort_by.value,
                        "sort_dir": query.sort_dir.value,
                        "count": len(cards),
                    },
                }
            },
        )
        return cards

    async def get_by_id(self, card_id: str) -> Card | None:
        try:
            parsed_id = uuid.UUID(str(card_id))
        except ValueError:
            logger.debug(
                "Card id is not a UUID",
                extra={"details": {"event": "card_lookup_id", "extra": {"card_id": card_id, "found": False}}},
            )
            return None
        result = await self.db.execute(select(Card).where(Card.id == parsed_id, public_only()))
        card = result.scalar_one_or_none()
        logger.debug(
            "Fetched card by id",
            extra={"details": {"event": "card_lookup_id", "extra": {"card_id": card_id, "found": bool(card)}}},
        )
        return card

    async def list_stage_funding(self) -> list[CardStageFunding]:
        # TODO: restrict to the ids of the page being rendered once row counts warrant it
        # (grouping in attach_stage_funding already ignores rows for other cards).
        result = await self.db.execute(select(CardStageFunding).order_by(CardStageFunding.id))
        return list(result.scalars().all())

    async def attach_stage_funding(self, cards: list[Card]) -> list[CardWithFunding]:
        rows = await self.list_stage_funding()
        enriched = attach_stage_funding(cards, rows)
        logger.debug(
            "Attached stage funding",
            extra={"details": {"event": "stage_funding_join", "extra": {"cards": len(cards), "rows": len(rows)}}},
        )
        return enriched

    async def summary(self) -> dict:
        stmt = select(
            func.sum(Card.funding_earned).label("total_earned"),
            func.sum(Card.funding_spent).label("total_spent"),
            func.sum(Card.funding_requested).label("total_requested"),
            func.sum(Card.funding_received).label("total_received"),
            func.sum(Card.funding_available).label("total_available"),
        ).where(public_only())
        result = await self.db.execute(stmt)
        totals = dict(result.one()._mapping)
        logger.debug("Funding summary generated", extra={"details": {"event": "funding_summary"}})
        return totals
