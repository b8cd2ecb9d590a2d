from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, PlainSerializer

from funding_api.schemas.wallet import WalletSnapshot

DEFAULT_CURRENCY = "ZEC"

# Stored numerics go out as plain decimal strings; asyncpg hands back 0E-8 for zero
StoredAmount = Annotated[Decimal, PlainSerializer(lambda value: format(value, "f"), return_type=str, when_used="json")]


class StageFundingResponse(BaseModel):
    stage: str
    funding_requested: StoredAmount | None = None
    currency: str = DEFAULT_CURRENCY
    note: str | None = None


class CardResponse(BaseModel):
    id: UUID
    title: str
    description: str | None = None
    creators: list[str] | None = None
    date: datetime | None = None
    contributors: int | None = None
    tags: list[str] | None = None
    priority: str | None = None
    funding_earned: StoredAmount | None = None
    funding_spent: StoredAmount | None = None
    funding_requested: StoredAmount | None = None
    funding_received: StoredAmount | None = None
    funding_available: StoredAmount | None = None
    percent_funded: StoredAmount | None = None
    visibility: str
    milestones: Any = None
    status: str | None = None
    stage: str | None = None
    created_by: str | None = None
    owned_by: str | None = None
    last_updated: datetime | None = None
    wallet_addresses: list[str] | None = None
    view_keys: list[str] | None = None

    class Config:
        from_attributes = True


class CardWithFunding(CardResponse):
    stage_funding: list[StageFundingResponse] = []
    total_funding_requested: str = "0.00000000"


class CardDetail(CardResponse):
    """Single card, optionally enriched with live wallet balances.

    Exactly one of ``wallet_info``/``wallet_info_error`` is present when the
    card lists wallet addresses, neither when it does not.
    """

    wallet_info: WalletSnapshot | None = None
    wallet_info_error: str | None = None


class Pagination(BaseModel):
    current_page: int
    per_page: int
    total_pages: int


class CardPage(BaseModel):
    pagination: Pagination
    cards: list[CardWithFunding]
