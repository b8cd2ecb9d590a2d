from pydantic import BaseModel

from funding_api.schemas.card import StoredAmount


class FundingSummary(BaseModel):
    total_earned: StoredAmount | None = None
    total_spent: StoredAmount | None = None
    total_requested: StoredAmount | None = None
    total_received: StoredAmount | None = None
    total_available: StoredAmount | None = None
