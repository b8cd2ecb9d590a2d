from datetime import datetime
from pydantic import BaseModel, Field


class ExchangeRate(BaseModel):
    zec_to_usd: float = Field(description="The current exchange rate from ZEC to USD", examples=[72.55])
    timestamp: datetime = Field(description="Timestamp of the exchange rate")
