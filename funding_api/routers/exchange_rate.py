from datetime import datetime, timezone

from fastapi import APIRouter, Response

from funding_api.core.config import get_settings
from funding_api.schemas.exchange_rate import ExchangeRate

router = APIRouter(tags=["exchange-rate"])
settings = get_settings()


@router.get("/exchange-rate", response_model=ExchangeRate)
async def exchange_rate(response: Response):
    response.headers["Cache-Control"] = settings.cache_control
    return ExchangeRate(zec_to_usd=settings.zec_to_usd_rate, timestamp=datetime.now(timezone.utc))
