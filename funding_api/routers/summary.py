from fastapi import APIRouter, Depends, Response

from funding_api.core.config import get_settings
from funding_api.core.dependencies import get_card_crud
from funding_api.crud.card import CardCRUD
from funding_api.schemas.summary import FundingSummary

router = APIRouter(tags=["summary"])
settings = get_settings()


@router.get("/funding-summary", response_model=FundingSummary)
async def funding_summary(
    response: Response,
    cards_crud: CardCRUD = Depends(get_card_crud),
):
    """Aggregated funding across all public cards; sums are null when there are none."""
    response.headers["Cache-Control"] = settings.cache_control
    totals = await cards_crud.summary()
    return FundingSummary(**totals)
