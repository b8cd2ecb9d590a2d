from fastapi import APIRouter, Depends, Query, Response

from funding_api.core.config import get_settings
from funding_api.core.dependencies import get_card_crud, get_wallet_aggregator
from funding_api.core.errors import CardNotFoundError
from funding_api.core.logging_config import get_logger
from funding_api.crud.card import CardCRUD
from funding_api.crud.query import build_card_query, total_pages
from funding_api.schemas.card import CardDetail, CardPage, CardResponse, Pagination
from funding_api.services.wallet import WalletAggregator

router = APIRouter(prefix="/cards", tags=["cards"])
settings = get_settings()
logger = get_logger(__name__)

WALLET_INFO_ERROR = "Failed to retrieve wallet info"


@router.get("", response_model=CardPage)
async def list_cards(
    response: Response,
    page: str | None = Query(None, description="Page number (default 1)"),
    per_page: str | None = Query(None, description="Number of cards per page (default 10, max 100)"),
    sort_by: str | None = Query(None, description="last_updated, priority, percent_funded or date"),
    sort_dir: str | None = Query(None, description="asc or desc (default desc)"),
    priority: str | None = Query(None, description="Filter by priority"),
    status_filter: str | None = Query(None, alias="status", description="Filter by card status"),
    stage: str | None = Query(None, description="Filter by card stage"),
    tags: str | None = Query(None, description="Comma-separated list of tags; any match counts"),
    cards_crud: CardCRUD = Depends(get_card_crud),
):
    response.headers["Cache-Control"] = settings.cache_control
    query = build_card_query(
        page=page,
        per_page=per_page,
        sort_by=sort_by,
        sort_dir=sort_dir,
        priority=priority,
        status=status_filter,
        stage=stage,
        tags=tags,
    )
    total_rows = await cards_crud.count(query)
    cards = await cards_crud.list_page(query)
    cards_with_funding = await cards_crud.attach_stage_funding(cards)
    return CardPage(
        pagination=Pagination(
            current_page=query.page,
            per_page=query.limit,
            total_pages=total_pages(total_rows, query.limit),
        ),
        cards=cards_with_funding,
    )


@router.get(
    "/{card_id}",
    response_model=CardDetail,
    response_model_exclude_unset=True,
    responses={404: {"description": "Card not found", "content": {"application/json": {"example": {"error": "Not Found"}}}}},
)
async def get_card(
    card_id: str,
    response: Response,
    cards_crud: CardCRUD = Depends(get_card_crud),
    wallets: WalletAggregator = Depends(get_wallet_aggregator),
):
    response.headers["Cache-Control"] = settings.cache_control
    card = await cards_crud.get_by_id(card_id)
    if not card:
        raise CardNotFoundError(card_id)

    card_data = CardResponse.model_validate(card).model_dump()
    if not card.wallet_addresses:
        return CardDetail(**card_data)

    try:
        wallet_info = await wallets.aggregate(card.wallet_addresses)
    except Exception as exc:  # noqa: BLE001
        logger.error(
            "Error fetching wallet info",
            extra={
                "details": {
                    "event": "wallet_info",
                    "extra": {"card_id": card_id, "error": str(exc), "error_type": type(exc).__name__},
                }
            },
        )
        return CardDetail(**card_data, wallet_info_error=WALLET_INFO_ERROR)
    return CardDetail(**card_data, wallet_info=wallet_info)
