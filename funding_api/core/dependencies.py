from typing import AsyncIterator

import httpx
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from funding_api.core.config import get_settings
from funding_api.crud.card import CardCRUD
from funding_api.db.session import get_db
from funding_api.services.wallet import AddressBalanceFetcher, WalletAggregator


async def get_card_crud(db: AsyncSession = Depends(get_db)) -> CardCRUD:
    return CardCRUD(db)


async def get_wallet_aggregator() -> AsyncIterator[WalletAggregator]:
    settings = get_settings()
    async with httpx.AsyncClient(
        base_url=settings.wallet_api_base_url,
        timeout=settings.wallet_lookup_timeout_seconds,
    ) as client:
        yield WalletAggregator(AddressBalanceFetcher(client, max_transactions=settings.wallet_max_transactions))
