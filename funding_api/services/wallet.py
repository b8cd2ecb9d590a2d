"""
Live wallet balances from the address dashboard service (Blockchair).

Used endpoint:
- GET {base_url}/{address}?transactions=true
    -> {"data": {address: {"address": {"balance", "received", "sent"}, "transactions": [...]}}}

Balances arrive as integers in minor units (zatoshi) and are converted to ZEC.
"""

import asyncio
from decimal import Decimal
from typing import Any, Iterable
from urllib.parse import quote

import httpx

from funding_api.core.errors import UpstreamError
from funding_api.core.logging_config import get_logger
from funding_api.schemas.wallet import AddressBalance, AddressFailure, WalletSnapshot, WalletTotals

logger = get_logger(__name__)

MINOR_UNITS_PER_COIN = Decimal(10) ** 8
DEFAULT_MAX_TRANSACTIONS = 10


def to_major_units(value: Any) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected integer minor units, got {value!r}")
    return Decimal(value) / MINOR_UNITS_PER_COIN


class AddressBalanceFetcher:
    def __init__(self, client: httpx.AsyncClient, *, max_transactions: int = DEFAULT_MAX_TRANSACTIONS) -> None:
        self._client = client
        self._max_transactions = max_transactions

    async def fetch(self, address: str) -> AddressBalance:
        """Look up one address; any failure surfaces as :class:`UpstreamError`."""
        try:
            resp = await self._client.get(f"/{quote(address, safe='')}", params={"transactions": "true"})
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Request failed: {exc.__class__.__name__}") from exc

        if not resp.is_success:
            raise UpstreamError(f"HTTP error {resp.status_code}")

        try:
            entry = resp.json()["data"][address]
            info = entry["address"]
            balance = to_major_units(info["balance"])
            received = to_major_units(info["received"])
            sent = to_major_units(info["sent"])
            transactions = entry["transactions"]
            if not isinstance(transactions, list):
                raise TypeError("transactions is not a list")
        except (ValueError, KeyError, TypeError) as exc:
            raise UpstreamError(f"Unexpected response shape: {exc}") from exc

        return AddressBalance(
            address=address,
            balance=balance,
            total_received=received,
            total_sent=sent,
            transactions=transactions[: self._max_transactions],
        )


class WalletAggregator:
    def __init__(self, fetcher: AddressBalanceFetcher) -> None:
        self._fetcher = fetcher

    async def _lookup(self, address: str) -> AddressBalance | AddressFailure:
        try:
            return await self._fetcher.fetch(address)
        except UpstreamError as exc:
            logger.warning(
                "Address lookup failed",
                extra={"details": {"event": "wallet_lookup", "extra": {"address": address, "error": str(exc)}}},
            )
            return AddressFailure(address=address, error=str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "Unexpected error during address lookup",
                extra={
                    "details": {
                        "event": "wallet_lookup",
                        "extra": {"address": address, "error": str(exc), "error_type": type(exc).__name__},
                    }
                },
            )
            return AddressFailure(address=address, error=str(exc) or type(exc).__name__)

    async def aggregate(self, addresses: Iterable[str]) -> WalletSnapshot:
        """Fetch every address concurrently; one failure never sinks the others.

        Totals only include addresses that were looked up successfully.
        """
        results = await asyncio.gather(*(self._lookup(address) for address in addresses))

        balance = received = sent = Decimal("0")
        for result in results:
            if isinstance(result, AddressBalance):
                balance += result.balance
                received += result.total_received
                sent += result.total_sent

        logger.info(
            "Wallet snapshot built",
            extra={
                "details": {
                    "event": "wallet_snapshot",
                    "extra": {
                        "addresses": len(results),
                        "failed": sum(isinstance(result, AddressFailure) for result in results),
                    },
                }
            },
        )
        return WalletSnapshot(
            addresses=list(results),
            totals=WalletTotals(balance=balance, total_received=received, total_sent=sent),
        )
