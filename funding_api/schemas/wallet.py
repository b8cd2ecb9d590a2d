from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, PlainSerializer

# Wallet figures go out as JSON numbers, unlike the stored funding columns
Amount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class AddressBalance(BaseModel):
    address: str
    balance: Amount
    total_received: Amount
    total_sent: Amount
    transactions: list[Any]


class AddressFailure(BaseModel):
    address: str
    error: str


class WalletTotals(BaseModel):
    balance: Amount = Decimal("0")
    total_received: Amount = Decimal("0")
    total_sent: Amount = Decimal("0")


class WalletSnapshot(BaseModel):
    addresses: list[AddressBalance | AddressFailure]
    totals: WalletTotals
