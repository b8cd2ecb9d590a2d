from .card import Card
from .stage_funding import CardStageFunding

__all__ = [
    "Card",
    "CardStageFunding",
]
