class CardNotFoundError(Exception):
    """Raised for unknown card ids and for cards that are not PUBLIC."""

    def __init__(self, card_id: str) -> None:
        super().__init__(f"Card {card_id} not found")
        self.card_id = card_id


class UpstreamError(Exception):
    """The address lookup service failed or answered with an unexpected shape."""
