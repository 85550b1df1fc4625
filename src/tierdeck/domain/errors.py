"""Exceptions raised outside the pure scheduling core."""


class TierdeckError(Exception):
    """Base class for tierdeck errors surfaced to the user."""


class DeckFormatError(TierdeckError):
    """A deck snapshot could not be parsed into cards, tiers and history."""


class CardNotFoundError(TierdeckError):
    """No card in the deck matches the requested front text."""

    def __init__(self, front: str):
        super().__init__(f"No card with front {front!r} in this deck.")
        self.front = front
