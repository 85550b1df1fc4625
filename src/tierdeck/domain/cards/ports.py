"""
Ports (interfaces) for loading and saving decks.

Scheduling functions never depend on these; only the session runner and the
CLI do.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from .models import BucketMap, Flashcard, PracticeRecord


@dataclass
class DeckSnapshot:
    """Everything the outer layers persist between study sessions."""

    cards: list[Flashcard] = field(default_factory=list)
    buckets: BucketMap = field(default_factory=dict)
    history: list[PracticeRecord] = field(default_factory=list)
    day: int = 0

    def find_card(self, front: str) -> Flashcard | None:
        for card in self.cards:
            if card.front == front:
                return card
        return None


class DeckRepository(ABC):
    """
    Port for reading and writing deck snapshots.

    Implementations:
        - YamlDeckRepository: a single YAML file on disk.
    """

    @abstractmethod
    def load(self) -> DeckSnapshot:
        """
        Read the stored snapshot.

        Raises:
            DeckFormatError: If the stored data is malformed.
        """
        pass

    @abstractmethod
    def save(self, snapshot: DeckSnapshot) -> None:
        """Replace the stored snapshot with the given one."""
        pass
