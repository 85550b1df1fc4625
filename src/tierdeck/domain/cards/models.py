"""
Domain models for flashcards and their review tiers.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Flashcard:
    """
    A unit of study content.

    Attributes:
        front: Prompt shown to the learner.
        back: Expected answer.
        hint: Optional nudge shown on request.
        tags: Free-form labels; not used by scheduling.
    """

    front: str
    back: str
    hint: str | None = None
    tags: tuple[str, ...] = ()

    @property
    def key(self) -> tuple[str, str]:
        """Identity used when matching practice history to cards."""
        return (self.front, self.back)


class AnswerDifficulty(Enum):
    """Outcome of a single practice attempt."""

    WRONG = 0
    HARD = 1
    EASY = 2

    @classmethod
    def parse(cls, text: str) -> "AnswerDifficulty":
        try:
            return cls[text.strip().upper()]
        except KeyError:
            valid = ", ".join(m.name.lower() for m in cls)
            raise ValueError(f"Unknown difficulty {text!r} (expected one of: {valid})") from None

    @property
    def is_success(self) -> bool:
        # Hard still counts as recalled.
        return self is not AnswerDifficulty.WRONG


# Sparse system of record: tier -> cards. Empty tiers may be absent.
BucketMap = dict[int, set[Flashcard]]

# Dense derived view indexed 0..max tier.
BucketArray = list[set[Flashcard]]


@dataclass(frozen=True)
class PracticeRecord:
    """
    A single practice log entry.

    Attributes:
        card_front: Front text of the practiced card.
        card_back: Back text of the practiced card.
        difficulty: Answer recorded for the attempt.
        day: Study day the attempt happened on, if known.
        previous_bucket: Tier before the answer was applied.
        new_bucket: Tier after the answer was applied.
    """

    card_front: str
    card_back: str
    difficulty: AnswerDifficulty
    day: int | None = None
    previous_bucket: int | None = None
    new_bucket: int | None = None

    @property
    def card_key(self) -> tuple[str, str]:
        return (self.card_front, self.card_back)


@dataclass(frozen=True)
class ProgressStats:
    """
    Aggregate snapshot of a learner's progress.

    cards_by_bucket is dense: index i holds the card count of tier i.
    """

    total_cards: int
    cards_by_bucket: tuple[int, ...]
    success_rate: float  # percentage, 0-100
    average_moves_per_card: float
    total_practice_events: int
