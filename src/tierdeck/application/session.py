"""
Study session runner: Application layer orchestrator.

Holds the authoritative tier mapping and practice history for one deck and
coordinates selection, recalibration and reporting.
"""

import logging
import threading

from tierdeck.domain.cards.models import (
    AnswerDifficulty,
    BucketMap,
    Flashcard,
    PracticeRecord,
    ProgressStats,
)
from tierdeck.domain.cards.ports import DeckSnapshot
from tierdeck.domain.constants import NEW_CARD_TIER
from tierdeck.domain.errors import CardNotFoundError

from .scheduler import (
    find_card_tier,
    get_hint,
    get_practice_cards,
    to_bucket_sets,
    update_buckets,
)
from .stats import ProgressCalculator

logger = logging.getLogger(__name__)


class StudySession:
    """
    Application service wrapping a deck snapshot.

    Each answer replaces the stored mapping with the one returned by
    update_buckets. The read-modify-write cycle runs under a lock so
    concurrent callers do not lose updates.
    """

    def __init__(
        self,
        snapshot: DeckSnapshot,
        calculator: ProgressCalculator | None = None,
    ):
        """
        Args:
            snapshot: Deck state to study. Its buckets and history are replaced,
                never mutated, as answers are recorded.
            calculator: Optional custom calculator; uses default if not provided.
        """
        self._snapshot = snapshot
        self._calc = calculator or ProgressCalculator()
        self._lock = threading.Lock()

    @property
    def snapshot(self) -> DeckSnapshot:
        return self._snapshot

    @property
    def buckets(self) -> BucketMap:
        return self._snapshot.buckets

    @property
    def history(self) -> list[PracticeRecord]:
        return self._snapshot.history

    def card(self, front: str) -> Flashcard:
        """
        Look up a card by its front text.

        Raises:
            CardNotFoundError: If no card has that front.
        """
        found = self._snapshot.find_card(front)
        if found is None:
            raise CardNotFoundError(front)
        return found

    def due_cards(self, day: int | None = None) -> list[Flashcard]:
        """
        Cards due on the given day (defaults to the snapshot's day),
        sorted by front text for stable display.
        """
        snapshot = self._snapshot
        if day is None:
            day = snapshot.day
        due = get_practice_cards(to_bucket_sets(snapshot.buckets), day)
        return sorted(due, key=lambda c: (c.front, c.back))

    def tier_of(self, card: Flashcard) -> int | None:
        return find_card_tier(self.buckets, card)

    def hint(self, front: str) -> str:
        return get_hint(self.card(front))

    def answer(
        self,
        card: Flashcard,
        difficulty: AnswerDifficulty,
        day: int | None = None,
    ) -> PracticeRecord:
        """
        Record an answer: move the card and append a practice record.

        Returns:
            The record appended to the history.
        """
        with self._lock:
            snapshot = self._snapshot
            if day is None:
                day = snapshot.day

            # Untracked cards are scheduled as if they sat in tier 0.
            previous = find_card_tier(snapshot.buckets, card)
            if previous is None:
                previous = NEW_CARD_TIER
            updated = update_buckets(snapshot.buckets, card, difficulty)
            record = PracticeRecord(
                card_front=card.front,
                card_back=card.back,
                difficulty=difficulty,
                day=day,
                previous_bucket=previous,
                new_bucket=find_card_tier(updated, card),
            )

            cards = snapshot.cards
            if card not in cards:
                cards = [*cards, card]

            self._snapshot = DeckSnapshot(
                cards=cards,
                buckets=updated,
                history=[*snapshot.history, record],
                day=snapshot.day,
            )

        logger.info(
            "Answered %r as %s: tier %s -> %s",
            card.front,
            difficulty.name.lower(),
            previous,
            record.new_bucket,
        )
        return record

    def progress(self) -> ProgressStats:
        snapshot = self._snapshot
        return self._calc.analyze(snapshot.buckets, snapshot.history)
