"""
Progress calculator for deriving aggregate statistics from tiers and history.

This is a pure computation module with no I/O.
"""

from collections import Counter
from collections.abc import Sequence

from tierdeck.domain.cards.models import BucketMap, PracticeRecord, ProgressStats


class ProgressCalculator:
    """
    Computes a ProgressStats snapshot from a tier mapping and practice history.

    Stateless and side-effect free.
    """

    def analyze(self, buckets: BucketMap, history: Sequence[PracticeRecord]) -> ProgressStats:
        """
        Summarize the deck and the learner's answers.

        Empty inputs produce zeroed statistics.
        """
        cards_by_bucket = self._count_by_bucket(buckets)

        return ProgressStats(
            total_cards=sum(cards_by_bucket),
            cards_by_bucket=cards_by_bucket,
            success_rate=self._compute_success_rate(history),
            average_moves_per_card=self._compute_average_moves(history),
            total_practice_events=len(history),
        )

    def _count_by_bucket(self, buckets: BucketMap) -> tuple[int, ...]:
        """
        Dense per-tier card counts, with zeros for missing tiers.
        """
        highest = max(buckets, default=0)
        return tuple(len(buckets.get(tier, ())) for tier in range(highest + 1))

    def _compute_success_rate(self, history: Sequence[PracticeRecord]) -> float:
        """
        Percentage of attempts answered Easy or Hard.
        """
        if not history:
            return 0.0
        successes = sum(1 for record in history if record.difficulty.is_success)
        return successes / len(history) * 100

    def _compute_average_moves(self, history: Sequence[PracticeRecord]) -> float:
        """
        Mean number of attempts per distinct (front, back) card.
        """
        attempts = Counter(record.card_key for record in history)
        if not attempts:
            return 0.0
        return sum(attempts.values()) / len(attempts)


def compute_progress(buckets: BucketMap, history: Sequence[PracticeRecord]) -> ProgressStats:
    return ProgressCalculator().analyze(buckets, history)
