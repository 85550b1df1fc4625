"""
Tier-based review scheduling.

Cards live in numbered tiers. Tier 0 is practiced every day; tier t >= 1 is
practiced on days divisible by 2**t. Answering a card moves it between tiers.

All functions are pure: inputs are never mutated and every returned container
is new.
"""

import logging
from collections.abc import Iterable

from tierdeck.domain.cards.models import (
    AnswerDifficulty,
    BucketArray,
    BucketMap,
    Flashcard,
)
from tierdeck.domain.constants import FALLBACK_HINT, NEW_CARD_TIER, SPACING_BASE

logger = logging.getLogger(__name__)


def max_tier(tiers: Iterable[int]) -> int:
    """Highest tier number, or 0 when there are none."""
    return max(tiers, default=0)


def to_bucket_sets(buckets: BucketMap) -> BucketArray:
    """
    Convert a sparse tier mapping into a dense list of card sets.

    Args:
        buckets: Tier number -> cards. Missing tiers are allowed.

    Returns:
        A list covering tiers 0..max tier. Each entry is a copy of the
        tier's set, or an empty set where the mapping has no entry.
    """
    dense: BucketArray = [set() for _ in range(max_tier(buckets) + 1)]
    for tier, cards in buckets.items():
        dense[tier] = set(cards)
    return dense


def review_interval(tier: int) -> int:
    """Days between reviews for a tier (1 for tier 0)."""
    if tier <= NEW_CARD_TIER:
        return 1
    return SPACING_BASE**tier


def is_tier_due(tier: int, day: int) -> bool:
    return day % review_interval(tier) == 0


def get_practice_cards(bucket_sets: BucketArray, day: int) -> set[Flashcard]:
    """
    Select the cards due on a given study day.

    Tier 0 is always due. Tier t >= 1 is due when day % 2**t == 0, so on
    day 0 every tier is due.

    Args:
        bucket_sets: Dense tier list as produced by to_bucket_sets.
        day: Non-negative study day counter.

    Returns:
        The union of all due tiers.
    """
    due: set[Flashcard] = set()
    for tier, cards in enumerate(bucket_sets):
        if is_tier_due(tier, day):
            due.update(cards)

    logger.debug("Day %d: %d cards due across %d tiers", day, len(due), len(bucket_sets))
    return due


def find_card_tier(buckets: BucketMap, card: Flashcard) -> int | None:
    """
    Locate the tier holding a card.

    Tiers are scanned in ascending order, so the lowest tier wins if a card
    was filed twice.
    """
    for tier in sorted(buckets):
        if card in buckets[tier]:
            return tier
    return None


def next_tier(current: int, difficulty: AnswerDifficulty) -> int:
    """Destination tier for an answer given from the current tier."""
    if difficulty is AnswerDifficulty.WRONG:
        return NEW_CARD_TIER
    if difficulty is AnswerDifficulty.HARD:
        return current
    return current + 1


def update_buckets(
    buckets: BucketMap,
    card: Flashcard,
    difficulty: AnswerDifficulty,
) -> BucketMap:
    """
    Re-file a card after it has been answered.

    Wrong sends the card back to tier 0, Hard keeps it where it is and Easy
    promotes it one tier. A card found in no tier is treated as sitting in
    tier 0.

    Args:
        buckets: Current sparse tier mapping. Left untouched.
        card: The answered card.
        difficulty: How the learner answered.

    Returns:
        A new mapping in which the card appears in exactly one tier.
    """
    updated: BucketMap = {tier: set(cards) for tier, cards in buckets.items()}

    current = find_card_tier(updated, card)
    if current is None:
        current = NEW_CARD_TIER
        updated.setdefault(NEW_CARD_TIER, set())
    else:
        updated[current].discard(card)

    destination = next_tier(current, difficulty)
    updated.setdefault(destination, set()).add(card)

    logger.debug(
        "Moved %r from tier %d to tier %d (%s)",
        card.front,
        current,
        destination,
        difficulty.name,
    )
    return updated


def get_hint(card: Flashcard) -> str:
    """Return the card's hint, or a fixed fallback when it has none."""
    if card.hint is None:
        return FALLBACK_HINT
    return card.hint


def find_duplicate_cards(buckets: BucketMap) -> dict[Flashcard, list[int]]:
    """
    Report cards filed under more than one tier.

    Scheduling assumes each card lives in at most one tier; callers that build
    mappings by hand can use this to check that before scheduling.
    """
    seen: dict[Flashcard, list[int]] = {}
    for tier in sorted(buckets):
        for card in buckets[tier]:
            seen.setdefault(card, []).append(tier)
    return {card: tiers for card, tiers in seen.items() if len(tiers) > 1}
