"""
YAML Deck Repository: Infrastructure adapter for deck snapshot files.

Implements DeckRepository over a single YAML document:

    version: 1
    day: 4
    cards:
      - front: hola
        back: hello
        hint: greeting
    buckets:
      0: [hola]
      2: [adios]
    history:
      - front: hola
        back: hello
        difficulty: easy
        day: 0

Buckets list cards by front text, so fronts must be unique within a deck.
Cards that appear in no bucket are filed into tier 0 on load.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
import yaml.constructor

from tierdeck.application.scheduler import find_duplicate_cards
from tierdeck.domain.cards.models import AnswerDifficulty, BucketMap, Flashcard, PracticeRecord
from tierdeck.domain.cards.ports import DeckRepository, DeckSnapshot
from tierdeck.domain.constants import DECK_FORMAT_VERSION, NEW_CARD_TIER
from tierdeck.domain.errors import DeckFormatError

logger = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that forbids duplicate keys."""

    def construct_mapping(self, node, deep=False):
        keys = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if key in keys:
                raise yaml.constructor.ConstructorError(
                    None, None, f"found duplicate key '{key}'", key_node.start_mark
                )
            keys.add(key)
        return super().construct_mapping(node, deep)


class YamlDeckRepository(DeckRepository):
    """
    Reads and writes a deck snapshot as YAML.

    A missing file loads as an empty deck.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> DeckSnapshot:
        if not self.path.exists():
            logger.info("Deck file %s does not exist; starting empty", self.path)
            return DeckSnapshot()

        try:
            raw = yaml.load(self.path.read_text(encoding="utf-8"), Loader=UniqueKeyLoader) or {}
        except yaml.YAMLError as e:
            raise DeckFormatError(f"{self.path}: invalid YAML: {e}") from e

        snapshot = parse_snapshot(raw)
        logger.info(
            "Loaded %d cards in %d tiers from %s",
            len(snapshot.cards),
            len(snapshot.buckets),
            self.path,
        )
        return snapshot

    def save(self, snapshot: DeckSnapshot) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        text = yaml.safe_dump(dump_snapshot(snapshot), sort_keys=False, allow_unicode=True)
        self.path.write_text(text, encoding="utf-8")
        logger.info("Saved deck to %s", self.path)


# ---------- Parsing ----------


def parse_snapshot(raw: Any) -> DeckSnapshot:
    """
    Build a DeckSnapshot from decoded YAML.

    Raises:
        DeckFormatError: On any structural problem.
    """
    if not isinstance(raw, dict):
        raise DeckFormatError("Deck file must contain a mapping at the top level")

    version = raw.get("version", DECK_FORMAT_VERSION)
    if version != DECK_FORMAT_VERSION:
        raise DeckFormatError(f"Unsupported deck format version: {version!r}")

    day = raw.get("day", 0)
    if not _is_non_negative_int(day):
        raise DeckFormatError(f"'day' must be a non-negative integer, got {day!r}")

    cards = [_parse_card(entry, i) for i, entry in enumerate(_require_list(raw, "cards"))]
    by_front: dict[str, Flashcard] = {}
    for card in cards:
        if card.front in by_front:
            raise DeckFormatError(f"Duplicate card front: {card.front!r}")
        by_front[card.front] = card

    buckets = _parse_buckets(raw.get("buckets") or {}, by_front)
    history = [_parse_record(entry, i) for i, entry in enumerate(_require_list(raw, "history"))]

    return DeckSnapshot(cards=cards, buckets=buckets, history=history, day=day)


def _require_list(raw: dict, field: str) -> list:
    value = raw.get(field) or []
    if not isinstance(value, list):
        raise DeckFormatError(f"'{field}' must be a list")
    return value


def _is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _require_str(entry: dict, field: str, where: str) -> str:
    value = entry.get(field)
    if not isinstance(value, str):
        raise DeckFormatError(f"{where}: '{field}' must be a string")
    return value


def _parse_card(entry: Any, index: int) -> Flashcard:
    where = f"cards[{index}]"
    if not isinstance(entry, dict):
        raise DeckFormatError(f"{where}: expected a mapping")

    hint = entry.get("hint")
    if hint is not None and not isinstance(hint, str):
        raise DeckFormatError(f"{where}: 'hint' must be a string")

    tags = entry.get("tags") or []
    if not isinstance(tags, list):
        raise DeckFormatError(f"{where}: 'tags' must be a list")

    return Flashcard(
        front=_require_str(entry, "front", where),
        back=_require_str(entry, "back", where),
        hint=hint,
        tags=tuple(str(t) for t in tags),
    )


def _parse_buckets(raw: Any, by_front: dict[str, Flashcard]) -> BucketMap:
    if not isinstance(raw, dict):
        raise DeckFormatError("'buckets' must be a mapping of tier -> card fronts")

    buckets: BucketMap = {}
    for tier, fronts in raw.items():
        if not _is_non_negative_int(tier):
            raise DeckFormatError(f"Tier keys must be non-negative integers, got {tier!r}")
        if not isinstance(fronts, list):
            raise DeckFormatError(f"buckets[{tier}]: expected a list of card fronts")

        cards: set[Flashcard] = set()
        for front in fronts:
            if not isinstance(front, str):
                raise DeckFormatError(
                    f"buckets[{tier}]: card fronts must be strings, got {front!r}"
                )
            card = by_front.get(front)
            if card is None:
                raise DeckFormatError(f"buckets[{tier}]: unknown card {front!r}")
            cards.add(card)
        buckets[tier] = cards

    duplicates = find_duplicate_cards(buckets)
    if duplicates:
        card, tiers = next(iter(duplicates.items()))
        raise DeckFormatError(f"Card {card.front!r} is filed in several tiers: {tiers}")

    filed = set().union(*buckets.values()) if buckets else set()
    unfiled = [card for card in by_front.values() if card not in filed]
    if unfiled:
        logger.debug("Filing %d new cards into tier %d", len(unfiled), NEW_CARD_TIER)
        buckets.setdefault(NEW_CARD_TIER, set()).update(unfiled)

    return buckets


def _parse_record(entry: Any, index: int) -> PracticeRecord:
    where = f"history[{index}]"
    if not isinstance(entry, dict):
        raise DeckFormatError(f"{where}: expected a mapping")

    try:
        difficulty = AnswerDifficulty.parse(str(entry.get("difficulty", "")))
    except ValueError as e:
        raise DeckFormatError(f"{where}: {e}") from e

    optional_ints = {}
    for field in ("day", "previous_bucket", "new_bucket"):
        value = entry.get(field)
        if value is not None and not _is_non_negative_int(value):
            raise DeckFormatError(f"{where}: '{field}' must be a non-negative integer")
        optional_ints[field] = value

    return PracticeRecord(
        card_front=_require_str(entry, "front", where),
        card_back=_require_str(entry, "back", where),
        difficulty=difficulty,
        **optional_ints,
    )


# ---------- Dumping ----------


def dump_snapshot(snapshot: DeckSnapshot) -> dict[str, Any]:
    """Plain-data form of a snapshot, with tiers and fronts sorted."""
    cards = []
    for card in snapshot.cards:
        entry: dict[str, Any] = {"front": card.front, "back": card.back}
        if card.hint is not None:
            entry["hint"] = card.hint
        if card.tags:
            entry["tags"] = list(card.tags)
        cards.append(entry)

    history = []
    for record in snapshot.history:
        entry = {
            "front": record.card_front,
            "back": record.card_back,
            "difficulty": record.difficulty.name.lower(),
        }
        for field in ("day", "previous_bucket", "new_bucket"):
            value = getattr(record, field)
            if value is not None:
                entry[field] = value
        history.append(entry)

    return {
        "version": DECK_FORMAT_VERSION,
        "day": snapshot.day,
        "cards": cards,
        "buckets": {
            tier: sorted(card.front for card in snapshot.buckets[tier])
            for tier in sorted(snapshot.buckets)
            if snapshot.buckets[tier]
        },
        "history": history,
    }
