"""Centralized constants for tierdeck.

Scheduling behavior is fixed; these values are shared by every layer.
"""

# ---------- Hints ----------
FALLBACK_HINT = "No contextual guidance available for this card."

# ---------- Tiers ----------
NEW_CARD_TIER = 0
SPACING_BASE = 2  # tier t is reviewed every SPACING_BASE**t days

# ---------- Deck snapshot ----------
DEFAULT_DECK_FILE = "deck.yaml"
DECK_FORMAT_VERSION = 1
