# Domain Cards Package
from .models import (
    AnswerDifficulty,
    BucketArray,
    BucketMap,
    Flashcard,
    PracticeRecord,
    ProgressStats,
)
from .ports import DeckRepository, DeckSnapshot

__all__ = [
    "AnswerDifficulty",
    "BucketArray",
    "BucketMap",
    "Flashcard",
    "PracticeRecord",
    "ProgressStats",
    "DeckRepository",
    "DeckSnapshot",
]
