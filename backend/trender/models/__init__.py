"""Database models"""
from .base import Base
from .card import Card, NEUTRAL_SCORE, SCORE_FIELDS
from .count import Count, COUNT_UNIQUE_KEY

__all__ = [
    "Base",
    "Card",
    "Count",
    "NEUTRAL_SCORE",
    "SCORE_FIELDS",
    "COUNT_UNIQUE_KEY",
]
