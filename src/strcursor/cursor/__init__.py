"""Cursor engine and the iterators built on it."""

from .cursor import CodePointPredicate, Cursor, GraphemePredicate
from .iteration import (
    CodePointsAfter,
    CodePointsBefore,
    GraphemesAfter,
    GraphemesBefore,
    WithCursor,
)

__all__ = [
    "Cursor",
    "GraphemePredicate",
    "CodePointPredicate",
    "GraphemesBefore",
    "GraphemesAfter",
    "CodePointsBefore",
    "CodePointsAfter",
    "WithCursor",
]
