"""Cursors over UTF-8 text that respect code point and grapheme cluster boundaries."""

from .buffer import (
    BoundaryExceeded,
    BoundsError,
    CursorError,
    InvalidUtf8Error,
    TextBuffer,
)
from .cursor import (
    CodePointsAfter,
    CodePointsBefore,
    Cursor,
    GraphemesAfter,
    GraphemesBefore,
    WithCursor,
)
from .grapheme import Grapheme, GraphemeBuf

__all__ = [
    "TextBuffer",
    "Cursor",
    "Grapheme",
    "GraphemeBuf",
    "GraphemesBefore",
    "GraphemesAfter",
    "CodePointsBefore",
    "CodePointsAfter",
    "WithCursor",
    "CursorError",
    "BoundaryExceeded",
    "BoundsError",
    "InvalidUtf8Error",
]

__version__ = "0.1.0"
