"""Cursor over a :class:`~strcursor.buffer.TextBuffer`.

A cursor is a buffer plus a byte offset. The offset always sits on a code
point boundary, so every slice taken from cursors decodes cleanly. Methods
that only use grapheme movement also keep it on a cluster boundary; mixing in
code point movement can leave it inside a cluster, after which cluster-level
answers are still safe but no longer meaningful.

Movement comes in two flavours:

* ``step_*`` returns a new cursor, or ``None`` at the edge of the buffer;
* ``seek_*`` moves this cursor in place and raises
  :class:`~strcursor.buffer.BoundaryExceeded` at the edge.

Forward cluster lookups decode a bounded window after the cursor and grow it
until the oracle confirms the cluster end. Backward lookups walk left to the
nearest unconditional break and segment forward from there.
"""

from __future__ import annotations

from typing import Callable, Optional, Tuple

from strcursor.buffer.boundary import (
    identity_equal,
    is_code_point_boundary,
    lead_byte_width,
    offset_to_position,
    seek_boundary_left,
    seek_boundary_right,
)
from strcursor.buffer.buffer import TextBuffer
from strcursor.buffer.validation import BoundaryExceeded, bounds_error, ensure_offset
from strcursor.grapheme.cluster import Grapheme
from strcursor.runtime import settings, telemetry

from .iteration import CodePointsAfter, CodePointsBefore, GraphemesAfter, GraphemesBefore

GraphemePredicate = Callable[[Grapheme], bool]
CodePointPredicate = Callable[[str], bool]


def _require_buffer(buffer: TextBuffer) -> TextBuffer:
    if not isinstance(buffer, TextBuffer):
        raise TypeError(
            f"Cursor needs a TextBuffer, got {type(buffer).__name__}; "
            "wrap text with TextBuffer(...) first"
        )
    return buffer


class Cursor:
    """Position between two code points (ideally two clusters) of a buffer."""

    __slots__ = ("buffer", "_offset")

    def __init__(self, buffer: TextBuffer, offset: int) -> None:
        _require_buffer(buffer)
        ensure_offset(len(buffer), offset)
        if not is_code_point_boundary(buffer.data, offset):
            raise bounds_error(
                f"Byte offset {offset} falls inside a code point",
                offset=offset,
                length=len(buffer),
                event="cursor.misaligned_offset",
            )
        self.buffer = buffer
        self._offset = offset

    @classmethod
    def _unchecked(cls, buffer: TextBuffer, offset: int) -> "Cursor":
        # Only for offsets already produced by the boundary routines.
        cursor = cls.__new__(cls)
        cursor.buffer = buffer
        cursor._offset = offset
        return cursor

    # Construction -------------------------------------------------------

    @classmethod
    def at_start(cls, buffer: TextBuffer) -> "Cursor":
        return cls._unchecked(_require_buffer(buffer), 0)

    @classmethod
    def at_end(cls, buffer: TextBuffer) -> "Cursor":
        return cls._unchecked(_require_buffer(buffer), len(buffer))

    @classmethod
    def at_code_point_left_of(cls, buffer: TextBuffer, pos: int) -> "Cursor":
        """Cursor at the code point starting at or before ``pos``.

        Prefer :meth:`at_grapheme_left_of` unless code points are really what
        you want.
        """

        position = offset_to_position(_require_buffer(buffer), pos)
        return cls._unchecked(buffer, seek_boundary_left(buffer.data, position))

    @classmethod
    def at_code_point_right_of(cls, buffer: TextBuffer, pos: int) -> "Cursor":
        """Cursor at the code point starting at or after ``pos``."""

        position = offset_to_position(_require_buffer(buffer), pos)
        return cls._unchecked(buffer, seek_boundary_right(buffer.data, position))

    @classmethod
    def at_grapheme_left_of(cls, buffer: TextBuffer, pos: int) -> "Cursor":
        """Cursor at the grapheme cluster starting at or before ``pos``."""

        cursor = cls.at_code_point_left_of(buffer, pos)
        previous = cursor.step_left_grapheme()
        if previous is None:
            return cursor

        cluster = previous.grapheme_after()
        if cluster is not None and previous._offset + cluster.byte_len() > pos:
            return previous
        return cursor

    @classmethod
    def at_grapheme_right_of(cls, buffer: TextBuffer, pos: int) -> "Cursor":
        """Cursor at the grapheme cluster starting at or after ``pos``.

        Derived from :meth:`at_grapheme_left_of`: the forward step starts from
        a known cluster boundary rather than from ``pos`` itself.
        """

        cursor = cls.at_grapheme_left_of(buffer, pos)
        if cursor._offset == pos:
            return cursor
        following = cursor.step_right_grapheme()
        return following if following is not None else cursor

    # Inspection ---------------------------------------------------------

    @property
    def offset(self) -> int:
        return self._offset

    def byte_position(self) -> int:
        """Number of UTF-8 bytes between the start of the buffer and the cursor."""

        return self._offset

    def grapheme_before(self) -> Optional[Grapheme]:
        """The text from the previous cluster start up to the cursor."""

        step = self.prev_grapheme()
        if step is None:
            return None
        return step[0]

    def grapheme_after(self) -> Optional[Grapheme]:
        data = self.buffer.data
        length = len(data)
        if self._offset >= length:
            return None

        window = settings.segment_window()
        while True:
            end = seek_boundary_right(data, min(self._offset + window, length))
            split = Grapheme.split_leading(self.buffer.decode(self._offset, end))
            if split is None:
                return None
            cluster, rest = split
            # A cluster that fills the window may continue past it.
            if rest or end == length:
                return cluster
            window *= 2

    def code_point_before(self) -> Optional[str]:
        previous = self.step_left_code_point()
        if previous is None:
            return None
        return previous.code_point_after()

    def code_point_after(self) -> Optional[str]:
        data = self.buffer.data
        if self._offset >= len(data):
            return None
        end = self._offset + lead_byte_width(data[self._offset])
        return self.buffer.decode(self._offset, end)

    def text_before(self) -> str:
        return self.buffer.decode(0, self._offset)

    def text_after(self) -> str:
        return self.buffer.decode(self._offset, len(self.buffer))

    def text_whole(self) -> str:
        return self.buffer.text

    def text_between(self, other: "Cursor") -> Optional[str]:
        """Text between two cursors in either order.

        ``None`` when the cursors belong to different buffers, including
        different buffers with the same content.
        """

        if not identity_equal(self.buffer, other.buffer):
            return None
        start, end = sorted((self._offset, other._offset))
        return self.buffer.decode(start, end)

    def text_until(self, end: "Cursor") -> Optional[str]:
        """Text from this cursor up to ``end``; empty if ``end`` comes first."""

        if not identity_equal(self.buffer, end.buffer):
            return None
        return self._slice_until(end)

    def _slice_until(self, end: "Cursor") -> str:
        if end._offset <= self._offset:
            return ""
        return self.buffer.decode(self._offset, end._offset)

    # Movement -----------------------------------------------------------

    def step_left_grapheme(self) -> Optional["Cursor"]:
        start = self.buffer.grapheme_start_before(self._offset)
        if start is None:
            return None
        return self._unchecked(self.buffer, start)

    def step_right_grapheme(self) -> Optional["Cursor"]:
        cluster = self.grapheme_after()
        if cluster is None:
            return None
        return self._unchecked(self.buffer, self._offset + cluster.byte_len())

    def step_left_code_point(self) -> Optional["Cursor"]:
        if self._offset == 0:
            return None
        position = seek_boundary_left(self.buffer.data, self._offset - 1)
        return self._unchecked(self.buffer, position)

    def step_right_code_point(self) -> Optional["Cursor"]:
        if self._offset >= len(self.buffer):
            return None
        position = seek_boundary_right(self.buffer.data, self._offset + 1)
        return self._unchecked(self.buffer, position)

    def prev_grapheme(self) -> Optional[Tuple[Grapheme, "Cursor"]]:
        """The cluster before the cursor and the cursor moved in front of it."""

        start = self.buffer.grapheme_start_before(self._offset)
        if start is None:
            return None
        cluster = Grapheme._trusted(self.buffer.decode(start, self._offset))
        return cluster, self._unchecked(self.buffer, start)

    def next_grapheme(self) -> Optional[Tuple[Grapheme, "Cursor"]]:
        """The cluster after the cursor and the cursor moved past it."""

        cluster = self.grapheme_after()
        if cluster is None:
            return None
        return cluster, self._unchecked(self.buffer, self._offset + cluster.byte_len())

    def prev_code_point(self) -> Optional[Tuple[str, "Cursor"]]:
        previous = self.step_left_code_point()
        if previous is None:
            return None
        return self.buffer.decode(previous._offset, self._offset), previous

    def next_code_point(self) -> Optional[Tuple[str, "Cursor"]]:
        following = self.step_right_code_point()
        if following is None:
            return None
        return self.buffer.decode(self._offset, following._offset), following

    def seek_left_grapheme(self) -> None:
        self._seek(self.step_left_grapheme(), "beginning")

    def seek_right_grapheme(self) -> None:
        self._seek(self.step_right_grapheme(), "end")

    def seek_left_code_point(self) -> None:
        self._seek(self.step_left_code_point(), "beginning")

    def seek_right_code_point(self) -> None:
        self._seek(self.step_right_code_point(), "end")

    def _seek(self, target: Optional["Cursor"], edge: str) -> None:
        if target is None:
            telemetry.record_event(
                "cursor.boundary_exceeded",
                level="warning",
                data={"offset": self._offset, "length": len(self.buffer), "edge": edge},
            )
            raise BoundaryExceeded(
                f"cannot seek past the {edge} of the buffer",
                offset=self._offset,
                length=len(self.buffer),
            )
        self._offset = target._offset

    # Predicate scans ----------------------------------------------------

    def before_while(self, predicate: GraphemePredicate) -> Tuple[str, "Cursor"]:
        """Walk left over clusters while ``predicate`` holds.

        Returns the text walked over and the cursor where the walk stopped.
        """

        at = self
        while True:
            step = at.prev_grapheme()
            if step is None or not predicate(step[0]):
                break
            at = step[1]
        return at._slice_until(self), at

    def after_while(self, predicate: GraphemePredicate) -> Tuple[str, "Cursor"]:
        at = self
        while True:
            step = at.next_grapheme()
            if step is None or not predicate(step[0]):
                break
            at = step[1]
        return self._slice_until(at), at

    def code_point_before_while(
        self, predicate: CodePointPredicate
    ) -> Tuple[str, "Cursor"]:
        at = self
        while True:
            step = at.prev_code_point()
            if step is None or not predicate(step[0]):
                break
            at = step[1]
        return at._slice_until(self), at

    def code_point_after_while(
        self, predicate: CodePointPredicate
    ) -> Tuple[str, "Cursor"]:
        at = self
        while True:
            step = at.next_code_point()
            if step is None or not predicate(step[0]):
                break
            at = step[1]
        return self._slice_until(at), at

    # Iteration ----------------------------------------------------------

    def iter_before(self) -> GraphemesBefore:
        """Clusters right-to-left from the cursor; ``.with_cursor()`` adds positions."""

        return GraphemesBefore(self)

    def iter_after(self) -> GraphemesAfter:
        return GraphemesAfter(self)

    def iter_code_points_before(self) -> CodePointsBefore:
        return CodePointsBefore(self)

    def iter_code_points_after(self) -> CodePointsAfter:
        return CodePointsAfter(self)

    # Value semantics ----------------------------------------------------

    def copy(self) -> "Cursor":
        return self._unchecked(self.buffer, self._offset)

    __copy__ = copy

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cursor):
            return NotImplemented
        return self._offset == other._offset and identity_equal(
            self.buffer, other.buffer
        )

    # Unhashable: seek_* mutate in place.
    __hash__ = None  # type: ignore[assignment]

    def _comparable(self, other: object) -> bool:
        return isinstance(other, Cursor) and identity_equal(self.buffer, other.buffer)

    def __lt__(self, other: "Cursor") -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self._offset < other._offset

    def __le__(self, other: "Cursor") -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self._offset <= other._offset

    def __gt__(self, other: "Cursor") -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self._offset > other._offset

    def __ge__(self, other: "Cursor") -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self._offset >= other._offset

    def __repr__(self) -> str:
        return f"Cursor({self.text_before()!r} | {self.text_after()!r})"


__all__ = ["Cursor", "GraphemePredicate", "CodePointPredicate"]
