"""Lazy iterators that repeatedly step a cursor."""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, Iterator, Optional, Tuple, TypeVar

from strcursor.grapheme.cluster import Grapheme

if TYPE_CHECKING:
    from .cursor import Cursor

T = TypeVar("T")


class _CursorIter(Generic[T]):
    """Holds the current cursor; subclasses choose the step."""

    __slots__ = ("cursor",)

    def __init__(self, cursor: "Cursor") -> None:
        self.cursor = cursor

    def _step(self) -> Optional[Tuple[T, "Cursor"]]:  # pragma: no cover - abstract
        raise NotImplementedError

    def _remaining_bytes(self) -> int:  # pragma: no cover - abstract
        raise NotImplementedError

    def advance(self) -> Optional[Tuple[T, "Cursor"]]:
        """Step once, remember the new cursor and return ``(element, cursor)``."""

        step = self._step()
        if step is not None:
            self.cursor = step[1]
        return step

    def __iter__(self) -> "_CursorIter[T]":
        return self

    def __next__(self) -> T:
        step = self.advance()
        if step is None:
            raise StopIteration
        return step[0]

    def size_hint(self) -> Tuple[int, int]:
        """Lower and upper bound on the number of elements left."""

        remaining = self._remaining_bytes()
        if remaining == 0:
            return (0, 0)
        return (1, remaining)

    def with_cursor(self) -> "WithCursor[T]":
        """Yield ``(element, cursor after the step)`` pairs instead."""

        return WithCursor(self)


class WithCursor(Generic[T]):
    """Wraps a cursor iterator so each item carries the post-step cursor."""

    __slots__ = ("inner",)

    def __init__(self, inner: _CursorIter[T]) -> None:
        self.inner = inner

    @property
    def cursor(self) -> "Cursor":
        return self.inner.cursor

    def __iter__(self) -> Iterator[Tuple[T, "Cursor"]]:
        return self

    def __next__(self) -> Tuple[T, "Cursor"]:
        step = self.inner.advance()
        if step is None:
            raise StopIteration
        return step

    def size_hint(self) -> Tuple[int, int]:
        return self.inner.size_hint()


class GraphemesBefore(_CursorIter[Grapheme]):
    """Clusters right-to-left."""

    __slots__ = ()

    def _step(self) -> Optional[Tuple[Grapheme, "Cursor"]]:
        return self.cursor.prev_grapheme()

    def _remaining_bytes(self) -> int:
        return self.cursor.byte_position()


class GraphemesAfter(_CursorIter[Grapheme]):
    """Clusters left-to-right."""

    __slots__ = ()

    def _step(self) -> Optional[Tuple[Grapheme, "Cursor"]]:
        return self.cursor.next_grapheme()

    def _remaining_bytes(self) -> int:
        return len(self.cursor.buffer) - self.cursor.byte_position()


class CodePointsBefore(_CursorIter[str]):
    """Code points right-to-left."""

    __slots__ = ()

    def _step(self) -> Optional[Tuple[str, "Cursor"]]:
        return self.cursor.prev_code_point()

    def _remaining_bytes(self) -> int:
        return self.cursor.byte_position()


class CodePointsAfter(_CursorIter[str]):
    """Code points left-to-right."""

    __slots__ = ()

    def _step(self) -> Optional[Tuple[str, "Cursor"]]:
        return self.cursor.next_code_point()

    def _remaining_bytes(self) -> int:
        return len(self.cursor.buffer) - self.cursor.byte_position()


__all__ = [
    "GraphemesBefore",
    "GraphemesAfter",
    "CodePointsBefore",
    "CodePointsAfter",
    "WithCursor",
]
