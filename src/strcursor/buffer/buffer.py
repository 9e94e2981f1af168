"""Immutable UTF-8 text buffer that cursors and cluster views point into."""

from __future__ import annotations

from typing import Optional, Tuple, Union

from strcursor.grapheme.segmentation import breaks_between, cluster_byte_lengths
from strcursor.runtime import telemetry

from .boundary import is_code_point_boundary, seek_boundary_left
from .validation import InvalidUtf8Error, bounds_error, ensure_offset

BufferSource = Union[str, bytes, bytearray, memoryview]


class TextBuffer:
    """Validated, read-only UTF-8 bytes plus a stable identity.

    Cursors compare buffers by :attr:`identity`, never by content: two
    buffers built from the same text are unrelated, while a sub-buffer that
    covers its parent exactly is the same buffer.

    A root buffer stores ``None`` as its root; sub-buffers hold a strong
    reference to the root so its ``id`` stays reserved while they live.
    """

    __slots__ = ("_root", "_start", "_data", "_text", "__weakref__")

    def __init__(self, text: str = "") -> None:
        if not isinstance(text, str):
            raise TypeError(
                f"TextBuffer expects str, got {type(text).__name__}; "
                "use TextBuffer.from_bytes for encoded input"
            )
        self._root: Optional[TextBuffer] = None
        self._start = 0
        self._data = text.encode("utf-8")
        self._text: Optional[str] = text

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, memoryview]) -> "TextBuffer":
        raw = bytes(data)
        try:
            with telemetry.span(
                "buffer::decode", component="buffer", metadata={"bytes": len(raw)}
            ):
                text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            telemetry.record_event(
                "buffer.invalid_utf8",
                level="error",
                data={"position": exc.start, "length": len(raw)},
            )
            raise InvalidUtf8Error(
                f"Invalid UTF-8 at byte {exc.start}: {exc.reason}",
                offset=exc.start,
                length=len(raw),
            ) from exc
        buffer = cls.__new__(cls)
        buffer._root = None
        buffer._start = 0
        buffer._data = raw
        buffer._text = text
        return buffer

    @classmethod
    def coerce(cls, source: Union["TextBuffer", BufferSource]) -> "TextBuffer":
        """Return ``source`` unchanged if it is a buffer, else wrap it in a new one."""

        if isinstance(source, TextBuffer):
            return source
        if isinstance(source, str):
            return cls(source)
        return cls.from_bytes(source)

    def subbuffer(self, start: int, end: Optional[int] = None) -> "TextBuffer":
        """Return the buffer covering ``[start, end)``, sharing this buffer's root.

        Both offsets must be code point boundaries. The result only shares
        identity with ``self`` when it spans the whole buffer.
        """

        length = len(self._data)
        end = length if end is None else end
        ensure_offset(length, start)
        ensure_offset(length, end)
        if end < start:
            raise bounds_error(
                f"Sub-buffer end {end} precedes start {start}",
                offset=end,
                length=length,
                event="buffer.reversed_range",
            )
        for position in (start, end):
            if not is_code_point_boundary(self._data, position):
                raise bounds_error(
                    f"Byte offset {position} falls inside a code point",
                    offset=position,
                    length=length,
                    event="buffer.misaligned_offset",
                )
        if start == 0 and end == length:
            return self
        view = TextBuffer.__new__(TextBuffer)
        view._root = self._root if self._root is not None else self
        view._start = self._start + start
        view._data = self._data[start:end]
        view._text = None
        return view

    @property
    def identity(self) -> Tuple[int, int, int]:
        root = self._root if self._root is not None else self
        return (id(root), self._start, len(self._data))

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def text(self) -> str:
        if self._text is None:
            self._text = self._data.decode("utf-8")
        return self._text

    def decode(self, start: int, end: int) -> str:
        """Decode ``[start, end)``; callers guarantee both are code point boundaries."""

        if start == 0 and end == len(self._data):
            return self.text
        return self._data[start:end].decode("utf-8")

    def grapheme_start_before(self, offset: int) -> Optional[int]:
        """Start of the last cluster in ``text[:offset]``, or ``None`` at offset 0.

        Walks left one code point at a time until it reaches a position where
        a break holds regardless of what precedes it, then segments forward
        from there. The walk covers the cluster being stepped over, plus the
        cluster in front of it when that one ends in an extending character.
        An unbroken run of regional indicators is walked in full.
        """

        if offset <= 0:
            return None
        data = self._data
        anchor = seek_boundary_left(data, offset - 1)
        after = self.decode(anchor, offset)
        while anchor > 0:
            previous = seek_boundary_left(data, anchor - 1)
            before = self.decode(previous, anchor)
            if breaks_between(before, after):
                break
            anchor, after = previous, before
        *_, last = cluster_byte_lengths(self.decode(anchor, offset))
        return offset - last

    def __len__(self) -> int:
        return len(self._data)

    def __bytes__(self) -> bytes:
        return self._data

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"TextBuffer({self.text!r})"


__all__ = ["TextBuffer", "BufferSource"]
