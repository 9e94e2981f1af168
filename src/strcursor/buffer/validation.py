"""Error types and offset validation shared across buffer services."""

from __future__ import annotations

from typing import Optional

from strcursor.runtime import telemetry


class CursorError(RuntimeError):
    """Base class for faults raised by buffers and cursors."""

    def __init__(
        self,
        message: str,
        *,
        offset: Optional[int] = None,
        length: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.offset = offset
        self.length = length


class BoundaryExceeded(CursorError):
    """Raised when an in-place seek has nowhere left to go."""


class BoundsError(BoundaryExceeded, IndexError):
    """Raised when a caller supplies an offset outside the buffer or inside a code point."""


class InvalidUtf8Error(CursorError, ValueError):
    """Raised when bytes handed to a buffer are not well-formed UTF-8."""


def bounds_error(
    message: str,
    *,
    offset: int,
    length: int,
    event: str = "buffer.bounds_error",
) -> BoundsError:
    """Record ``event`` as a warning and return the matching :class:`BoundsError`."""

    telemetry.record_event(
        event, level="warning", data={"offset": offset, "length": length}
    )
    return BoundsError(message, offset=offset, length=length)


def ensure_offset(length: int, offset: int) -> int:
    if offset < 0 or offset > length:
        raise bounds_error(
            f"Byte offset {offset} out of range for buffer of length {length}",
            offset=offset,
            length=length,
            event="buffer.offset_out_of_range",
        )
    return offset


__all__ = [
    "CursorError",
    "BoundaryExceeded",
    "BoundsError",
    "InvalidUtf8Error",
    "bounds_error",
    "ensure_offset",
]
