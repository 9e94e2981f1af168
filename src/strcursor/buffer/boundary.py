"""Byte-level UTF-8 boundary helpers.

Everything here works on raw byte offsets. Nothing consults the grapheme
oracle; cluster-level logic lives in :mod:`strcursor.cursor.cursor`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .validation import ensure_offset

if TYPE_CHECKING:
    from .buffer import TextBuffer

TAG_CONT = 0b1000_0000
TAG_TWO_B = 0b1100_0000
TAG_THREE_B = 0b1110_0000
TAG_FOUR_B = 0b1111_0000

MAX_ONE_B = 0x80
MAX_TWO_B = 0x800
MAX_THREE_B = 0x10000
MAX_SCALAR = 0x10FFFF
SURROGATES = range(0xD800, 0xE000)

_CONT_MASK = 0b1100_0000


def is_continuation(byte: int) -> bool:
    """``True`` for ``10xxxxxx`` bytes, which never start a code point."""

    return byte & _CONT_MASK == TAG_CONT


def is_code_point_boundary(data: bytes, position: int) -> bool:
    if position == 0 or position == len(data):
        return True
    if position < 0 or position > len(data):
        return False
    return not is_continuation(data[position])


def offset_to_position(buffer: "TextBuffer", offset: int) -> int:
    """Validate ``offset`` against ``buffer`` and return it as a position.

    Raises :class:`~strcursor.buffer.validation.BoundsError` when the offset
    lies past the end (or before the start) of the buffer.
    """

    return ensure_offset(len(buffer), offset)


def seek_boundary_left(data: bytes, position: int) -> int:
    """Walk left from ``position`` until it sits on a code point start."""

    while 0 < position < len(data) and is_continuation(data[position]):
        position -= 1
    return position


def seek_boundary_right(data: bytes, position: int) -> int:
    """Walk right from ``position`` until it sits on a code point start or the end."""

    end = len(data)
    while position < end and is_continuation(data[position]):
        position += 1
    return position


def utf8_width(code_point: int) -> int:
    if code_point < MAX_ONE_B:
        return 1
    if code_point < MAX_TWO_B:
        return 2
    if code_point < MAX_THREE_B:
        return 3
    return 4


def lead_byte_width(byte: int) -> int:
    """Encoded length announced by a lead byte (1 for stray continuation bytes)."""

    if byte < TAG_CONT:
        return 1
    if byte >= TAG_FOUR_B:
        return 4
    if byte >= TAG_THREE_B:
        return 3
    if byte >= TAG_TWO_B:
        return 2
    return 1


def encode_scalar(value: int, out: bytearray | memoryview) -> Optional[int]:
    """Encode ``value`` as UTF-8 into ``out``.

    Returns the number of bytes written, or ``None`` when ``out`` is too
    short to hold the encoding. ``out`` is left untouched in that case.
    """

    if value < 0 or value > MAX_SCALAR or value in SURROGATES:
        raise ValueError(f"{value:#x} is not a Unicode scalar value")

    room = len(out)
    if value < MAX_ONE_B and room >= 1:
        out[0] = value
        return 1
    if MAX_ONE_B <= value < MAX_TWO_B and room >= 2:
        out[0] = (value >> 6 & 0x1F) | TAG_TWO_B
        out[1] = (value & 0x3F) | TAG_CONT
        return 2
    if MAX_TWO_B <= value < MAX_THREE_B and room >= 3:
        out[0] = (value >> 12 & 0x0F) | TAG_THREE_B
        out[1] = (value >> 6 & 0x3F) | TAG_CONT
        out[2] = (value & 0x3F) | TAG_CONT
        return 3
    if value >= MAX_THREE_B and room >= 4:
        out[0] = (value >> 18 & 0x07) | TAG_FOUR_B
        out[1] = (value >> 12 & 0x3F) | TAG_CONT
        out[2] = (value >> 6 & 0x3F) | TAG_CONT
        out[3] = (value & 0x3F) | TAG_CONT
        return 4
    return None


def identity_equal(a: "TextBuffer", b: "TextBuffer") -> bool:
    """Same storage, same start, same length. Content is never compared."""

    return a.identity == b.identity


__all__ = [
    "is_continuation",
    "is_code_point_boundary",
    "offset_to_position",
    "seek_boundary_left",
    "seek_boundary_right",
    "utf8_width",
    "lead_byte_width",
    "encode_scalar",
    "identity_equal",
]
