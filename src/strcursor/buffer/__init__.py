"""Text buffers, UTF-8 boundary helpers and error types."""

from .boundary import (
    encode_scalar,
    identity_equal,
    is_code_point_boundary,
    is_continuation,
    lead_byte_width,
    offset_to_position,
    seek_boundary_left,
    seek_boundary_right,
    utf8_width,
)
from .buffer import BufferSource, TextBuffer
from .validation import (
    BoundaryExceeded,
    BoundsError,
    CursorError,
    InvalidUtf8Error,
    bounds_error,
    ensure_offset,
)

__all__ = [
    "TextBuffer",
    "BufferSource",
    "CursorError",
    "BoundaryExceeded",
    "BoundsError",
    "InvalidUtf8Error",
    "bounds_error",
    "ensure_offset",
    "encode_scalar",
    "identity_equal",
    "is_code_point_boundary",
    "is_continuation",
    "lead_byte_width",
    "offset_to_position",
    "seek_boundary_left",
    "seek_boundary_right",
    "utf8_width",
]
