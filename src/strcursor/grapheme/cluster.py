"""Single grapheme cluster types and their cross-kind comparisons.

:class:`Grapheme` is a view guaranteed to hold exactly one extended grapheme
cluster. :class:`GraphemeBuf` is an owned copy that can also be built from a
single character.

Both compare against characters (one-character ``str``), raw text (``str``
or UTF-8 ``bytes``) and each other. Every operator normalises its operand
into an :class:`Operand` first and then goes through :func:`compare`, so the
whole matrix is expressed once. Against a character the rule is:

* equal only when the cluster has no marks and its base is that character;
* otherwise order by base character, and a marked cluster whose base equals
  the character sorts immediately after it.

Hashing follows the ``str`` form only: a cluster hashes like its text, so it
can stand in for that string in sets and dict keys. Equal ``bytes`` do not
hash the same and never find a cluster in a hashed container.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator, Optional, Tuple, Union

from strcursor.buffer.boundary import encode_scalar, utf8_width

from .segmentation import first_cluster


class OperandKind(Enum):
    CHARACTER = "character"
    TEXT = "text"
    CLUSTER = "cluster"


@dataclass(frozen=True, slots=True)
class Operand:
    """Comparison operand reduced to its kind and text."""

    kind: OperandKind
    text: str


def normalize(value: Any) -> Optional[Operand]:
    """Classify ``value`` for comparison, or ``None`` if it cannot be compared."""

    if isinstance(value, _Cluster):
        return Operand(OperandKind.CLUSTER, value.as_str())
    if isinstance(value, str):
        kind = OperandKind.CHARACTER if len(value) == 1 else OperandKind.TEXT
        return Operand(kind, value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        try:
            text = bytes(value).decode("utf-8")
        except UnicodeDecodeError:
            return None
        return Operand(OperandKind.TEXT, text)
    return None


def _sign(left: str, right: str) -> int:
    return (left > right) - (left < right)


def compare(cluster: "_Cluster", operand: Operand) -> int:
    """Three-way comparison of ``cluster`` against a normalised operand."""

    if operand.kind is OperandKind.CHARACTER:
        return cluster.ordering_vs_character(operand.text)
    # Code point order on str matches byte order on UTF-8.
    return _sign(cluster.as_str(), operand.text)


def _require_character(ch: str) -> str:
    if not isinstance(ch, str) or len(ch) != 1:
        raise TypeError(f"expected a single character, got {ch!r}")
    return ch


CharMatcher = Union[str, Callable[[str], bool]]


class _Cluster:
    """Queries and comparisons shared by views and owned clusters."""

    __slots__ = ("_text", "_raw")

    _text: str
    _raw: Optional[bytes]

    def as_str(self) -> str:
        return self._text

    def as_bytes(self) -> bytes:
        if self._raw is None:
            self._raw = self._text.encode("utf-8")
        return self._raw

    def byte_len(self) -> int:
        return len(self.as_bytes())

    def __len__(self) -> int:
        """Length in UTF-8 bytes, the distance a cursor moves over this cluster."""

        return self.byte_len()

    def base_char(self) -> str:
        return self._text[0]

    def has_marks(self) -> bool:
        return self.byte_len() > utf8_width(ord(self.base_char()))

    def mark_str(self) -> str:
        return self._text[1:]

    def is_base(self, matcher: CharMatcher) -> bool:
        """``True`` when the cluster is a bare base character matching ``matcher``.

        ``matcher`` is either a character or a predicate over one.
        """

        if self.has_marks():
            return False
        if callable(matcher):
            return bool(matcher(self.base_char()))
        return self.base_char() == _require_character(matcher)

    def chars(self) -> Iterator[str]:
        return iter(self._text)

    def char_indices(self) -> Iterator[Tuple[int, str]]:
        """Yield ``(byte index, character)`` pairs."""

        index = 0
        for ch in self._text:
            yield index, ch
            index += utf8_width(ord(ch))

    def iter_bytes(self) -> Iterator[int]:
        return iter(self.as_bytes())

    def to_lower(self) -> str:
        return self._text.lower()

    def to_upper(self) -> str:
        return self._text.upper()

    def equals_character(self, ch: str) -> bool:
        return not self.has_marks() and self.base_char() == _require_character(ch)

    def ordering_vs_character(self, ch: str) -> int:
        base = self.base_char()
        ch = _require_character(ch)
        if base != ch:
            return -1 if base < ch else 1
        return 1 if self.has_marks() else 0

    def _compare(self, other: Any) -> Optional[int]:
        operand = normalize(other)
        if operand is None:
            return None
        return compare(self, operand)

    def __eq__(self, other: object) -> bool:
        result = self._compare(other)
        if result is None:
            return NotImplemented
        return result == 0

    def __ne__(self, other: object) -> bool:
        result = self._compare(other)
        if result is None:
            return NotImplemented
        return result != 0

    def __lt__(self, other: Any) -> bool:
        result = self._compare(other)
        if result is None:
            return NotImplemented
        return result < 0

    def __le__(self, other: Any) -> bool:
        result = self._compare(other)
        if result is None:
            return NotImplemented
        return result <= 0

    def __gt__(self, other: Any) -> bool:
        result = self._compare(other)
        if result is None:
            return NotImplemented
        return result > 0

    def __ge__(self, other: Any) -> bool:
        result = self._compare(other)
        if result is None:
            return NotImplemented
        return result >= 0

    def __hash__(self) -> int:
        """Same as ``hash(self.as_str())``; encoded ``bytes`` operands hash differently."""

        return hash(self._text)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._text!r})"


class Grapheme(_Cluster):
    """View over exactly one extended grapheme cluster."""

    __slots__ = ()

    def __init__(self, text: str) -> None:
        if first_cluster(text) != text:
            raise ValueError(f"{text!r} is not exactly one grapheme cluster")
        self._text = text
        self._raw = None

    @classmethod
    def _trusted(cls, text: str) -> "Grapheme":
        view = cls.__new__(cls)
        view._text = text
        view._raw = None
        return view

    @classmethod
    def from_text(cls, fragment: str) -> Optional["Grapheme"]:
        """Return a view when ``fragment`` is exactly one cluster, else ``None``."""

        cluster = first_cluster(fragment)
        if cluster is None or len(cluster) != len(fragment):
            return None
        return cls._trusted(fragment)

    @classmethod
    def split_leading(cls, fragment: str) -> Optional[Tuple["Grapheme", str]]:
        """Split ``fragment`` into its first cluster and the remaining text."""

        cluster = first_cluster(fragment)
        if cluster is None:
            return None
        return cls._trusted(cluster), fragment[len(cluster):]

    def to_owned(self) -> "GraphemeBuf":
        return GraphemeBuf.from_grapheme(self)


class GraphemeBuf(_Cluster):
    """Owned grapheme cluster, independent of any buffer."""

    __slots__ = ()

    def __init__(self, data: bytes) -> None:
        text = bytes(data).decode("utf-8")
        if first_cluster(text) != text:
            raise ValueError(f"{text!r} is not exactly one grapheme cluster")
        self._text = text
        self._raw = bytes(data)

    @classmethod
    def from_grapheme(cls, view: Grapheme) -> "GraphemeBuf":
        owned = cls.__new__(cls)
        owned._text = view.as_str()
        owned._raw = bytes(view.as_bytes())
        return owned

    @classmethod
    def from_char(cls, ch: str) -> "GraphemeBuf":
        scratch = bytearray(4)
        written = encode_scalar(ord(_require_character(ch)), scratch)
        if written is None:  # pragma: no cover - four bytes always suffice
            raise ValueError(f"cannot encode {ch!r}")
        owned = cls.__new__(cls)
        owned._raw = bytes(scratch[:written])
        owned._text = ch
        return owned

    @classmethod
    def default(cls) -> "GraphemeBuf":
        return cls.from_char("\x00")

    def as_grapheme(self) -> Grapheme:
        return Grapheme._trusted(self._text)

    def into_bytes(self) -> bytes:
        return self.as_bytes()

    def into_str(self) -> str:
        return self._text

    def __bytes__(self) -> bytes:
        return self.as_bytes()


__all__ = [
    "Grapheme",
    "GraphemeBuf",
    "Operand",
    "OperandKind",
    "normalize",
    "compare",
]
