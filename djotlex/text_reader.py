"""Byte masks and a bounded byte reader used by the tokenizers."""

from __future__ import annotations

from typing import Iterable, Optional, Union

_ALL_BITS = (1 << 256) - 1

BytesLike = Union[bytes, bytearray, memoryview, str]


def _as_bytes(value: BytesLike) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def _as_byte(value: Union[int, BytesLike]) -> int:
    if isinstance(value, int):
        return value
    encoded = _as_bytes(value)
    if len(encoded) != 1:
        raise ValueError(f"expected a single byte, got {value!r}")
    return encoded[0]


class ByteMask:
    """A set of byte values stored as a 256-bit integer."""

    __slots__ = ("bits",)

    def __init__(self, chars: BytesLike = b"") -> None:
        bits = 0
        for byte in _as_bytes(chars):
            bits |= 1 << byte
        self.bits = bits

    @classmethod
    def _from_bits(cls, bits: int) -> ByteMask:
        mask = cls.__new__(cls)
        mask.bits = bits & _ALL_BITS
        return mask

    def has(self, b: int) -> bool:
        """Tell whether byte value ``b`` belongs to the mask."""
        return bool((self.bits >> b) & 1)

    def __contains__(self, b: int) -> bool:
        return self.has(b)

    def negate(self) -> ByteMask:
        """Return the complement of this mask."""
        return ByteMask._from_bits(self.bits ^ _ALL_BITS)

    def __or__(self, other: ByteMask) -> ByteMask:
        return ByteMask._from_bits(self.bits | other.bits)

    def __and__(self, other: ByteMask) -> ByteMask:
        return ByteMask._from_bits(self.bits & other.bits)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ByteMask):
            return NotImplemented
        return self.bits == other.bits

    def __hash__(self) -> int:
        return hash(self.bits)

    def __repr__(self) -> str:
        members = bytes(b for b in range(256) if self.has(b))
        return f"ByteMask({members!r})"


def union(*args: ByteMask) -> ByteMask:
    """Return the union of all given masks."""
    result = ByteMask()
    for mask in args:
        result = result | mask
    return result


SPACE_BYTE_MASK = ByteMask(b" \t")
SPACE_NEWLINE_BYTE_MASK = ByteMask(b" \t\r\n")


class TextReader:
    """Read-only view over the first ``end`` bytes of a document.

    Matching methods take a position and return the position after the
    match, or ``None`` when nothing matched.
    """

    __slots__ = ("data", "end")

    def __init__(self, data: BytesLike, end: Optional[int] = None) -> None:
        self.data = _as_bytes(data)
        size = len(self.data)
        self.end = size if end is None else max(0, min(end, size))

    def __len__(self) -> int:
        return self.end

    def __getitem__(self, key: Union[int, slice]) -> Union[int, bytes]:
        if isinstance(key, slice):
            start, stop, step = key.indices(self.end)
            return self.data[start:stop:step]
        index = key + self.end if key < 0 else key
        if not 0 <= index < self.end:
            raise IndexError("reader index out of range")
        return self.data[index]

    def select(self, start: int, end: int) -> str:
        """Return the text between two positions."""
        return self.data[start:min(end, self.end)].decode("utf-8", "replace")

    def empty_or_whitespace(self, s: int) -> Optional[int]:
        """Skip whitespace; succeed only if the reader ends there."""
        nxt = self.mask_repeat(s, SPACE_NEWLINE_BYTE_MASK, 0)
        return nxt if self.is_empty(nxt) else None

    def mask(self, s: int, mask: ByteMask) -> Optional[int]:
        """Match one byte from ``mask``."""
        return s + 1 if self.has_mask(s, mask) else None

    def token(self, s: int, token: BytesLike) -> Optional[int]:
        """Match the exact byte sequence ``token``."""
        encoded = _as_bytes(token)
        return s + len(encoded) if self.has_token(s, encoded) else None

    def has_token(self, s: int, token: BytesLike) -> bool:
        """Tell whether ``token`` starts at ``s``."""
        encoded = _as_bytes(token)
        if s < 0 or s + len(encoded) > self.end:
            return False
        return self.data.startswith(encoded, s, self.end)

    def byte_repeat(self, s: int, b: Union[int, BytesLike], min_count: int) -> Optional[int]:
        """Match byte ``b`` repeated at least ``min_count`` times."""
        value = _as_byte(b)
        count = 0
        while self.has_byte(s, value):
            s += 1
            count += 1
        return s if count >= min_count else None

    def mask_repeat(self, s: int, mask: ByteMask, min_count: int) -> Optional[int]:
        """Match bytes from ``mask`` repeated at least ``min_count`` times."""
        count = 0
        while self.has_mask(s, mask):
            s += 1
            count += 1
        return s if count >= min_count else None

    def is_empty_or_whitespace(self, s: int) -> bool:
        """Tell whether only whitespace is left from ``s``."""
        return self.is_empty(self.mask_repeat(s, SPACE_NEWLINE_BYTE_MASK, 0))

    def is_empty(self, s: int) -> bool:
        """Tell whether ``s`` is at or past the end."""
        return s >= self.end

    def has_byte(self, s: int, b: Union[int, BytesLike]) -> bool:
        """Tell whether byte ``b`` is at ``s``."""
        if self.is_empty(s) or s < 0:
            return False
        return self.data[s] == _as_byte(b)

    def has_mask(self, s: int, mask: ByteMask) -> bool:
        """Tell whether the byte at ``s`` belongs to ``mask``."""
        if self.is_empty(s) or s < 0:
            return False
        return mask.has(self.data[s])

    def peek(self, s: int) -> Optional[int]:
        """Return the byte at ``s`` or ``None`` past the end."""
        if 0 <= s < self.end:
            return self.data[s]
        return None

    def __repr__(self) -> str:
        return f"TextReader({self.data[:self.end]!r})"