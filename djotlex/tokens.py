"""Tokens, ranges and flat token lists."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Union

from djotlex.attributes import Attributes

OPEN = 1
"""XOR with an opening token type to get its closing type, and back."""


@dataclass
class Token:
    """A typed span of the document, optionally linked to its pair."""

    type: int = 0
    start: int = 0
    end: int = 0
    jump_to_pair: int = 0
    attributes: Attributes = field(default_factory=Attributes)

    def length(self) -> int:
        """Number of bytes the token spans."""
        return self.end - self.start

    def is_default(self) -> bool:
        """Tell whether this is an untyped filler token."""
        return self.type == 0

    def text(self, document: bytes) -> bytes:
        """Return the bytes of ``document`` the token covers."""
        return bytes(document[self.start:self.end])

    def prefix_length(self, document: bytes, b: Union[int, bytes, str]) -> int:
        """Count how many leading bytes of the token equal ``b``."""
        value = b if isinstance(b, int) else (b.encode() if isinstance(b, str) else bytes(b))[0]
        content = self.text(document)
        return len(content) - len(content.lstrip(bytes([value])))


@dataclass(frozen=True)
class Range:
    """A half-open byte range."""

    start: int
    end: int


class Ranges(List[Range]):
    """A list of ranges that merges adjacent pushes."""

    def push(self, r: Range) -> None:
        """Append ``r`` or extend the last range if it ends where ``r`` starts."""
        if self and self[-1].end == r.start:
            self[-1] = Range(self[-1].start, r.end)
        else:
            self.append(r)


class TokenList(List[Token]):
    """A list of tokens where gaps are filled with untyped tokens."""

    def __init__(self, tokens: Iterable[Token] = ()) -> None:
        super().__init__(tokens)

    def first_or_default(self) -> Token:
        """Return the first token or a fresh default one."""
        return self[0] if self else Token()

    def last_or_default(self) -> Token:
        """Return the last token or a fresh default one."""
        return self[-1] if self else Token()

    def push(self, token: Token) -> None:
        """Append ``token``, filling any gap before it with a default token."""
        self.fill_until(token.start, 0)
        self.append(token)

    def fill_until(self, position: int, token_type: int) -> None:
        """Add a ``token_type`` token up to ``position`` if the list ends before it."""
        if self and self[-1].end < position:
            self.append(Token(type=token_type, start=self[-1].end, end=position))