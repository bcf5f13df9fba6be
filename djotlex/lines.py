"""Splitting a document into line ranges."""

from __future__ import annotations

from typing import Iterator, Optional, Tuple, Union


class LineTokenizer:
    """Yields ``(start, end)`` byte ranges of lines, newline included."""

    def __init__(self, document: Union[bytes, bytearray, str]) -> None:
        if isinstance(document, str):
            document = document.encode("utf-8")
        self.document = bytes(document)
        self._offset = 0

    def scan(self) -> Optional[Tuple[int, int]]:
        """Return the next line range, or ``None`` at the end."""
        size = len(self.document)
        if self._offset == size:
            return None
        start = self._offset
        newline = self.document.find(b"\n", start)
        end = size if newline == -1 else newline + 1
        self._offset = end
        return start, end

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        while (line := self.scan()) is not None:
            yield line