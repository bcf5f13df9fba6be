"""An ordered attribute map with deterministic enumeration."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple, Union


class AttributeEntry(NamedTuple):
    """One key/value attribute pair."""

    key: str
    value: str = ""


class Attributes:
    """String attributes that keep the order keys were first set in."""

    __slots__ = ("_values",)

    def __init__(self, entries: Iterable[Union[AttributeEntry, Tuple[str, str]]] = ()) -> None:
        self._values: Dict[str, str] = {}
        for key, value in entries:
            self.set(key, value)

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def append(self, key: str, value: str) -> None:
        """Add ``value`` to ``key``, joining with a space if it is already set."""
        previous = self.try_get(key)
        self.set(key, value if previous is None else f"{previous} {value}")

    def set(self, key: str, value: str) -> None:
        """Set ``key``; a new key goes to the end of the order."""
        self._values[key] = value

    def try_get(self, key: str) -> Optional[str]:
        """Return the value of ``key`` or ``None`` if it is missing."""
        return self._values.get(key)

    def get(self, key: str) -> str:
        """Return the value of ``key`` or an empty string."""
        return self._values.get(key, "")

    def merge_with(self, other: Attributes) -> None:
        """Copy every entry of ``other`` into this map."""
        for key, value in other.entries():
            self.set(key, value)

    def entries(self) -> List[AttributeEntry]:
        """Return the entries in order."""
        return [AttributeEntry(key, value) for key, value in self._values.items()]

    def as_dict(self) -> Dict[str, str]:
        """Return a plain dictionary copy."""
        return dict(self._values)

    def copy(self) -> Attributes:
        """Return an independent copy."""
        return Attributes(self.entries())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Attributes):
            return NotImplemented
        return list(self._values.items()) == list(other._values.items())

    def __repr__(self) -> str:
        return f"Attributes({self._values!r})"