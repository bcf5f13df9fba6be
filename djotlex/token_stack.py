"""A stack of token levels for matching open and close tokens."""

from __future__ import annotations

from typing import Dict, List, Optional

from djotlex.tokens import OPEN, Token, TokenList


class TokenStack:
    """Nested token lists; each level above the base starts with an opening token."""

    def __init__(self) -> None:
        self.levels: List[TokenList] = [TokenList()]
        self.type_levels: Dict[int, List[int]] = {}

    def empty(self) -> bool:
        """Tell whether nothing was ever opened or pushed."""
        return not self.type_levels and len(self.levels) == 1 and not self.levels[0]

    def last_level(self) -> Optional[TokenList]:
        """Return the innermost level."""
        return self.levels[-1] if self.levels else None

    def _drop_type_level(self, token_type: int) -> None:
        levels = self.type_levels.get(token_type)
        if levels:
            levels.pop()

    def pop_commit(self) -> None:
        """Move the innermost level into its parent, linking its open and close tokens."""
        if len(self.levels) <= 1:
            raise IndexError(f"unable to pop from the TokenStack with only {len(self.levels)} levels")
        popped = self.levels.pop()
        active = self.levels[-1]
        final_index = len(popped) - 1
        first = last = 0
        for index, token in enumerate(popped):
            if token.is_default():
                continue
            active.push(token)
            if index == 0:
                first = len(active) - 1
            if index == final_index:
                last = len(active) - 1
        opening = popped.first_or_default()
        if opening.type ^ OPEN == popped.last_or_default().type:
            jump = last - first
            active[first].jump_to_pair = jump
            active[last].jump_to_pair = -jump
        self._drop_type_level(opening.type)

    def pop_forget(self) -> None:
        """Drop the innermost opening token and move the rest into the parent."""
        if len(self.levels) <= 1:
            raise IndexError(f"unable to pop from the TokenStack with only {len(self.levels)} levels")
        self._drop_type_level(self.levels[-1].first_or_default().type)
        popped = self.levels.pop()
        active = self.levels[-1]
        for token in popped[1:]:
            if not token.is_default():
                active.push(token)

    def pop_forget_until(self, token_type: int) -> bool:
        """Forget levels until the latest one opened by ``token_type`` is innermost."""
        levels = self.type_levels.get(token_type)
        if not levels:
            return False
        target = levels[-1]
        while len(self.levels) > target + 1:
            self.pop_forget()
        return True

    def open_level_at(self, token: Token) -> None:
        """Open a new level starting with ``token``."""
        self.type_levels.setdefault(token.type, []).append(len(self.levels))
        self.levels.append(TokenList([token]))

    def close_level_at(self, token: Token) -> None:
        """Push the closing ``token`` and commit the innermost level."""
        self.levels[-1].push(token)
        self.pop_commit()