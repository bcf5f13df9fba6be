"""Matching of djot block-level markers at the start of a line."""

from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple

from djotlex.attributes import AttributeEntry, Attributes
from djotlex.djot_attributes import (
    DIGIT_BYTE_MASK,
    DJOT_ATTRIBUTE_CLASS_KEY,
    LOWER_ALPHA_BYTE_MASK,
    UPPER_ALPHA_BYTE_MASK,
)
from djotlex.djot_token import CODE_LANG_KEY, REFERENCE_KEY, DjotToken, token_name
from djotlex.text_reader import SPACE_BYTE_MASK, SPACE_NEWLINE_BYTE_MASK, ByteMask, TextReader
from djotlex.tokens import Token

NOT_SPACE_NEWLINE_BYTE_MASK = SPACE_NEWLINE_BYTE_MASK.negate()
NOT_BRACKET_BYTE_MASK = ByteMask(b"]").negate()
THEMATIC_BREAK_BYTE_MASK = ByteMask(b" \t\n*-")

_SIMPLE_LIST_MARKERS = (b"- [ ] ", b"- [x] ", b"- [X] ", b"+ ", b"* ", b"- ", b": ")
_COMPLEX_LIST_MASKS = (DIGIT_BYTE_MASK, LOWER_ALPHA_BYTE_MASK, UPPER_ALPHA_BYTE_MASK)

Match = Optional[Tuple[Token, int]]


def _heading(reader: TextReader, start: int, token_type: int) -> Match:
    position = reader.byte_repeat(start, b"#", 1)
    if position is None:
        return None
    position = reader.mask(position, SPACE_BYTE_MASK)
    if position is None:
        return None
    return Token(type=token_type, start=start, end=position), position


def _quote(reader: TextReader, start: int, token_type: int) -> Match:
    position = reader.token(start, b">")
    if position is None:
        return None
    position = reader.mask(position, SPACE_NEWLINE_BYTE_MASK)
    if position is None:
        return None
    return Token(type=token_type, start=start, end=position), position


def _fenced(reader: TextReader, start: int, token_type: int) -> Match:
    if token_type == DjotToken.DIV_BLOCK:
        symbol, attribute_key = b":", DJOT_ATTRIBUTE_CLASS_KEY
    else:
        symbol, attribute_key = b"`", CODE_LANG_KEY

    repeat = reader.byte_repeat(start, symbol, 3)
    if repeat is None:
        return None
    position = reader.mask_repeat(repeat, SPACE_BYTE_MASK, 0)
    end = reader.empty_or_whitespace(position)
    if end is not None:
        return Token(type=token_type, start=start, end=end), end

    meta_start = position
    meta_end = reader.mask_repeat(position, NOT_SPACE_NEWLINE_BYTE_MASK, 1)
    if meta_end is None:
        return None
    position = reader.empty_or_whitespace(meta_end)
    if position is None:
        return None
    attributes = Attributes([AttributeEntry(attribute_key, reader.select(meta_start, meta_end))])
    return Token(type=token_type, start=start, end=repeat, attributes=attributes), position


def _definition(reader: TextReader, start: int, token_type: int) -> Match:
    opener = b"[" if token_type == DjotToken.REFERENCE_DEF_BLOCK else b"[^"
    key_start = reader.token(start, opener)
    if key_start is None:
        return None
    key_end = reader.mask_repeat(key_start, NOT_BRACKET_BYTE_MASK, 0)
    position = reader.token(key_end, b"]:")
    if position is None:
        return None
    attributes = Attributes([AttributeEntry(REFERENCE_KEY, reader.select(key_start, key_end))])
    return Token(type=token_type, start=start, end=position, attributes=attributes), position


def _thematic_break(reader: TextReader, start: int, token_type: int) -> Match:
    position = reader.mask_repeat(start, THEMATIC_BREAK_BYTE_MASK, 0)
    if not reader.is_empty(position):
        return None
    content = reader[start:position]
    if content.count(b"*") < 3 and content.count(b"-") < 3:
        return None
    return Token(type=token_type, start=start, end=position), position


def _list_item(reader: TextReader, start: int, token_type: int) -> Match:
    for marker in _SIMPLE_LIST_MARKERS:
        end = reader.token(start, marker)
        if end is not None:
            return Token(type=token_type, start=start, end=end), end

    # Accepted shapes: (X) , X) and X. where X is a run from one mask.
    paren = reader.token(start, b"(")
    for mask in _COMPLEX_LIST_MASKS:
        position = reader.mask_repeat(start if paren is None else paren, mask, 1)
        if position is None:
            continue
        end = reader.token(position, b") ")
        if end is None and paren is None:
            end = reader.token(position, b". ")
        if end is not None:
            return Token(type=token_type, start=start, end=end), end
    return None


def _pipe_table(reader: TextReader, start: int, token_type: int) -> Match:
    if reader.peek(start) != ord("|"):
        return None
    last = len(reader) - 1
    while last > start and reader.has_mask(last, SPACE_NEWLINE_BYTE_MASK):
        last -= 1
    if reader.peek(last) != ord("|"):
        return None
    return Token(type=token_type, start=start, end=start), start


def _paragraph(reader: TextReader, start: int, token_type: int) -> Match:
    if reader.is_empty(start):
        return None
    return Token(type=token_type, start=start, end=start), start


def _table_caption(reader: TextReader, start: int, token_type: int) -> Match:
    position = reader.token(start, b"^ ")
    if position is None:
        return None
    return Token(type=token_type, start=start, end=position), position


_MATCHERS: Dict[int, Callable[[TextReader, int, int], Match]] = {
    DjotToken.HEADING_BLOCK: _heading,
    DjotToken.QUOTE_BLOCK: _quote,
    DjotToken.DIV_BLOCK: _fenced,
    DjotToken.CODE_BLOCK: _fenced,
    DjotToken.REFERENCE_DEF_BLOCK: _definition,
    DjotToken.FOOTNOTE_DEF_BLOCK: _definition,
    DjotToken.THEMATIC_BREAK_TOKEN: _thematic_break,
    DjotToken.LIST_ITEM_BLOCK: _list_item,
    DjotToken.PIPE_TABLE_BLOCK: _pipe_table,
    DjotToken.PARAGRAPH_BLOCK: _paragraph,
    DjotToken.PIPE_TABLE_CAPTION_BLOCK: _table_caption,
}


def match_block_token(reader: TextReader, state: int, token_type: int) -> Match:
    """Match the block marker of ``token_type`` after optional leading spaces.

    Returns the token and the position after the marker, or ``None``.
    Raises ``ValueError`` for a type that is not a block marker.
    """
    matcher = _MATCHERS.get(int(token_type))
    if matcher is None:
        try:
            name = token_name(token_type)
        except ValueError:
            name = str(int(token_type))
        raise ValueError(f"unexpected djot block token type: {name}")
    start = reader.mask_repeat(state, SPACE_BYTE_MASK, 0)
    return matcher(reader, start, int(token_type))