"""Djot token types and the attribute keys the tokenizer uses."""

from __future__ import annotations

from enum import IntEnum
from typing import Dict

from djotlex.tokens import OPEN

DIV_CLASS_KEY = "$DivClassKey"
CODE_LANG_KEY = "$CodeLangKey"
INLINE_MATH_KEY = "$InlineMathKey"
DISPLAY_MATH_KEY = "$DisplayMathKey"
REFERENCE_KEY = "$ReferenceKey"


class DjotToken(IntEnum):
    """Opening token types; ``value ^ OPEN`` gives the matching closing type."""

    NONE = 0
    IGNORE = 1
    DOCUMENT_BLOCK = 3
    HEADING_BLOCK = 5
    QUOTE_BLOCK = 7
    LIST_ITEM_BLOCK = 9
    CODE_BLOCK = 11
    DIV_BLOCK = 13
    PIPE_TABLE_BLOCK = 15
    REFERENCE_DEF_BLOCK = 17
    FOOTNOTE_DEF_BLOCK = 19
    PARAGRAPH_BLOCK = 21
    THEMATIC_BREAK_TOKEN = 23
    PIPE_TABLE_CAPTION_BLOCK = 25

    ATTRIBUTE = 27
    PADDING = 29

    RAW_FORMAT_INLINE = 31
    VERBATIM_INLINE = 33
    IMAGE_SPAN_INLINE = 35
    LINK_URL_INLINE = 37
    LINK_REFERENCE_INLINE = 39
    AUTOLINK_INLINE = 41
    ESCAPED_SYMBOL_INLINE = 43
    EMPHASIS_INLINE = 45
    STRONG_INLINE = 47
    HIGHLIGHTED_INLINE = 49
    SUBSCRIPT_INLINE = 51
    SUPERSCRIPT_INLINE = 53
    INSERT_INLINE = 55
    DELETE_INLINE = 57
    FOOTNOTE_REFERENCE_INLINE = 59
    SPAN_INLINE = 61
    SYMBOLS_INLINE = 63
    PIPE_TABLE_SEPARATOR = 65
    SMART_SYMBOL_INLINE = 67

    COMMENT = 69


def _camel(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_"))


_NAMES: Dict[int, str] = {
    member.value: _camel(member.name) for member in DjotToken if member is not DjotToken.COMMENT
}


def token_name(value: int) -> str:
    """Return the display name of a token type; closing types end in ``Close``."""
    value = int(value)
    name = _NAMES.get(value)
    if name is not None:
        return name
    if value & 1 == 0:
        return token_name(value ^ OPEN) + "Close"
    raise ValueError(f"unexpected djot token type: {value}")