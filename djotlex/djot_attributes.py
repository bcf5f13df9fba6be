"""Matching of djot attribute blocks and quoted strings."""

from __future__ import annotations

from typing import Optional, Tuple

from djotlex.attributes import Attributes
from djotlex.text_reader import SPACE_NEWLINE_BYTE_MASK, ByteMask, TextReader, union

DJOT_ATTRIBUTE_CLASS_KEY = "class"
DJOT_ATTRIBUTE_ID_KEY = "id"

DIGIT_BYTE_MASK = ByteMask(b"0123456789")
LOWER_ALPHA_BYTE_MASK = ByteMask(b"abcdefghijklmnopqrstuvwxyz")
UPPER_ALPHA_BYTE_MASK = ByteMask(b"ABCDEFGHIJKLMNOPQRSTUVWXYZ")
ATTRIBUTE_TOKEN_MASK = union(
    DIGIT_BYTE_MASK,
    LOWER_ALPHA_BYTE_MASK,
    UPPER_ALPHA_BYTE_MASK,
    ByteMask(b"-_:"),
)

_RAW_STRING_MASK = ByteMask(b'\\"').negate()


def match_quoted_string(reader: TextReader, state: int) -> Optional[Tuple[bytes, int]]:
    """Match a double-quoted string with backslash escapes.

    Returns the unescaped value and the position after the closing quote.
    """
    position = reader.token(state, b'"')
    if position is None:
        return None
    value = bytearray()
    start = position
    while True:
        position = reader.mask_repeat(position, _RAW_STRING_MASK, 0)
        value += reader[start:position]
        end = reader.token(position, b'"')
        if end is not None:
            return bytes(value), end
        escape = reader.token(position, b"\\")
        if escape is None or reader.is_empty(escape):
            return None
        value.append(reader[escape])
        start = position = escape + 1


def match_djot_attribute(reader: TextReader, state: int) -> Optional[Tuple[Attributes, int]]:
    """Match a ``{...}`` attribute block.

    Returns the parsed attributes and the position after the closing brace.
    """
    position = reader.token(state, b"{")
    if position is None:
        return None
    attributes = Attributes()
    in_comment = False
    while True:
        position = reader.mask_repeat(position, SPACE_NEWLINE_BYTE_MASK, 0)
        if reader.is_empty(position):
            return None

        comment_start = reader.token(position, b"%")
        if comment_start is not None:
            in_comment = not in_comment
            position = comment_start
            continue
        if in_comment:
            position += 1
            continue

        end = reader.token(position, b"}")
        if end is not None:
            return attributes, end

        class_start = reader.token(position, b".")
        if class_start is not None:
            position = reader.mask_repeat(class_start, ATTRIBUTE_TOKEN_MASK, 1)
            if position is None:
                return None
            attributes.append(DJOT_ATTRIBUTE_CLASS_KEY, reader.select(class_start, position))
            continue

        id_start = reader.token(position, b"#")
        if id_start is not None:
            position = reader.mask_repeat(id_start, ATTRIBUTE_TOKEN_MASK, 1)
            if position is None:
                return None
            attributes.set(DJOT_ATTRIBUTE_ID_KEY, reader.select(id_start, position))
            continue

        key_start = position
        position = reader.mask_repeat(position, ATTRIBUTE_TOKEN_MASK, 1)
        if position is None:
            return None
        key = reader.select(key_start, position)

        position = reader.token(position, b"=")
        if position is None:
            return None

        quoted = match_quoted_string(reader, position)
        if quoted is not None:
            value, position = quoted
            attributes.set(key, value.decode("utf-8", "replace"))
            continue

        value_start = position
        position = reader.mask_repeat(position, ATTRIBUTE_TOKEN_MASK, 1)
        if position is None:
            return None
        attributes.set(key, reader.select(value_start, position))