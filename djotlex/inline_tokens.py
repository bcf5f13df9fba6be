"""Matching of djot inline markers at a given position."""

from __future__ import annotations

from typing import Callable, Dict, Optional, Set

from djotlex.djot_token import DjotToken, token_name
from djotlex.text_reader import SPACE_BYTE_MASK, SPACE_NEWLINE_BYTE_MASK, ByteMask, TextReader
from djotlex.tokens import OPEN

DOLLAR_BYTE_MASK = ByteMask(b"$")
BACKTICK_BYTE_MASK = ByteMask(b"`")
SMART_SYMBOL_BYTE_MASK = ByteMask(b"\n'\"")
ALPHA_NUMERIC_SYMBOL_BYTE_MASK = ByteMask(
    b"+-0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
)
ASCII_PUNCTUATION_SYMBOL_BYTE_MASK = ByteMask(b"!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")
INLINE_TOKEN_START_SYMBOL = ByteMask(b"!\"$'()*+-.:<=>[\\]^_`{|}~") | SPACE_NEWLINE_BYTE_MASK

START_SYMBOLS: Set[int] = set()
"""Bytes at which some inline marker has matched so far."""

Matcher = Callable[[TextReader, int], Optional[int]]


def _literal(marker: bytes) -> Matcher:
    def match(reader: TextReader, state: int) -> Optional[int]:
        return reader.token(state, marker)

    return match


def _flanking_open(symbol: bytes) -> Matcher:
    braced = b"{" + symbol

    def match(reader: TextReader, state: int) -> Optional[int]:
        end = reader.token(state, braced)
        if end is not None:
            return end
        end = reader.token(state, symbol)
        if (
            end is not None
            and not reader.has_mask(end, SPACE_NEWLINE_BYTE_MASK)
            and not reader.has_byte(end, b"}")
        ):
            return end
        return None

    return match


def _flanking_close(symbol: bytes) -> Matcher:
    braced = symbol + b"}"

    def match(reader: TextReader, state: int) -> Optional[int]:
        end = reader.token(state, braced)
        if end is not None:
            return end
        end = reader.token(state, symbol)
        if end is not None and state > 0 and not reader.has_mask(state - 1, SPACE_NEWLINE_BYTE_MASK):
            return end
        return None

    return match


def _verbatim_open(reader: TextReader, state: int) -> Optional[int]:
    position = reader.mask_repeat(state, DOLLAR_BYTE_MASK, 0)
    # $ is inline math, $$ is display math, more dollars mean nothing
    if position - state > 2:
        return None
    return reader.mask_repeat(position, BACKTICK_BYTE_MASK, 1)


def _verbatim_close(reader: TextReader, state: int) -> Optional[int]:
    return reader.mask_repeat(state, BACKTICK_BYTE_MASK, 1)


def _escaped_symbol(reader: TextReader, state: int) -> Optional[int]:
    position = reader.token(state, b"\\")
    if position is None or reader.is_empty(position):
        return None
    punctuation = reader.mask(position, ASCII_PUNCTUATION_SYMBOL_BYTE_MASK)
    if punctuation is not None:
        return punctuation
    position = reader.mask_repeat(position, SPACE_BYTE_MASK, 0)
    return reader.token(position, b"\n")


def _symbols_open(reader: TextReader, state: int) -> Optional[int]:
    position = reader.token(state, b":")
    if position is None:
        return None
    word_end = reader.mask_repeat(position, ALPHA_NUMERIC_SYMBOL_BYTE_MASK, 0)
    if reader.has_byte(word_end, b":"):
        return position
    return None


def _pipe_separator_open(reader: TextReader, state: int) -> Optional[int]:
    position = reader.token(state, b"|")
    if position is None:
        return None
    return reader.mask_repeat(position, SPACE_BYTE_MASK, 0)


def _pipe_separator_close(reader: TextReader, state: int) -> Optional[int]:
    state = reader.mask_repeat(state, SPACE_BYTE_MASK, 0)
    position = reader.token(state, b"|")
    if position is None:
        return None
    return position if reader.is_empty_or_whitespace(position) else state


def _smart_symbol(reader: TextReader, state: int) -> Optional[int]:
    brace = reader.token(state, b"{")
    if brace is not None:
        return reader.mask(brace, SMART_SYMBOL_BYTE_MASK)
    position = reader.mask(state, SMART_SYMBOL_BYTE_MASK)
    if position is not None:
        return position + 1 if reader.has_byte(position, b"}") else position
    position = reader.token(state, b"...")
    if position is not None:
        return position
    return reader.byte_repeat(state, b"-", 2)


def _close(token_type: DjotToken) -> int:
    return int(token_type) ^ OPEN


_MATCHERS: Dict[int, Matcher] = {
    DjotToken.RAW_FORMAT_INLINE: _literal(b"{="),
    _close(DjotToken.RAW_FORMAT_INLINE): _literal(b"}"),
    DjotToken.VERBATIM_INLINE: _verbatim_open,
    _close(DjotToken.VERBATIM_INLINE): _verbatim_close,
    DjotToken.IMAGE_SPAN_INLINE: _literal(b"!["),
    DjotToken.SPAN_INLINE: _literal(b"["),
    _close(DjotToken.SPAN_INLINE): _literal(b"]"),
    _close(DjotToken.IMAGE_SPAN_INLINE): _literal(b"]"),
    DjotToken.LINK_URL_INLINE: _literal(b"("),
    _close(DjotToken.LINK_URL_INLINE): _literal(b")"),
    DjotToken.LINK_REFERENCE_INLINE: _literal(b"["),
    _close(DjotToken.LINK_REFERENCE_INLINE): _literal(b"]"),
    DjotToken.AUTOLINK_INLINE: _literal(b"<"),
    _close(DjotToken.AUTOLINK_INLINE): _literal(b">"),
    DjotToken.ESCAPED_SYMBOL_INLINE: _escaped_symbol,
    DjotToken.EMPHASIS_INLINE: _flanking_open(b"_"),
    _close(DjotToken.EMPHASIS_INLINE): _flanking_close(b"_"),
    DjotToken.STRONG_INLINE: _flanking_open(b"*"),
    _close(DjotToken.STRONG_INLINE): _flanking_close(b"*"),
    DjotToken.HIGHLIGHTED_INLINE: _literal(b"{="),
    _close(DjotToken.HIGHLIGHTED_INLINE): _literal(b"=}"),
    DjotToken.SUBSCRIPT_INLINE: _flanking_open(b"~"),
    _close(DjotToken.SUBSCRIPT_INLINE): _flanking_close(b"~"),
    DjotToken.SUPERSCRIPT_INLINE: _flanking_open(b"^"),
    _close(DjotToken.SUPERSCRIPT_INLINE): _flanking_close(b"^"),
    DjotToken.INSERT_INLINE: _literal(b"{+"),
    _close(DjotToken.INSERT_INLINE): _literal(b"+}"),
    DjotToken.DELETE_INLINE: _literal(b"{-"),
    _close(DjotToken.DELETE_INLINE): _literal(b"-}"),
    DjotToken.FOOTNOTE_REFERENCE_INLINE: _literal(b"[^"),
    _close(DjotToken.FOOTNOTE_REFERENCE_INLINE): _literal(b"]"),
    DjotToken.SYMBOLS_INLINE: _symbols_open,
    _close(DjotToken.SYMBOLS_INLINE): _literal(b":"),
    DjotToken.PIPE_TABLE_SEPARATOR: _pipe_separator_open,
    _close(DjotToken.PIPE_TABLE_SEPARATOR): _pipe_separator_close,
    DjotToken.SMART_SYMBOL_INLINE: _smart_symbol,
}


def match_inline_token(reader: TextReader, state: int, token_type: int) -> Optional[int]:
    """Match the inline marker of ``token_type`` (opening or closing) at ``state``.

    Returns the position after the marker, or ``None``.
    Raises ``ValueError`` for a type that is not an inline marker.
    """
    matcher = _MATCHERS.get(int(token_type))
    if matcher is None:
        try:
            name = token_name(token_type)
        except ValueError:
            name = "?"
        raise ValueError(f"unexpected djot inline token type: {name}({int(token_type)})")
    result = matcher(reader, state)
    if result is not None and not reader.is_empty(state):
        START_SYMBOLS.add(reader[state])
    return result