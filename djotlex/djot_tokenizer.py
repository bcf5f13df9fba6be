"""Turning a djot document into a flat, paired token stream."""

from __future__ import annotations

from dataclasses import replace
from typing import List, Union

from djotlex.attributes import Attributes
from djotlex.block_tokens import match_block_token
from djotlex.djot_attributes import match_djot_attribute
from djotlex.djot_token import DISPLAY_MATH_KEY, INLINE_MATH_KEY, DjotToken
from djotlex.inline_tokens import INLINE_TOKEN_START_SYMBOL, match_inline_token
from djotlex.lines import LineTokenizer
from djotlex.text_reader import SPACE_BYTE_MASK, TextReader
from djotlex.token_stack import TokenStack
from djotlex.tokens import OPEN, Range, Ranges, Token, TokenList

_UNPAIRED_INLINE = (DjotToken.ESCAPED_SYMBOL_INLINE, DjotToken.SMART_SYMBOL_INLINE)

_PAIRED_INLINE = (
    DjotToken.RAW_FORMAT_INLINE,
    DjotToken.VERBATIM_INLINE,
    DjotToken.IMAGE_SPAN_INLINE,
    DjotToken.LINK_URL_INLINE,
    DjotToken.LINK_REFERENCE_INLINE,
    DjotToken.AUTOLINK_INLINE,
    DjotToken.EMPHASIS_INLINE,
    DjotToken.STRONG_INLINE,
    DjotToken.HIGHLIGHTED_INLINE,
    DjotToken.SUBSCRIPT_INLINE,
    DjotToken.SUPERSCRIPT_INLINE,
    DjotToken.INSERT_INLINE,
    DjotToken.DELETE_INLINE,
    DjotToken.FOOTNOTE_REFERENCE_INLINE,
    DjotToken.SPAN_INLINE,
    DjotToken.SYMBOLS_INLINE,
    DjotToken.PIPE_TABLE_SEPARATOR,
)

# Paragraph must stay last: it matches any non-empty line.
_BLOCK_ORDER = (
    DjotToken.FOOTNOTE_DEF_BLOCK,
    DjotToken.REFERENCE_DEF_BLOCK,
    DjotToken.HEADING_BLOCK,
    DjotToken.QUOTE_BLOCK,
    DjotToken.LIST_ITEM_BLOCK,
    DjotToken.CODE_BLOCK,
    DjotToken.DIV_BLOCK,
    DjotToken.PIPE_TABLE_BLOCK,
    DjotToken.PIPE_TABLE_CAPTION_BLOCK,
    DjotToken.PARAGRAPH_BLOCK,
)

_ATTRIBUTE_HOSTS = (
    DjotToken.DOCUMENT_BLOCK,
    DjotToken.QUOTE_BLOCK,
    DjotToken.LIST_ITEM_BLOCK,
    DjotToken.DIV_BLOCK,
)

_INLINE_CONTENT_BLOCKS = (
    DjotToken.PARAGRAPH_BLOCK,
    DjotToken.HEADING_BLOCK,
    DjotToken.PIPE_TABLE_CAPTION_BLOCK,
    DjotToken.REFERENCE_DEF_BLOCK,
)


def _as_bytes(document: Union[bytes, bytearray, memoryview, str]) -> bytes:
    if isinstance(document, str):
        return document.encode("utf-8")
    return bytes(document)


def _inline_step(reader: TextReader, state: int, stack: TokenStack) -> int:
    """Consume what starts at ``state`` and return the next position."""
    level = stack.last_level()
    open_inline = level.first_or_default()
    last_inline = level.last_or_default()

    # Inside verbatim only a matching backtick run can end it.
    if open_inline.type == DjotToken.VERBATIM_INLINE:
        closing = match_inline_token(reader, state, DjotToken.VERBATIM_INLINE ^ OPEN)
        if closing is None:
            return state + 1
        opener = reader.select(open_inline.start, open_inline.end).lstrip("$")
        if opener != reader.select(state, closing):
            return closing
        stack.close_level_at(Token(type=DjotToken.VERBATIM_INLINE ^ OPEN, start=state, end=closing))
        return closing

    matched = match_djot_attribute(reader, state)
    if matched is not None:
        attributes, position = matched
        level.push(Token(type=DjotToken.ATTRIBUTE, start=state, end=position, attributes=attributes))
        return position

    if not INLINE_TOKEN_START_SYMBOL.has(reader[state]):
        return state + 1

    for token_type in _UNPAIRED_INLINE:
        position = match_inline_token(reader, state, token_type)
        if position is not None:
            level.push(Token(type=token_type, start=state, end=position))
            return position

    for token_type in _PAIRED_INLINE:
        # Closing tokens win because parsing is greedy.
        closing = match_inline_token(reader, state, token_type ^ OPEN)
        forbid_close = (
            token_type in (DjotToken.EMPHASIS_INLINE, DjotToken.STRONG_INLINE)
            and last_inline.type == token_type
            and last_inline.end == state
        )
        if closing is not None and not forbid_close and stack.pop_forget_until(token_type):
            stack.close_level_at(Token(type=token_type ^ OPEN, start=state, end=closing))
            return closing
        if (
            token_type == DjotToken.RAW_FORMAT_INLINE
            and last_inline.type != DjotToken.VERBATIM_INLINE ^ OPEN
        ):
            continue
        if token_type in (DjotToken.LINK_REFERENCE_INLINE, DjotToken.LINK_URL_INLINE) and last_inline.type not in (
            DjotToken.SPAN_INLINE ^ OPEN,
            DjotToken.IMAGE_SPAN_INLINE ^ OPEN,
        ):
            continue
        position = match_inline_token(reader, state, token_type)
        if position is None:
            continue
        attributes = Attributes()
        if token_type == DjotToken.VERBATIM_INLINE:
            marker = reader[state:position]
            if marker.startswith(b"$$"):
                attributes.set(DISPLAY_MATH_KEY, "")
            elif marker.startswith(b"$"):
                attributes.set(INLINE_MATH_KEY, "")
        stack.open_level_at(Token(type=token_type, start=state, end=position, attributes=attributes))
        return position

    return state + 1


def build_inline_djot_tokens(document: Union[bytes, str], *args: Range) -> TokenList:
    """Tokenize inline markup in the given ranges of ``document``.

    Without ranges the whole document is used. Gaps between ranges are
    covered by ``IGNORE`` tokens.
    """
    data = _as_bytes(document)
    parts = list(args) or [Range(0, len(data))]
    stack = TokenStack()
    left, right = parts[0].start, parts[-1].end
    stack.open_level_at(Token(type=DjotToken.PARAGRAPH_BLOCK, start=left, end=left))
    for part in parts:
        reader = TextReader(data, part.end)
        stack.last_level().fill_until(part.start, DjotToken.IGNORE)
        state = part.start
        while not reader.is_empty(state):
            state = _inline_step(reader, state, stack)
    if stack.last_level().first_or_default().type == DjotToken.VERBATIM_INLINE:
        stack.close_level_at(Token(type=DjotToken.VERBATIM_INLINE ^ OPEN, start=right, end=right))
    stack.pop_forget_until(DjotToken.PARAGRAPH_BLOCK)
    stack.close_level_at(Token(type=DjotToken.PARAGRAPH_BLOCK, start=right, end=right))
    return TokenList(stack.last_level()[1:-1])


class _BlockTokenizer:
    """Line-by-line block structure builder."""

    def __init__(self, document: bytes) -> None:
        self.document = document
        self.inline_parts = Ranges()
        self.line_offsets: List[int] = [0]
        self.token_offsets: List[int] = [0]
        self.blocks: List[Token] = [Token(type=DjotToken.DOCUMENT_BLOCK)]
        self.tokens = TokenList([Token(type=DjotToken.DOCUMENT_BLOCK)])

    def open_level(self, token: Token, line_offset: int) -> None:
        self.tokens.append(token)
        self.token_offsets.append(len(self.tokens) - 1)
        self.blocks.append(replace(token))
        self.line_offsets.append(line_offset)

    def close_levels_until(self, start: int, end: int, level: int) -> None:
        if self.inline_parts:
            if self.blocks[-1].type == DjotToken.CODE_BLOCK:
                self.tokens.extend(Token(start=part.start, end=part.end) for part in self.inline_parts)
            else:
                self.tokens.extend(build_inline_djot_tokens(self.document, *self.inline_parts))
            self.inline_parts = Ranges()
        for index in range(len(self.blocks) - 1, level, -1):
            self.tokens.append(Token(type=self.blocks[index].type ^ OPEN, start=start, end=end))
            opening = self.token_offsets[index]
            delta = len(self.tokens) - 1 - opening
            self.tokens[opening].jump_to_pair = delta
            self.tokens[-1].jump_to_pair = -delta
            self.line_offsets.pop()
            self.token_offsets.pop()
            self.blocks.pop()

    def process_line(self, line_start: int, line_end: int) -> None:
        reader = TextReader(self.document, line_end)
        state = line_start
        last_block = self.blocks[-1]
        last_type = last_block.type

        if last_type in _ATTRIBUTE_HOSTS:
            position = reader.mask_repeat(state, SPACE_BYTE_MASK, 0)
            matched = match_djot_attribute(reader, position)
            if matched is not None:
                attributes, position = matched
                end = reader.empty_or_whitespace(position)
                if end is not None:
                    self.tokens.append(
                        Token(type=DjotToken.ATTRIBUTE, start=state, end=end, attributes=attributes)
                    )
                    return

        last_div_at = max(
            (index for index, block in enumerate(self.blocks) if block.type == DjotToken.DIV_BLOCK),
            default=-1,
        )

        # Skip continuation markers of open blocks and find the deepest one still open.
        reset_at, potential_reset = 0, False
        for index, block in enumerate(self.blocks):
            if block.type in (DjotToken.LIST_ITEM_BLOCK, DjotToken.FOOTNOTE_DEF_BLOCK):
                indent = reader.mask_repeat(state, SPACE_BYTE_MASK, 0)
                if not reader.is_empty_or_whitespace(indent) and indent - line_start <= self.line_offsets[index]:
                    potential_reset = True
                    break
                reset_at = index
            elif block.type == DjotToken.REFERENCE_DEF_BLOCK:
                indent = reader.mask_repeat(state, SPACE_BYTE_MASK, 0)
                if indent - line_start <= self.line_offsets[index]:
                    potential_reset = True
                    break
                reset_at = index
            elif block.type in (DjotToken.QUOTE_BLOCK, DjotToken.HEADING_BLOCK):
                matched = match_block_token(reader, state, block.type)
                if matched is None:
                    potential_reset = True
                    break
                state = matched[1]
                reset_at = index
            elif block.type not in (DjotToken.PARAGRAPH_BLOCK, DjotToken.PIPE_TABLE_CAPTION_BLOCK):
                reset_at = index

        if (last_type != DjotToken.CODE_BLOCK or potential_reset) and reader.is_empty_or_whitespace(state):
            self.close_levels_until(state, state, reset_at)
            return

        if last_type == DjotToken.REFERENCE_DEF_BLOCK:
            self.close_levels_until(state, state, reset_at)

        # Inside a code block only a closing fence has block meaning.
        if last_type == DjotToken.CODE_BLOCK:
            matched = match_block_token(reader, state, DjotToken.CODE_BLOCK)
            if (
                matched is not None
                and last_block.prefix_length(self.document, b"`")
                <= matched[0].prefix_length(self.document, b"`")
                and not matched[0].attributes
            ):
                fence = matched[0]
                self.close_levels_until(fence.start, fence.end, len(self.blocks) - 2)
            else:
                self.inline_parts.append(Range(state, line_end))
            return

        if last_div_at != -1:
            matched = match_block_token(reader, state, DjotToken.DIV_BLOCK)
            if matched is not None:
                fence = matched[0]
                if last_block.length() <= fence.length() and not fence.attributes:
                    self.close_levels_until(fence.start, fence.end, last_div_at - 1)
                    return

        self._parse_blocks(reader, state, line_start, line_end)

    def _parse_blocks(self, reader: TextReader, state: int, line_start: int, line_end: int) -> None:
        while True:
            last_type = self.blocks[-1].type

            matched = match_block_token(reader, state, DjotToken.THEMATIC_BREAK_TOKEN)
            if matched is not None:
                thematic_break, state = matched
                self.tokens.append(
                    Token(
                        type=DjotToken.THEMATIC_BREAK_TOKEN,
                        start=thematic_break.start,
                        end=thematic_break.end,
                    )
                )
                continue

            state = reader.mask_repeat(state, SPACE_BYTE_MASK, 0)
            indent = state - line_start
            reset_list = next(
                (
                    index
                    for index, block in enumerate(self.blocks)
                    if block.type == DjotToken.LIST_ITEM_BLOCK and self.line_offsets[index] >= indent
                ),
                -1,
            )

            matched = match_block_token(reader, state, DjotToken.LIST_ITEM_BLOCK)
            if matched is not None and last_type not in (DjotToken.HEADING_BLOCK, DjotToken.CODE_BLOCK):
                if reset_list != -1:
                    self.close_levels_until(state, state, reset_list - 1)
                if reset_list != -1 or last_type != DjotToken.PARAGRAPH_BLOCK:
                    item, position = matched
                    self.open_level(
                        Token(type=DjotToken.LIST_ITEM_BLOCK, start=item.start, end=item.end),
                        item.start - line_start,
                    )
                    state = position
                    continue

            if last_type in _INLINE_CONTENT_BLOCKS:
                self.inline_parts.push(Range(state, line_end))
                return
            if last_type == DjotToken.PIPE_TABLE_BLOCK:
                self.inline_parts.push(Range(state, line_end))
                self.close_levels_until(line_end, line_end, len(self.blocks) - 2)
                return
            if last_type == DjotToken.CODE_BLOCK:
                return
            if reset_list != -1:
                self.close_levels_until(state, state, reset_list - 1)
                continue

            for token_type in _BLOCK_ORDER:
                # Definitions are allowed only at the top level of the document.
                if last_type != DjotToken.DOCUMENT_BLOCK and token_type in (
                    DjotToken.FOOTNOTE_DEF_BLOCK,
                    DjotToken.REFERENCE_DEF_BLOCK,
                ):
                    continue
                matched = match_block_token(reader, state, token_type)
                if matched is None:
                    continue
                if token_type == DjotToken.PIPE_TABLE_CAPTION_BLOCK and (
                    not self.tokens or self.tokens[-1].type != DjotToken.PIPE_TABLE_BLOCK ^ OPEN
                ):
                    continue
                block, position = matched
                self.open_level(block, block.start - line_start)
                state = position
                break
            else:
                return


def build_djot_tokens(document: Union[bytes, str]) -> TokenList:
    """Tokenize a whole djot document into block and inline tokens.

    Paired tokens carry the relative offset of their partner in
    ``jump_to_pair``.
    """
    data = _as_bytes(document)
    builder = _BlockTokenizer(data)
    for line_start, line_end in LineTokenizer(data):
        builder.process_line(line_start, line_end)
    builder.close_levels_until(len(data), len(data), -1)
    return builder.tokens