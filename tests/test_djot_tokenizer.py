import pytest

from djotlex.attributes import AttributeEntry, Attributes
from djotlex.djot_token import CODE_LANG_KEY, DISPLAY_MATH_KEY, DjotToken
from djotlex.djot_tokenizer import build_djot_tokens, build_inline_djot_tokens
from djotlex.tokens import OPEN, Range, Token

D = DjotToken


def tok(token_type, start, end, jump=0, attributes=None):
    return Token(
        type=int(token_type),
        start=start,
        end=end,
        jump_to_pair=jump,
        attributes=attributes if attributes is not None else Attributes(),
    )


def close(token_type):
    return int(token_type) ^ OPEN


def assert_pairs_consistent(tokens):
    for index, token in enumerate(tokens):
        if token.jump_to_pair == 0:
            continue
        partner = tokens[index + token.jump_to_pair]
        assert partner.jump_to_pair == -token.jump_to_pair
        if token.jump_to_pair > 0:
            assert token.type ^ OPEN == partner.type


def test_simple_text():
    tokens = build_djot_tokens(b"hello *world*!")
    assert list(tokens) == [
        tok(D.DOCUMENT_BLOCK, 0, 0, 8),
        tok(D.PARAGRAPH_BLOCK, 0, 0, 6),
        tok(D.NONE, 0, 6),
        tok(D.STRONG_INLINE, 6, 7, 2),
        tok(D.NONE, 7, 12),
        tok(close(D.STRONG_INLINE), 12, 13, -2),
        tok(D.NONE, 13, 14),
        tok(close(D.PARAGRAPH_BLOCK), 14, 14, -6),
        tok(close(D.DOCUMENT_BLOCK), 14, 14, -8),
    ]


def test_simple_document_pairs():
    document = (
        b"## This is *multiline*\n"
        b"header\n"
        b"\n"
        b"Then we have simple paragraph\n"
        b"> This is not quote!\n"
        b"\n"
        b"> But this is quote with item list\n"
        b"> \n"
        b"> 1. one-line item\n"
        b"> 2. multi-line\n"
        b"> item\n"
        b"> 3. last item"
    )
    tokens = build_djot_tokens(document)
    assert tokens[0].type == D.DOCUMENT_BLOCK
    assert tokens[-1].type == close(D.DOCUMENT_BLOCK)
    assert tokens[0].jump_to_pair == len(tokens) - 1
    assert_pairs_consistent(tokens)
    types = [t.type for t in tokens]
    assert D.HEADING_BLOCK in types
    assert D.QUOTE_BLOCK in types
    assert types.count(D.LIST_ITEM_BLOCK) == 3


def test_simple_link():
    tokens = build_djot_tokens(b"[a](b)")
    assert list(tokens) == [
        tok(D.DOCUMENT_BLOCK, 0, 0, 9),
        tok(D.PARAGRAPH_BLOCK, 0, 0, 7),
        tok(D.SPAN_INLINE, 0, 1, 2),
        tok(D.NONE, 1, 2),
        tok(close(D.SPAN_INLINE), 2, 3, -2),
        tok(D.LINK_URL_INLINE, 3, 4, 2),
        tok(D.NONE, 4, 5),
        tok(close(D.LINK_URL_INLINE), 5, 6, -2),
        tok(close(D.PARAGRAPH_BLOCK), 6, 6, -7),
        tok(close(D.DOCUMENT_BLOCK), 6, 6, -9),
    ]


def test_simple_link_with_newline():
    tokens = build_djot_tokens(
        b"[My link text](http://example.com?product_number=234234234234\n234234234234)"
    )
    assert list(tokens) == [
        tok(D.DOCUMENT_BLOCK, 0, 0, 11),
        tok(D.PARAGRAPH_BLOCK, 0, 0, 9),
        tok(D.SPAN_INLINE, 0, 1, 2),
        tok(D.NONE, 1, 13),
        tok(close(D.SPAN_INLINE), 13, 14, -2),
        tok(D.LINK_URL_INLINE, 14, 15, 4),
        tok(D.NONE, 15, 61),
        tok(D.SMART_SYMBOL_INLINE, 61, 62),
        tok(D.NONE, 62, 74),
        tok(close(D.LINK_URL_INLINE), 74, 75, -4),
        tok(close(D.PARAGRAPH_BLOCK), 75, 75, -9),
        tok(close(D.DOCUMENT_BLOCK), 75, 75, -11),
    ]


def test_math_verbatim():
    tokens = build_djot_tokens(b"$$`1+1=2`")
    assert list(tokens) == [
        tok(D.DOCUMENT_BLOCK, 0, 0, 6),
        tok(D.PARAGRAPH_BLOCK, 0, 0, 4),
        tok(D.VERBATIM_INLINE, 0, 3, 2, Attributes([AttributeEntry(DISPLAY_MATH_KEY, "")])),
        tok(D.NONE, 3, 8),
        tok(close(D.VERBATIM_INLINE), 8, 9, -2),
        tok(close(D.PARAGRAPH_BLOCK), 9, 9, -4),
        tok(close(D.DOCUMENT_BLOCK), 9, 9, -6),
    ]


def test_verbatim():
    tokens = build_djot_tokens(
        b"``VerbatimInline with a backtick` character``\n"
        b"`VerbatimInline with three backticks ``` character`"
    )
    assert list(tokens) == [
        tok(D.DOCUMENT_BLOCK, 0, 0, 10),
        tok(D.PARAGRAPH_BLOCK, 0, 0, 8),
        tok(D.VERBATIM_INLINE, 0, 2, 2),
        tok(D.NONE, 2, 43),
        tok(close(D.VERBATIM_INLINE), 43, 45, -2),
        tok(D.SMART_SYMBOL_INLINE, 45, 46),
        tok(D.VERBATIM_INLINE, 46, 47, 2),
        tok(D.NONE, 47, 96),
        tok(close(D.VERBATIM_INLINE), 96, 97, -2),
        tok(close(D.PARAGRAPH_BLOCK), 97, 97, -8),
        tok(close(D.DOCUMENT_BLOCK), 97, 97, -10),
    ]


def test_nested_emphasis():
    tokens = build_djot_tokens(b"___abc___")
    assert list(tokens) == [
        tok(D.DOCUMENT_BLOCK, 0, 0, 10),
        tok(D.PARAGRAPH_BLOCK, 0, 0, 8),
        tok(D.EMPHASIS_INLINE, 0, 1, 6),
        tok(D.EMPHASIS_INLINE, 1, 2, 4),
        tok(D.EMPHASIS_INLINE, 2, 3, 2),
        tok(D.NONE, 3, 6),
        tok(close(D.EMPHASIS_INLINE), 6, 7, -2),
        tok(close(D.EMPHASIS_INLINE), 7, 8, -4),
        tok(close(D.EMPHASIS_INLINE), 8, 9, -6),
        tok(close(D.PARAGRAPH_BLOCK), 9, 9, -8),
        tok(close(D.DOCUMENT_BLOCK), 9, 9, -10),
    ]


def test_unmatched_emphasis():
    tokens = build_djot_tokens(b"___ (not an emphasized `_` character)")
    assert list(tokens) == [
        tok(D.DOCUMENT_BLOCK, 0, 0, 8),
        tok(D.PARAGRAPH_BLOCK, 0, 0, 6),
        tok(D.NONE, 0, 23),
        tok(D.VERBATIM_INLINE, 23, 24, 2),
        tok(D.NONE, 24, 25),
        tok(close(D.VERBATIM_INLINE), 25, 26, -2),
        tok(D.NONE, 26, 37),
        tok(close(D.PARAGRAPH_BLOCK), 37, 37, -6),
        tok(close(D.DOCUMENT_BLOCK), 37, 37, -8),
    ]


def test_str_and_bytes_agree():
    text = "hello *world*!"
    assert list(build_djot_tokens(text)) == list(build_djot_tokens(text.encode()))


def test_thematic_break():
    tokens = build_djot_tokens(b"***")
    assert list(tokens) == [
        tok(D.DOCUMENT_BLOCK, 0, 0, 2),
        tok(D.THEMATIC_BREAK_TOKEN, 0, 3),
        tok(close(D.DOCUMENT_BLOCK), 3, 3, -2),
    ]


def test_code_block_content_is_untyped():
    tokens = build_djot_tokens(b"```py\ncode\n```")
    assert list(tokens) == [
        tok(D.DOCUMENT_BLOCK, 0, 0, 4),
        tok(D.CODE_BLOCK, 0, 3, 2, Attributes([AttributeEntry(CODE_LANG_KEY, "py")])),
        tok(D.NONE, 6, 11),
        tok(close(D.CODE_BLOCK), 11, 14, -2),
        tok(close(D.DOCUMENT_BLOCK), 14, 14, -4),
    ]


def test_quote_with_paragraph():
    tokens = build_djot_tokens(b"> a")
    assert list(tokens) == [
        tok(D.DOCUMENT_BLOCK, 0, 0, 6),
        tok(D.QUOTE_BLOCK, 0, 2, 4),
        tok(D.PARAGRAPH_BLOCK, 2, 2, 2),
        tok(D.NONE, 2, 3),
        tok(close(D.PARAGRAPH_BLOCK), 3, 3, -2),
        tok(close(D.QUOTE_BLOCK), 3, 3, -4),
        tok(close(D.DOCUMENT_BLOCK), 3, 3, -6),
    ]


def test_block_attribute_line():
    tokens = build_djot_tokens(b"{.x}\npara")
    assert list(tokens) == [
        tok(D.DOCUMENT_BLOCK, 0, 0, 5),
        tok(D.ATTRIBUTE, 0, 5, 0, Attributes([AttributeEntry("class", "x")])),
        tok(D.PARAGRAPH_BLOCK, 5, 5, 2),
        tok(D.NONE, 5, 9),
        tok(close(D.PARAGRAPH_BLOCK), 9, 9, -2),
        tok(close(D.DOCUMENT_BLOCK), 9, 9, -5),
    ]


def test_inline_whole_document():
    tokens = build_inline_djot_tokens(b"_a_")
    assert list(tokens) == [
        tok(D.EMPHASIS_INLINE, 0, 1, 2),
        tok(D.NONE, 1, 2),
        tok(close(D.EMPHASIS_INLINE), 2, 3, -2),
    ]


def test_inline_parts_gap_is_ignored():
    tokens = build_inline_djot_tokens(b"ab\ncd", Range(0, 2), Range(3, 5))
    assert list(tokens) == [
        tok(D.IGNORE, 0, 3),
        tok(D.NONE, 3, 5),
    ]


@pytest.mark.parametrize(
    "document",
    [
        b"- one\n- two\n\n  nested para",
        b"| a | b |\n|---|---|\n^ caption",
        b"::: note\ntext\n:::",
        b"[ref]: http://example.com\n\n[^f]: note",
        b"{=html}`<b>` *x* _y_ {+ins+} {-del-} :smile:",
    ],
)
def test_pairs_are_consistent(document):
    tokens = build_djot_tokens(document)
    assert tokens[0].type == D.DOCUMENT_BLOCK
    assert tokens[0].jump_to_pair == len(tokens) - 1
    assert tokens[-1].type == close(D.DOCUMENT_BLOCK)
    assert_pairs_consistent(tokens)