# djotlex

`djotlex` turns Djot text into a flat list of tokens. Block structure and
inline markup come out as one sequence. Block structure covers headings,
quotes, list items, code blocks, divs, pipe tables, reference and footnote
definitions, and thematic breaks. Inline markup covers emphasis, strong,
verbatim and math, links, images, spans, autolinks, symbols, smart punctuation,
and more. Every paired token records how far away its partner is.

The package uses only the standard library.

## Installation

```
pip install djotlex
```

## Usage

```python
from djotlex.djot_tokenizer import build_djot_tokens
from djotlex.djot_token import DjotToken, token_name

document = b"hello *world*!"
for token in build_djot_tokens(document):
    print(token_name(token.type), token.start, token.end, token.jump_to_pair)
```

This prints one token per line:

- `DocumentBlock` and `ParagraphBlock` open the stream. Their `...Close`
  partners end it.
- `StrongInline` spans the `*` at offset 6. Its `jump_to_pair` is the distance
  in the list to the matching `StrongInlineClose`, and that token holds the
  negative of the same value.
- Plain text between markup comes out as tokens of type `None` (value 0).

`start` and `end` are byte offsets into the document, so `token.text(document)`
returns the bytes a token covers. An opening type and its closing type differ
only in the lowest bit. XOR with `djotlex.tokens.OPEN` gives one from the
other. `build_djot_tokens` accepts `bytes` or `str`. A `str` is encoded as
UTF-8.

`build_inline_djot_tokens(document, *ranges)` tokenizes only inline markup.
It works over the given `Range` values, or over the whole document when no
range is given.

### Attributes

Attribute blocks such as `{#id .class key="value"}` are parsed into an ordered
`Attributes` mapping. Repeated classes are joined with spaces:

```python
from djotlex.text_reader import TextReader
from djotlex.djot_attributes import match_djot_attribute

attributes, end = match_djot_attribute(TextReader(b"{.a .b #main}"), 0)
print(attributes.as_dict())   # {'class': 'a b', 'id': 'main'}
```

The matchers return `None` when nothing matches. This applies to
`match_djot_attribute`, `match_quoted_string`, `match_block_token` and
`match_inline_token`. The last two raise `ValueError` when given a token type
they do not handle.

### Building blocks

- `djotlex.text_reader`: `TextReader` and `ByteMask` (plus `union`), for
  matching at byte offsets.
- `djotlex.attributes`: `Attributes` and `AttributeEntry`.
- `djotlex.lines`: `LineTokenizer`, which yields `(start, end)` line ranges
  with their newlines.
- `djotlex.tokens`: `Token`, `TokenList`, `Range` and `Ranges`.
- `djotlex.token_stack`: `TokenStack`, the nesting stack used to pair tokens.
- `djotlex.djot_token`: the `DjotToken` enum and `token_name`.
- `djotlex.block_tokens` / `djotlex.inline_tokens`: the single-marker
  matchers.
- `djotlex.tree`: `TreeNode`, with `traverse()` (pre-order generator) and
  `full_text()`.

## What it does not do

`djotlex` stops at tokens. It does not build a tree from the token stream;
`TreeNode` is only the node type. It does not render HTML or any other output
format, and it has no command-line tool.

## Running the tests

```
pip install -e ".[test]"
pytest
```