# deckmark

`deckmark` turns markdown documents into a flat list of styled elements that
are ready to be laid out on a terminal: headings, paragraphs, lists, tables,
code snippets, block quotes, alerts, images, comments and front matter. It
also provides width-aware text wrapping that respects wide Unicode characters
and per-chunk font sizes.

## Installation

```
pip install deckmark
```

## Parsing a document

```python
from deckmark.parse import MarkdownParser
from deckmark.elements import Heading, Paragraph, ListBlock

parser = MarkdownParser()
elements = parser.parse("# Title **bold**\n\nsome *text*\n\n* one\n  * two\n")

for element in elements:
    if isinstance(element, Heading):
        print("heading", element.level, element.text)
    elif isinstance(element, Paragraph):
        print("paragraph", element.lines)
    elif isinstance(element, ListBlock):
        for item in element.items:
            print("item at depth", item.depth)
```

Every line of text is a `Line` made of `Text` chunks, each with a `TextStyle`
(bold, italics, code, strikethrough, underline, colours and font size).

Unsupported constructs, such as indented code blocks or HTML tags other than
`<span>`, raise `ParseError`, which carries the `SourcePosition` (line and
column) where the problem was found.

### Inline markup only

```python
line = MarkdownParser().parse_inlines("hello **mom** how _are you_?")
```

Anything other than a single paragraph of inline text raises
`ParseInlinesError`.

### Coloured spans

Inline `<span>` tags may set colours through a `style` attribute
(`color`, `background-color`) or a `class` attribute:

```python
from deckmark.html import HtmlParser

HtmlParser().parse('<span style="color: red; background-color: #00ff00">')
```

## Wrapping text

```python
from deckmark.text import WeightedLine

line = WeightedLine.from_str("this is a slightly long line")
for chunk in line.split(10):
    print(" ".join(part.into_parts()[0] for part in chunk))
```

Lines are split on word boundaries where possible; words longer than the
available width are broken.

## Percentages

```python
from deckmark.elements import Percent

Percent.parse("50%").as_ratio()  # 0.5
```

Values outside 1–100, a missing `%` or trailing text raise
`PercentParseError`.