from pathlib import Path

import pytest

from deckmark.elements import (
    Alert,
    AlertType,
    BlockQuote,
    Comment,
    FrontMatter,
    Heading,
    Image,
    Line,
    ListBlock,
    ListItemType,
    ListKind,
    Paragraph,
    SetexHeading,
    Snippet,
    Table,
    Text,
    ThematicBreak,
)
from deckmark.inlines import ParseError
from deckmark.parse import MarkdownParser, ParseInlinesError
from deckmark.text_style import Color, TextStyle


def parse_all(text):
    return MarkdownParser().parse(text)


def parse_single(text):
    elements = parse_all(text)
    assert len(elements) == 1, elements
    return elements[0]


def test_front_matter():
    parsed = parse_single("---\nbeep\nboop\n---\n")
    assert isinstance(parsed, FrontMatter)
    assert parsed.contents == "beep\nboop\n"


def test_paragraph():
    parsed = parse_single(
        "some **bold text**, _italics_, *italics*, **nested _italics_**, ~~strikethrough~~"
    )
    assert isinstance(parsed, Paragraph)
    expected = [
        Text("some "),
        Text("bold text", TextStyle().bold()),
        Text(", "),
        Text("italics", TextStyle().italics()),
        Text(", "),
        Text("italics", TextStyle().italics()),
        Text(", "),
        Text("nested ", TextStyle().bold()),
        Text("italics", TextStyle().italics().bold()),
        Text(", "),
        Text("strikethrough", TextStyle().strikethrough()),
    ]
    assert parsed.lines == [Line(expected)]


def test_html_inlines():
    parsed = parse_single(
        'hi<span style="color: red">red<span style="background-color: blue">blue'
        '<span style="color: yellow">yellow</span></span></span>'
    )
    expected = [
        Text("hi"),
        Text("red", TextStyle().fg_color(Color.RED)),
        Text("blue", TextStyle().fg_color(Color.RED).bg_color(Color.BLUE)),
        Text("yellow", TextStyle().fg_color(Color.YELLOW).bg_color(Color.BLUE)),
    ]
    assert parsed.lines == [Line(expected)]


def test_link_without_label_or_title():
    parsed = parse_single("my [](https://example.com)")
    assert parsed.lines == [
        Line([Text("my "), Text("https://example.com", TextStyle().link_url())])
    ]


def test_link_with_label_and_title():
    parsed = parse_single('my [website](https://example.com "Example")')
    assert parsed.lines == [
        Line(
            [
                Text("my "),
                Text("website", TextStyle().link_label()),
                Text(" ("),
                Text("https://example.com", TextStyle().link_url()),
                Text(' "'),
                Text("Example", TextStyle().link_title()),
                Text('"'),
                Text(")"),
            ]
        )
    ]


def test_image():
    parsed = parse_single("![](potato.png)")
    assert isinstance(parsed, Image)
    assert parsed.path == Path("potato.png")


def test_image_within_text():
    assert len(parse_all("\npicture of potato: ![](potato.png)\n")) == 2


def test_setex_heading():
    parsed = parse_single("\nTitle\n===\n")
    assert isinstance(parsed, SetexHeading)
    assert parsed.text.texts == [Text("Title")]


def test_heading():
    parsed = parse_single("# Title **with bold**")
    assert isinstance(parsed, Heading)
    assert parsed.level == 1
    assert parsed.text.texts == [Text("Title "), Text("with bold", TextStyle().bold())]


def test_unordered_list():
    parsed = parse_single("\n * One\n    * Sub1\n    * Sub2\n * Two\n * Three")
    assert isinstance(parsed, ListBlock)
    assert [item.depth for item in parsed.items] == [0, 1, 1, 0, 0]


def test_ordered_list_starting_non_one():
    parsed = parse_single("\n 4. One\n    1. Sub1\n    2. Sub2\n 5. Two\n 6. Three")
    assert [item.item_type for item in parsed.items] == [
        ListItemType(ListKind.ORDERED_PERIOD, n) for n in (4, 1, 2, 5, 6)
    ]


def test_line_breaks():
    parsed = parse_all("\nsome text\nwith line breaks  \na hard break\n\nanother")
    assert len(parsed) == 2
    assert len(parsed[0].lines) == 2
    assert parsed[0].lines[0].texts == [Text("some text"), Text(" "), Text("with line breaks")]


def test_code_block():
    parsed = parse_single("\n```rust +exec\nlet q = 42;\n````\n")
    assert isinstance(parsed, Snippet)
    assert parsed.info == "rust +exec"
    assert parsed.code == "let q = 42;\n"


def test_unfenced_code_block_fails():
    with pytest.raises(ParseError):
        parse_all("    indented code\n")


def test_inline_code():
    parsed = parse_single("some `inline code`")
    assert parsed.lines == [Line([Text("some "), Text("inline code", TextStyle().code())])]


def test_table():
    parsed = parse_single(
        "\n| Name | Taste |\n| ------ | ------ |\n| Potato | Great |\n| Carrot | Yuck |\n"
    )
    assert isinstance(parsed, Table)
    assert len(parsed.header.cells) == 2
    assert len(parsed.rows) == 2
    assert all(len(row.cells) == 2 for row in parsed.rows)


def test_comment():
    parsed = parse_single("\n<!-- foo -->\n")
    assert isinstance(parsed, Comment)
    assert parsed.comment == " foo "


def test_list_comment_in_between():
    parsed = parse_all("\n* A\n<!-- foo -->\n  * B\n")
    assert len(parsed) == 3
    assert parsed[2].items[0].depth == 1


def test_block_quote():
    parsed = parse_single(
        "\n> foo **is not** bar\n> ![](hehe.png) test ![](potato.png)\n> \n> * a\n> * b\n>\n"
        "> 1. a\n> 2. b\n>\n> 1) a\n> 2) b\n"
    )
    assert isinstance(parsed, BlockQuote)
    lines = parsed.lines
    assert len(lines) == 11
    assert lines[0] == Line([Text("foo "), Text("is not", TextStyle().bold()), Text(" bar")])
    assert lines[1] == Line([Text("![](hehe.png)"), Text(" test "), Text("![](potato.png)")])
    assert lines[3] == Line([Text("* "), Text("a")])
    assert lines[6] == Line([Text("1. "), Text("a")])
    assert lines[10] == Line([Text("2) "), Text("b")])
    assert lines[2].width() == 0 and lines[5].width() == 0


def test_multiline_block_quote():
    parsed = parse_single("\n>>>\nbar\nfoo\n\n* a\n* b\n>>>")
    assert isinstance(parsed, BlockQuote)
    assert len(parsed.lines) == 5
    assert parsed.lines[0] == Line([Text("bar")])
    assert parsed.lines[1] == Line([Text("foo")])
    assert parsed.lines[4] == Line([Text("* "), Text("b")])


def test_thematic_break():
    parsed = parse_all("\nhello\n\n---\n\nbye\n")
    assert len(parsed) == 3
    assert isinstance(parsed[1], ThematicBreak)


def test_error_lines_offset_by_front_matter():
    with pytest.raises(ParseError) as info:
        parse_all("---\nhi\nmom\n---\n\n* ![](potato.png)\n")
    assert info.value.position.line == 6
    assert info.value.position.column == 3


def test_comment_lines_offset_by_front_matter():
    parsed = parse_all("---\nhi\nmom\n---\n\n<!-- hello -->\n")
    assert parsed[1].source_position.line == 6
    assert parsed[1].source_position.column == 1


@pytest.mark.parametrize("nl", ["\n", "\r\n"])
def test_front_matter_newlines(nl):
    parsed = parse_single(f"---{nl}hi{nl}mom{nl}---{nl}")
    assert parsed.contents == f"hi{nl}mom{nl}"


def test_alert():
    parsed = parse_single("\n> [!note]\n> hi mom\n> bye **mom**\n")
    assert isinstance(parsed, Alert)
    assert parsed.alert_type is AlertType.NOTE
    assert len(parsed.lines) == 2


def test_parse_inlines():
    parsed = MarkdownParser().parse_inlines("hello **mom** how _are you_?")
    assert parsed.texts == [
        Text("hello "),
        Text("mom", TextStyle().bold()),
        Text(" how "),
        Text("are you", TextStyle().italics()),
        Text("?"),
    ]


def test_parse_inlines_rejects_images():
    with pytest.raises(ParseInlinesError):
        MarkdownParser().parse_inlines("![](potato.png)")