import pytest

from deckmark.elements import Text
from deckmark.text import WeightedLine, WeightedText
from deckmark.text_style import TextStyle


def join_lines(lines):
    return [" ".join(ref.text for ref in line) for line in lines]


def test_text_creation():
    assert WeightedText("hello world").to_ref().width() == 11


def test_text_creation_utf8():
    text_ref = WeightedText("█████").to_ref()
    assert text_ref.width() == 5
    assert [text_ref.chars_until(i) for i in range(5)] == [0, 1, 2, 3, 4]

    text_ref = text_ref.make_ref(1, 4)
    assert text_ref.width() == 3
    assert [text_ref.chars_until(i) for i in range(3)] == [0, 1, 2]

    text_ref = text_ref.make_ref(0, 3)
    assert text_ref.width() == 3
    assert [text_ref.chars_until(i) for i in range(3)] == [0, 1, 2]


def test_minimal_split():
    head, rest = WeightedText("█████").to_ref().word_split_at_length(1)
    assert head.width() == 1
    assert rest.width() == 4


def test_no_spaces_split():
    head, rest = WeightedText("█████").to_ref().word_split_at_length(2)
    assert head.width() == 2
    assert rest.width() == 3


def test_font_size_split():
    text = WeightedText(Text("█████", TextStyle().with_size(2)))
    head, rest = text.to_ref().word_split_at_length(3)
    assert head.width() == 2
    assert rest.width() == 8


def test_make_ref():
    text_ref = WeightedText("hello world").to_ref()
    head = text_ref.make_ref(0, 1)
    assert head.text == "h"
    assert head.width() == 1
    rest = text_ref.make_ref(1, 11)
    assert rest.text == "ello world"
    assert rest.width() == 10


def test_word_split():
    head, rest = WeightedText("short string").to_ref().word_split_at_length(7)
    assert head.text == "short"
    assert rest.text == " string"


def test_trim_start_and_into_parts():
    style = TextStyle().bold()
    trimmed = WeightedText(Text("   abc", style)).to_ref().trim_start()
    assert trimmed.into_parts() == ("abc", style)
    assert trimmed.width() == 3


def test_split_at_full_length():
    assert join_lines(WeightedLine.from_str("hello world").split(11)) == ["hello world"]


def test_no_split_necessary():
    line = WeightedLine([WeightedText("short"), WeightedText("text")])
    assert join_lines(line.split(50)) == ["short text"]


def test_split_lines_single():
    line = WeightedLine([WeightedText("this is a slightly long line")])
    assert join_lines(line.split(6)) == ["this", "is a", "slight", "ly", "long", "line"]


LONG_CHUNKS = ["this is a slightly long line", "another chunk", "yet some other piece"]


def test_split_lines_multi():
    line = WeightedLine([WeightedText(t) for t in LONG_CHUNKS])
    assert join_lines(line.split(10)) == [
        "this is a",
        "slightly",
        "long line",
        "another",
        "chunk yet",
        "some other",
        "piece",
    ]


def test_long_splits():
    line = WeightedLine([WeightedText(t) for t in LONG_CHUNKS])
    assert join_lines(line.split(50)) == [
        "this is a slightly long line another chunk yet some",
        "other piece",
    ]


def test_prefixed_by_whitespace():
    assert join_lines(WeightedLine.from_str("   * bullet").split(50)) == ["   * bullet"]


def test_utf8_character():
    assert join_lines(WeightedLine.from_str("• A").split(50)) == ["• A"]


def test_many_utf8_characters():
    assert join_lines(WeightedLine.from_str("█████ ██").split(3)) == ["███", "██", "██"]


def test_no_whitespaces_ascii():
    lines = join_lines(WeightedLine.from_str("X" * 10).split(3))
    assert lines == ["XXX", "XXX", "XXX", "X"]


def test_no_whitespaces_utf8():
    lines = join_lines(WeightedLine.from_str("─" * 10).split(3))
    assert lines == ["───", "───", "───", "─"]


def test_wide_characters():
    lines = join_lines(WeightedLine.from_str("Ｈｅｌｌｏ ｗｏｒｌｄ").split(10))
    assert lines == ["Ｈｅｌｌｏ", "ｗｏｒｌｄ"]


def test_empty_line_yields_nothing():
    assert list(WeightedLine().split(10)) == []


@pytest.mark.parametrize(
    "texts, expected",
    [
        ([Text("hello")], 1),
        ([Text("hello"), Text(" world")], 1),
        ([Text("hello"), Text(" "), Text("world")], 1),
        ([Text("hello"), Text(" ", TextStyle().bold()), Text("world")], 3),
        (
            [
                Text("hello"),
                Text(" ", TextStyle().bold()),
                Text("w", TextStyle().bold()),
                Text("orld"),
            ],
            3,
        ),
    ],
)
def test_compaction(texts, expected):
    assert len(list(WeightedLine.from_texts(texts).texts())) == expected


def test_from_texts_width_and_font_size():
    line = WeightedLine.from_texts([Text("ab"), Text("cd", TextStyle().with_size(3))])
    assert line.width() == 8
    assert line.font_size() == 3


def test_from_str_width():
    line = WeightedLine.from_str("Ｈｉ")
    assert line.width() == 4
    assert line.font_size() == 1