"""The markdown elements a document is parsed into."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Union

from wcwidth import wcwidth

from deckmark.text_style import TextStyle


def _display_width(text: str) -> int:
    return sum(max(wcwidth(char), 0) for char in text)


@dataclass(frozen=True)
class SourcePosition:
    """A line and column in the source file."""

    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Text:
    """A styled piece of text."""

    content: str = ""
    style: TextStyle = field(default_factory=TextStyle)


@dataclass
class Line:
    """A line of text made of styled chunks."""

    texts: list[Text] = field(default_factory=list)

    def width(self) -> int:
        """The display width of the whole line."""
        return sum(_display_width(text.content) for text in self.texts)

    def apply_style(self, style: TextStyle) -> None:
        """Merge the given style into every chunk of this line."""
        self.texts = [Text(text.content, text.style.merged(style)) for text in self.texts]


class ListKind(Enum):
    UNORDERED = "unordered"
    ORDERED_PARENS = "ordered_parens"
    ORDERED_PERIOD = "ordered_period"


@dataclass(frozen=True)
class ListItemType:
    """The kind of a list item and, for ordered lists, its number."""

    kind: ListKind
    number: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind is ListKind.UNORDERED:
            if self.number is not None:
                raise ValueError("unordered list items have no number")
        elif self.number is None or self.number < 0:
            raise ValueError("ordered list items need a non-negative number")


@dataclass
class ListItem:
    """A list item; depth grows by one for every nesting level."""

    depth: int
    contents: Line
    item_type: ListItemType


@dataclass
class TableRow:
    cells: list[Line] = field(default_factory=list)


@dataclass
class Table:
    """A table with a header row and body rows."""

    header: TableRow
    rows: list[TableRow] = field(default_factory=list)

    def columns(self) -> int:
        return len(self.header.cells)

    def iter_column(self, column: int) -> Iterator[Line]:
        """Yield every cell in a column, header included."""
        yield self.header.cells[column]
        for row in self.rows:
            yield row.cells[column]


class PercentParseError(ValueError):
    """Raised when a percentage cannot be parsed."""


_UNSIGNED = re.compile(r"\+?[0-9]+")


@dataclass(frozen=True)
class Percent:
    """A percentage."""

    value: int

    @classmethod
    def parse(cls, text: str) -> Percent:
        """Parse a string like '50%'; the value must be within 1-100."""
        prefix, found, suffix = text.partition("%")
        if not found:
            raise PercentParseError("no unit provided")
        if not _UNSIGNED.fullmatch(prefix) or not 1 <= int(prefix) <= 100:
            raise PercentParseError("value must be a number between 1-100")
        if suffix:
            raise PercentParseError(f"unexpected: '{suffix}'")
        return cls(int(prefix))

    def as_ratio(self) -> float:
        return self.value / 100.0


class AlertType(Enum):
    NOTE = "note"
    TIP = "tip"
    IMPORTANT = "important"
    WARNING = "warning"
    CAUTION = "caution"


@dataclass
class FrontMatter:
    contents: str


@dataclass
class SetexHeading:
    text: Line


@dataclass
class Heading:
    level: int
    text: Line


@dataclass
class Paragraph:
    lines: list[Line]


@dataclass
class Image:
    path: Path
    title: str
    source_position: SourcePosition = field(default_factory=SourcePosition)


@dataclass
class ListBlock:
    """A list; contiguous items of all nesting levels are merged into one."""

    items: list[ListItem]


@dataclass
class Snippet:
    """A fenced code block."""

    info: str
    code: str
    source_position: SourcePosition = field(default_factory=SourcePosition)


@dataclass
class ThematicBreak:
    pass


@dataclass
class Comment:
    comment: str
    source_position: SourcePosition = field(default_factory=SourcePosition)


@dataclass
class BlockQuote:
    lines: list[Line]


@dataclass
class Alert:
    alert_type: AlertType
    title: Optional[str]
    lines: list[Line]


MarkdownElement = Union[
    FrontMatter,
    SetexHeading,
    Heading,
    Paragraph,
    Image,
    ListBlock,
    Snippet,
    Table,
    ThematicBreak,
    Comment,
    BlockQuote,
    Alert,
]