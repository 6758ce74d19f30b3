"""Parsing of markdown documents into a flat list of elements."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

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
    ListItem,
    ListItemType,
    ListKind,
    MarkdownElement,
    Paragraph,
    SetexHeading,
    Snippet,
    SourcePosition,
    Table,
    TableRow,
    ThematicBreak,
)
from deckmark.inlines import (
    InlineImage,
    InlineLineBreak,
    InlinesParser,
    InlineText,
    ParseError,
    ParseErrorKind,
    SoftBreak,
    _identifier,
)

_ALERT = re.compile(r"^( {0,3}>)[ \t]?\[!(\w+)\][ \t]*(.*?)[ \t]*$")
_LIST_MARKER = re.compile(r"\s*(?:[*+-]|\d+[.)])[ \t]+")
_LIST_TYPES = ("bullet_list", "ordered_list")


class ParseInlinesError(ValueError):
    """Raised when a single markdown line can't be parsed as plain inlines."""

    def __init__(self, message: str) -> None:
        super().__init__(f"invalid markdown line: {message}")


@dataclass
class _Prepared:
    text: str
    front_matter: Optional[str] = None
    alerts: dict = field(default_factory=dict)


def _newline_of(line: str) -> str:
    return line[len(line.rstrip("\r\n")):] or "\n"


def _prepare(contents: str) -> _Prepared:
    lines = contents.splitlines(keepends=True)
    front_matter = None
    if lines and lines[0].rstrip("\r\n") == "---":
        closing = next(
            (i for i in range(1, len(lines)) if lines[i].rstrip("\r\n") == "---"), None
        )
        if closing is not None:
            front_matter = "".join(lines[1:closing])
            lines[: closing + 1] = [_newline_of(line) for line in lines[: closing + 1]]

    output: list[str] = []
    alerts: dict[int, tuple[AlertType, Optional[str]]] = {}
    in_quote = False
    for number, line in enumerate(lines):
        body = line.rstrip("\r\n")
        newline = _newline_of(line)
        if body == ">>>":
            in_quote = not in_quote
            output.append(">" + newline)
            continue
        if in_quote:
            output.append((f"> {body}" if body.strip() else ">") + newline)
            continue
        match = _ALERT.match(body)
        if match:
            try:
                alert_type = AlertType(match.group(2).lower())
            except ValueError:
                alert_type = None
            if alert_type is not None:
                alerts[number] = (alert_type, match.group(3) or None)
                output.append(match.group(1) + newline)
                continue
        output.append(line)
    return _Prepared("".join(output), front_matter, alerts)


class MarkdownParser:
    """Parses the contents of a markdown file into a list of elements."""

    def __init__(self) -> None:
        self._md = MarkdownIt("commonmark").enable(["table", "strikethrough"])
        self._lines: list[str] = []

    def _tree(self, text: str) -> SyntaxTreeNode:
        return SyntaxTreeNode(self._md.parse(text))

    def parse(self, contents: str) -> list[MarkdownElement]:
        """Parse a whole markdown document."""
        prepared = _prepare(contents)
        self._lines = prepared.text.splitlines()
        self._alerts = prepared.alerts
        elements: list[MarkdownElement] = []
        if prepared.front_matter is not None:
            elements.append(FrontMatter(prepared.front_matter))
        for node in self._tree(prepared.text).children:
            elements.extend(self._parse_node(node))
        return elements

    def parse_inlines(self, line: str) -> Line:
        """Parse a single line of markdown made only of text inlines."""
        root = self._tree(line)
        if not root.children:
            return Line()
        if len(root.children) > 1 or root.children[0].type != "paragraph":
            raise ParseInlinesError("inline must be simple text")
        try:
            inlines = InlinesParser(SoftBreak.SPACE, False).parse(root.children[0])
        except ParseError as error:
            raise ParseInlinesError(str(error)) from error
        output = Line()
        for inline in inlines:
            if isinstance(inline, InlineImage):
                raise ParseInlinesError("images not supported")
            if isinstance(inline, InlineLineBreak):
                raise ParseInlinesError("line breaks not supported")
            output.texts.extend(inline.line.texts)
        return output

    def _position(self, node: Optional[SyntaxTreeNode], in_list: bool = False) -> SourcePosition:
        while node is not None and not node.is_root:
            if node.map:
                number = node.map[0]
                text = self._lines[number] if number < len(self._lines) else ""
                if in_list:
                    match = _LIST_MARKER.match(text)
                    column = match.end() if match else len(text) - len(text.lstrip())
                else:
                    column = len(text) - len(text.lstrip())
                return SourcePosition(number + 1, column + 1)
            node = node.parent
        return SourcePosition(1, 1)

    def _parse_node(self, node: SyntaxTreeNode) -> list[MarkdownElement]:
        kind = node.type
        if kind == "paragraph":
            return self._parse_paragraph(node)
        if kind == "heading":
            text = self._parse_text(node)
            if node.markup in ("=", "-"):
                return [SetexHeading(text)]
            return [Heading(int(node.tag[1:]), text)]
        if kind in _LIST_TYPES:
            text = self._lines[node.map[0]] if node.map else ""
            offset = len(text) - len(text.lstrip(" "))
            return [ListBlock(self._parse_list(node, offset // 2))]
        if kind == "table":
            return [self._parse_table(node)]
        if kind == "fence":
            return [Snippet(node.info, node.content, self._position(node))]
        if kind == "code_block":
            raise ParseError(ParseErrorKind.UNFENCED_CODE_BLOCK, self._position(node))
        if kind == "hr":
            return [ThematicBreak()]
        if kind == "html_block":
            return [self._parse_html_block(node)]
        if kind == "blockquote":
            lines = self._parse_block_quote(node)
            alert = self._alerts.get(node.map[0]) if node.map else None
            if alert is not None:
                return [Alert(alert[0], alert[1], lines)]
            return [BlockQuote(lines)]
        raise ParseError(
            ParseErrorKind.UNSUPPORTED_ELEMENT, self._position(node), element=_identifier(node)
        )

    def _parse_html_block(self, node: SyntaxTreeNode) -> Comment:
        block = node.content.strip()
        start, end = "<!--", "-->"
        if not block.startswith(start) or not block.endswith(end) or len(block) < 7:
            raise ParseError(
                ParseErrorKind.UNSUPPORTED_ELEMENT, self._position(node), element="html block"
            )
        return Comment(block[len(start): -len(end)], self._position(node))

    def _parse_block_quote(self, node: SyntaxTreeNode) -> list[Line]:
        lines: list[Line] = []
        for inline in InlinesParser(SoftBreak.NEWLINE, True).parse(node):
            if isinstance(inline, InlineText):
                lines.append(inline.line)
            elif isinstance(inline, InlineLineBreak):
                lines.append(Line())
        if lines and not any(text.content for text in lines[-1].texts):
            lines.pop()
        return lines

    def _parse_paragraph(self, node: SyntaxTreeNode) -> list[MarkdownElement]:
        elements: list[MarkdownElement] = []
        pending: list[Line] = []
        for inline in InlinesParser(SoftBreak.SPACE, False).parse(node):
            if isinstance(inline, InlineText):
                pending.append(inline.line)
            elif isinstance(inline, InlineImage):
                if pending:
                    elements.append(Paragraph(pending))
                    pending = []
                elements.append(Image(Path(inline.path), inline.title, self._position(node)))
        if pending:
            elements.append(Paragraph(pending))
        return elements

    def _parse_text(self, node: SyntaxTreeNode, in_list: bool = False) -> Line:
        texts = []
        for inline in InlinesParser(SoftBreak.SPACE, False).parse(node):
            if not isinstance(inline, InlineText):
                raise ParseError(
                    ParseErrorKind.UNSUPPORTED_STRUCTURE,
                    self._position(node, in_list),
                    container="text",
                    element=inline.kind,
                )
            texts.extend(inline.line.texts)
        return Line(texts)

    def _parse_list(self, root: SyntaxTreeNode, depth: int) -> list[ListItem]:
        items: list[ListItem] = []
        for index, node in enumerate(root.children):
            if node.type != "list_item":
                raise ParseError(
                    ParseErrorKind.UNSUPPORTED_STRUCTURE,
                    self._position(node),
                    container="list",
                    element=_identifier(node),
                )
            items.extend(self._parse_list_item(node, root, index, depth))
        return items

    def _parse_list_item(
        self, node: SyntaxTreeNode, parent: SyntaxTreeNode, index: int, depth: int
    ) -> list[ListItem]:
        if parent.type == "ordered_list":
            info = node.info or ""
            number = int(info) if info.isdigit() else int(parent.attrs.get("start", 1)) + index
            kind = ListKind.ORDERED_PARENS if node.markup == ")" else ListKind.ORDERED_PERIOD
            item_type = ListItemType(kind, number)
        else:
            item_type = ListItemType(ListKind.UNORDERED)
        items: list[ListItem] = []
        for child in node.children:
            if child.type == "paragraph":
                items.append(ListItem(depth, self._parse_text(child, True), item_type))
            elif child.type in _LIST_TYPES:
                items.extend(self._parse_list(child, depth + 1))
            else:
                raise ParseError(
                    ParseErrorKind.UNSUPPORTED_STRUCTURE,
                    self._position(child),
                    container="list",
                    element=_identifier(child),
                )
        return items

    def _parse_table(self, node: SyntaxTreeNode) -> Table:
        rows: list[TableRow] = []
        for section in node.children:
            for row in section.children:
                if row.type != "tr":
                    raise ParseError(
                        ParseErrorKind.UNSUPPORTED_STRUCTURE,
                        self._position(row),
                        container="table",
                        element=_identifier(row),
                    )
                rows.append(TableRow([self._parse_text(cell) for cell in row.children]))
        header = rows[0] if rows else TableRow()
        return Table(header, rows[1:])