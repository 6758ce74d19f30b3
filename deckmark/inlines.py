"""Flattening of inline markdown content into styled lines of text."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from markdown_it.tree import SyntaxTreeNode

from deckmark.elements import Line, SourcePosition, Text
from deckmark.html import CloseSpan, HtmlParser, OpenSpan, ParseHtmlError
from deckmark.text_style import TextStyle

_WIKI_LINK = re.compile(r"\[\[([^\[\]|]*)(?:\|([^\[\]]*))?\]\]")

_IDENTIFIERS = {
    "root": "document",
    "front_matter": "front matter",
    "blockquote": "block quote",
    "bullet_list": "list",
    "ordered_list": "list",
    "list_item": "item",
    "fence": "code block",
    "code_block": "code block",
    "html_block": "html block",
    "paragraph": "paragraph",
    "heading": "heading",
    "hr": "thematic break",
    "table": "table",
    "thead": "table",
    "tbody": "table",
    "tr": "table row",
    "th": "table cell",
    "td": "table cell",
    "text": "text",
    "softbreak": "soft break",
    "hardbreak": "line break",
    "code_inline": "code",
    "html_inline": "inline html",
    "em": "emph",
    "strong": "strong",
    "s": "strikethrough",
    "link": "link",
    "image": "image",
}


def _identifier(node: SyntaxTreeNode) -> str:
    return _IDENTIFIERS.get(node.type, node.type.replace("_", " "))


class ParseErrorKind(Enum):
    """The kind of a parse error."""

    UNSUPPORTED_ELEMENT = "unsupported element"
    UNSUPPORTED_STRUCTURE = "unsupported structure"
    UNFENCED_CODE_BLOCK = "unfenced code block"
    INVALID_HTML = "invalid html"
    INTERNAL = "internal"


class ParseError(Exception):
    """A markdown parsing error and the source position it originated from."""

    def __init__(
        self,
        kind: ParseErrorKind,
        position: SourcePosition = SourcePosition(),
        *,
        element: str = "",
        container: str = "",
        message: str = "",
    ) -> None:
        self.kind = kind
        self.position = position
        self.element = element
        self.container = container
        self.message = message
        super().__init__(str(self))

    @property
    def description(self) -> str:
        """The description of the error, without its position."""
        if self.kind is ParseErrorKind.UNSUPPORTED_ELEMENT:
            return f"unsupported element: {self.element}"
        if self.kind is ParseErrorKind.UNSUPPORTED_STRUCTURE:
            return f"unsupported structure in {self.container}: {self.element}"
        if self.kind is ParseErrorKind.UNFENCED_CODE_BLOCK:
            return "only fenced code blocks are supported"
        if self.kind is ParseErrorKind.INVALID_HTML:
            return f"invalid HTML: {self.message}"
        return f"internal error: {self.message}"

    def __str__(self) -> str:
        return f"parse error at {self.position}: {self.description}"


class SoftBreak(Enum):
    """How soft line breaks are treated."""

    NEWLINE = "newline"
    SPACE = "space"


@dataclass
class InlineText:
    line: Line

    @property
    def kind(self) -> str:
        return "text"


@dataclass
class InlineImage:
    path: str
    title: str

    @property
    def kind(self) -> str:
        return "image"


@dataclass
class InlineLineBreak:
    @property
    def kind(self) -> str:
        return "line break"


Inline = Union[InlineText, InlineImage, InlineLineBreak]


def _to_markdown(nodes) -> str:
    parts = []
    for node in nodes:
        inner = _to_markdown(node.children)
        if node.type == "text":
            parts.append(node.content)
        elif node.type == "strong":
            parts.append(f"**{inner}**")
        elif node.type == "em":
            parts.append(f"*{inner}*")
        elif node.type == "s":
            parts.append(f"~~{inner}~~")
        elif node.type == "code_inline":
            parts.append(f"`{node.content}`")
        elif node.type == "softbreak":
            parts.append("\n")
        elif node.type == "hardbreak":
            parts.append("\\\n")
        elif node.type == "link":
            parts.append(f"[{inner}]({node.attrs.get('href', '')})")
        elif node.type == "image":
            parts.append(f"![{inner}]({node.attrs.get('src', '')})")
        else:
            parts.append(node.content or inner)
    return "".join(parts)


@dataclass
class InlinesParser:
    """Walks a syntax tree node and collects its inline content."""

    soft_break: SoftBreak = SoftBreak.SPACE
    stringify_images: bool = False
    line_offset: int = 0
    _inlines: list = field(default_factory=list, init=False, repr=False)
    _pending: list = field(default_factory=list, init=False, repr=False)

    def parse(self, node: SyntaxTreeNode) -> list[Inline]:
        """Parse the children of a node into text lines, images and line breaks."""
        self._inlines = []
        self._pending = []
        self._process_children(node, TextStyle())
        self._store_pending()
        inlines, self._inlines = self._inlines, []
        return inlines

    def _position(self, node: Optional[SyntaxTreeNode]) -> SourcePosition:
        while node is not None and not node.is_root:
            line_map = node.map
            if line_map:
                return SourcePosition(line_map[0] + 1 + self.line_offset, 1)
            node = node.parent
        return SourcePosition(1 + self.line_offset, 1)

    def _store_pending(self) -> None:
        if self._pending:
            self._inlines.append(InlineText(Line(self._pending)))
            self._pending = []

    def _push_text(self, content: str, style: TextStyle) -> None:
        position = 0
        for match in _WIKI_LINK.finditer(content):
            if match.start() > position:
                self._pending.append(Text(content[position : match.start()], style))
            url = match.group(2) if match.group(2) is not None else match.group(1)
            self._pending.append(Text(url.strip(), TextStyle().link_url()))
            position = match.end()
        if position < len(content) or not content:
            self._pending.append(Text(content[position:], style))

    def _process_children(self, root: SyntaxTreeNode, base_style: TextStyle) -> None:
        html_styles: list[TextStyle] = []
        style = base_style
        for child in root.children:
            action = self._process_node(child, root, style)
            if action is None:
                continue
            if isinstance(action, OpenSpan):
                html_styles.append(action.style)
            elif html_styles:
                html_styles.pop()
            style = base_style
            for html_style in reversed(html_styles):
                style = style.merged(html_style)

    def _process_node(
        self, node: SyntaxTreeNode, parent: SyntaxTreeNode, style: TextStyle
    ) -> Optional[Union[OpenSpan, CloseSpan]]:
        kind = node.type
        if kind == "text":
            self._push_text(node.content, style)
        elif kind == "code_inline":
            self._pending.append(Text(node.content, TextStyle().code()))
        elif kind == "strong":
            self._process_children(node, style.bold())
        elif kind == "em":
            self._process_children(node, style.italics())
        elif kind == "s":
            self._process_children(node, style.strikethrough())
        elif kind == "inline":
            self._process_children(node, style)
        elif kind == "softbreak":
            if self.soft_break is SoftBreak.NEWLINE:
                self._store_pending()
            else:
                self._pending.append(Text(" ", style))
        elif kind == "hardbreak":
            self._store_pending()
            self._inlines.append(InlineLineBreak())
        elif kind == "link":
            self._process_link(node)
        elif kind == "image":
            self._process_image(node)
        elif kind == "paragraph":
            self._process_children(node, style)
            self._store_pending()
            if parent.type == "blockquote":
                self._inlines.append(InlineLineBreak())
        elif kind in ("bullet_list", "ordered_list"):
            self._process_children(node, style)
            self._store_pending()
            self._inlines.append(InlineLineBreak())
        elif kind == "list_item":
            self._pending.append(Text(self._item_marker(node, parent)))
            self._process_children(node, style)
        elif kind == "html_inline":
            try:
                return HtmlParser().parse(node.content)
            except ParseHtmlError as error:
                raise ParseError(
                    ParseErrorKind.INVALID_HTML,
                    self._position(node),
                    message=str(error),
                ) from error
        else:
            raise ParseError(
                ParseErrorKind.UNSUPPORTED_STRUCTURE,
                self._position(node),
                container="text",
                element=_identifier(node),
            )
        return None

    def _process_link(self, node: SyntaxTreeNode) -> None:
        url = str(node.attrs.get("href", ""))
        title = str(node.attrs.get("title", "") or "")
        has_label = bool(node.children)
        if has_label:
            self._process_children(node, TextStyle().link_label())
            self._pending.append(Text(" ("))
        self._pending.append(Text(url, TextStyle().link_url()))
        if title:
            self._pending.append(Text(' "'))
            self._pending.append(Text(title, TextStyle().link_title()))
            self._pending.append(Text('"'))
        if has_label:
            self._pending.append(Text(")"))

    def _process_image(self, node: SyntaxTreeNode) -> None:
        url = str(node.attrs.get("src", ""))
        if self.stringify_images:
            title = str(node.attrs.get("title", "") or "")
            self._pending.append(Text(f"![{title}]({url})"))
            return
        self._store_pending()
        self._inlines.append(InlineImage(url, _to_markdown(node.children).rstrip()))

    @staticmethod
    def _item_marker(node: SyntaxTreeNode, parent: SyntaxTreeNode) -> str:
        if parent.type != "ordered_list":
            return "* "
        info = node.info or ""
        if info.isdigit():
            number = int(info)
        else:
            start = int(parent.attrs.get("start", 1))
            number = start + parent.children.index(node)
        delimiter = ")" if node.markup == ")" else "."
        return f"{number}{delimiter} "