"""Parsing of the small subset of inline HTML allowed in markdown text."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Union

from deckmark.text_style import ClassColor, Color, RawColor, TextStyle

_TAG = re.compile(r"<\s*([^\s/>]+)")
_ATTRIBUTE = re.compile(
    r"""([^\s=/>"']+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s>]+)))?"""
)
_HEX_COLOR = re.compile(r"[0-9a-fA-F]{6}")


class ParseHtmlError(ValueError):
    """Raised when an inline HTML tag is invalid or unsupported."""


@dataclass(frozen=True)
class OpenSpan:
    """An opening span tag and the style it introduces."""

    style: TextStyle = field(default_factory=TextStyle)


@dataclass(frozen=True)
class CloseSpan:
    """A closing span tag."""


HtmlInline = Union[OpenSpan, CloseSpan]


def _parse_raw_color(value: str) -> RawColor:
    if _HEX_COLOR.fullmatch(value):
        r, g, b = bytes.fromhex(value)
        return Color.rgb(r, g, b)
    if value == "rgb":
        raise ParseHtmlError(f"invalid color: {value}")
    try:
        return Color(value)
    except ValueError:
        raise ParseHtmlError(f"invalid color: invalid hex color: {value}") from None


def parse_color(value: str) -> RawColor:
    """Parse a CSS color: an RGB color must be prefixed with '#', a named one must not."""
    if value.startswith("#"):
        try:
            color = _parse_raw_color(value[1:])
        except ParseHtmlError:
            color = None
        if isinstance(color, Color) and color.as_rgb() is not None:
            return color
        return _parse_raw_color(value)
    color = _parse_raw_color(value)
    if isinstance(color, Color) and color.as_rgb() is not None:
        raise ParseHtmlError("invalid color: missing '#' in rgb color")
    return color


def _iter_attributes(text: str, position: int):
    while True:
        while position < len(text) and text[position].isspace():
            position += 1
        if position >= len(text) or text[position] in "/>":
            return
        match = _ATTRIBUTE.match(text, position)
        if match is None or match.end() == position:
            raise ParseHtmlError(f"parsing html failed: unexpected input at {position}")
        name, double, single, bare = match.groups()
        value = next((v for v in (double, single, bare) if v is not None), "")
        yield name, value
        position = match.end()


@dataclass(frozen=True)
class HtmlParser:
    """Parses a single inline HTML tag; only span tags are supported."""

    strict: bool = True

    def parse(self, text: str) -> HtmlInline:
        """Parse one tag into an opening or closing span."""
        if text.startswith("</"):
            if text.startswith("</span"):
                return CloseSpan()
            raise ParseHtmlError(f"unsupported closing tag: {text}")
        tag = _TAG.match(text)
        if tag is None:
            raise ParseHtmlError("no html tags found")
        if tag.group(1) != "span":
            raise ParseHtmlError("HTML can only contain span tags")
        return OpenSpan(self._parse_attributes(_iter_attributes(text, tag.end())))

    def _parse_attributes(self, attributes) -> TextStyle:
        style = TextStyle()
        for name, value in attributes:
            if name == "style":
                style = self._parse_css(value, style)
            elif name == "class":
                style = style.fg_color(ClassColor(value)).bg_color(
                    ClassColor(value, background=True)
                )
            elif self.strict:
                raise ParseHtmlError(f"unsupported tag attribute: {name}")
        return style

    def _parse_css(self, attribute: str, style: TextStyle) -> TextStyle:
        for declaration in attribute.split(";"):
            declaration = declaration.strip()
            if not declaration:
                continue
            key, found, value = declaration.partition(":")
            if not found:
                raise ParseHtmlError("attribute has no ':'")
            key = key.strip()
            value = value.strip()
            if key == "color":
                style = style.fg_color(parse_color(value))
            elif key == "background-color":
                style = style.bg_color(parse_color(value))
            elif self.strict:
                raise ParseHtmlError(f"invalid css attribute: {key}")
        return style