"""Text styles, colors and their terminal rendering."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import IntFlag
from typing import ClassVar, Optional, Union

_MAX_FONT_SIZE = 16

# Codes used for the 256-color palette escape sequences.
_NAMED_COLORS: dict[str, int] = {
    "black": 0,
    "dark_red": 1,
    "dark_green": 2,
    "dark_yellow": 3,
    "dark_blue": 4,
    "dark_magenta": 5,
    "dark_cyan": 6,
    "grey": 7,
    "dark_grey": 8,
    "red": 9,
    "green": 10,
    "yellow": 11,
    "blue": 12,
    "magenta": 13,
    "cyan": 14,
    "white": 15,
}

_ANSI_COLORS: dict[int, str] = {
    0: "black",
    1: "red",
    2: "green",
    3: "yellow",
    4: "blue",
    5: "magenta",
    6: "cyan",
    7: "white",
}


@dataclass(frozen=True)
class Color:
    """A concrete terminal color: either a named color or an RGB triple."""

    name: str
    components: Optional[tuple[int, int, int]] = None

    BLACK: ClassVar[Color]
    DARK_GREY: ClassVar[Color]
    RED: ClassVar[Color]
    DARK_RED: ClassVar[Color]
    GREEN: ClassVar[Color]
    DARK_GREEN: ClassVar[Color]
    YELLOW: ClassVar[Color]
    DARK_YELLOW: ClassVar[Color]
    BLUE: ClassVar[Color]
    DARK_BLUE: ClassVar[Color]
    MAGENTA: ClassVar[Color]
    DARK_MAGENTA: ClassVar[Color]
    CYAN: ClassVar[Color]
    DARK_CYAN: ClassVar[Color]
    WHITE: ClassVar[Color]
    GREY: ClassVar[Color]

    def __post_init__(self) -> None:
        if self.name == "rgb":
            if self.components is None or len(self.components) != 3:
                raise ValueError("rgb colors need exactly three components")
            for component in self.components:
                if not isinstance(component, int) or not 0 <= component <= 255:
                    raise ValueError(f"invalid rgb component: {component!r}")
        else:
            if self.name not in _NAMED_COLORS:
                raise ValueError(f"unknown color: {self.name}")
            if self.components is not None:
                raise ValueError("named colors take no components")

    @classmethod
    def rgb(cls, r: int, g: int, b: int) -> Color:
        """Build an RGB color."""
        return cls("rgb", (r, g, b))

    def as_rgb(self) -> Optional[tuple[int, int, int]]:
        """The RGB components, or None for a named color."""
        return self.components

    @classmethod
    def from_ansi(cls, code: int) -> Optional[Color]:
        """Map an ANSI foreground (30-37) or background (40-47) code to a color."""
        for base in (30, 40):
            if base <= code <= base + 7:
                return cls(_ANSI_COLORS[code - base])
        return None

    def _escape_code(self, layer: int) -> str:
        if self.components is not None:
            r, g, b = self.components
            return f"{layer};2;{r};{g};{b}"
        return f"{layer};5;{_NAMED_COLORS[self.name]}"


for _name in _NAMED_COLORS:
    setattr(Color, _name.upper(), Color(_name))


@dataclass(frozen=True)
class ClassColor:
    """A color that refers to a class defined in the theme's palette."""

    name: str
    background: bool = False


RawColor = Union[Color, ClassColor]


@dataclass(frozen=True)
class Colors:
    """A pair of optional background and foreground colors."""

    background: Optional[RawColor] = None
    foreground: Optional[RawColor] = None


class _Flag(IntFlag):
    BOLD = 1
    ITALICS = 2
    CODE = 4
    STRIKETHROUGH = 8
    UNDERLINED = 16


# Terminal attribute codes, in the order they are emitted.
_ATTRIBUTE_CODES = (
    (_Flag.BOLD, 1),
    (_Flag.ITALICS, 3),
    (_Flag.UNDERLINED, 4),
    (_Flag.STRIKETHROUGH, 9),
)


@dataclass(frozen=True)
class TextStyle:
    """The style of a piece of text. Every modifier returns a new style."""

    flags: int = 0
    colors: Colors = field(default_factory=Colors)
    size: int = 1

    @classmethod
    def colored(cls, colors: Colors) -> TextStyle:
        """A default style with the given colors."""
        return cls(colors=colors)

    def with_size(self, size: int) -> TextStyle:
        """Set the font size, capped at 16."""
        if size < 0:
            raise ValueError(f"invalid font size: {size}")
        return dataclasses.replace(self, size=min(size, _MAX_FONT_SIZE))

    def _add(self, flag: _Flag) -> TextStyle:
        return dataclasses.replace(self, flags=self.flags | flag)

    def _has(self, flag: _Flag) -> bool:
        return bool(self.flags & flag)

    def bold(self) -> TextStyle:
        return self._add(_Flag.BOLD)

    def italics(self) -> TextStyle:
        return self._add(_Flag.ITALICS)

    def code(self) -> TextStyle:
        return self._add(_Flag.CODE)

    def strikethrough(self) -> TextStyle:
        return self._add(_Flag.STRIKETHROUGH)

    def underlined(self) -> TextStyle:
        return self._add(_Flag.UNDERLINED)

    def link_label(self) -> TextStyle:
        return self.bold()

    def link_title(self) -> TextStyle:
        return self.italics()

    def link_url(self) -> TextStyle:
        return self.italics().underlined()

    def bg_color(self, color: RawColor) -> TextStyle:
        return dataclasses.replace(
            self, colors=dataclasses.replace(self.colors, background=color)
        )

    def fg_color(self, color: RawColor) -> TextStyle:
        return dataclasses.replace(
            self, colors=dataclasses.replace(self.colors, foreground=color)
        )

    def with_colors(self, colors: Colors) -> TextStyle:
        return dataclasses.replace(self, colors=colors)

    def is_bold(self) -> bool:
        return self._has(_Flag.BOLD)

    def is_italics(self) -> bool:
        return self._has(_Flag.ITALICS)

    def is_code(self) -> bool:
        return self._has(_Flag.CODE)

    def is_strikethrough(self) -> bool:
        return self._has(_Flag.STRIKETHROUGH)

    def is_underlined(self) -> bool:
        return self._has(_Flag.UNDERLINED)

    def merged(self, other: TextStyle) -> TextStyle:
        """Combine with another style; colors already set here take precedence."""
        colors = Colors(
            background=self.colors.background
            if self.colors.background is not None
            else other.colors.background,
            foreground=self.colors.foreground
            if self.colors.foreground is not None
            else other.colors.foreground,
        )
        return TextStyle(
            flags=self.flags | other.flags,
            colors=colors,
            size=max(self.size, other.size),
        )

    def apply(self, text: str) -> str:
        """Render text with this style as terminal escape sequences."""
        content = text if self.size <= 1 else f"\x1b]66;s={self.size};{text}\x1b\\"
        background = self.colors.background
        foreground = self.colors.foreground
        for color in (background, foreground):
            if isinstance(color, ClassColor):
                raise ValueError(f"unresolved palette color: {color.name}")

        prefix = []
        if background is not None:
            prefix.append(f"\x1b[{background._escape_code(48)}m")
        if foreground is not None:
            prefix.append(f"\x1b[{foreground._escape_code(38)}m")
        attributes = [code for flag, code in _ATTRIBUTE_CODES if self._has(flag)]
        prefix.extend(f"\x1b[{code}m" for code in attributes)
        if not prefix:
            return content

        if attributes:
            suffix = "\x1b[0m"
        else:
            suffix = ("\x1b[49m" if background is not None else "") + (
                "\x1b[39m" if foreground is not None else ""
            )
        return "".join(prefix) + content + suffix