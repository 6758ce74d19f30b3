"""Lines of styled text weighted by display width, and word-wrapping them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Union

from wcwidth import wcwidth

from deckmark.elements import Text
from deckmark.text_style import TextStyle

# Negative remaining widths wrap around like an unsigned machine integer.
_UNSIGNED_RANGE = 2**64


def _char_width(char: str) -> int:
    return max(wcwidth(char), 0)


@dataclass(frozen=True)
class WeightedTextRef:
    """A slice of a weighted text, with cumulative widths at each char boundary."""

    text: str
    widths: tuple[int, ...]
    style: TextStyle

    def into_parts(self) -> tuple[str, TextStyle]:
        """The text and its style."""
        return self.text, self.style

    def word_split_at_length(self, max_length: int) -> tuple[WeightedTextRef, WeightedTextRef]:
        """Split at a word boundary so the head fits in max_length, if possible."""
        if self.width() <= max_length:
            return self.make_ref(0, len(self.text)), self.make_ref(0, 0)
        max_chars = max(max_length // self.style.size, 1)
        target = self._substr(max_chars + 1)
        if " " in target:
            output = target.rsplit(" ", 1)[0]
        else:
            output = self._substr(max_chars)
        return self.make_ref(0, len(output)), self.make_ref(len(output), len(self.text))

    def _substr(self, count: int) -> str:
        return self.text[: self.chars_until(count)]

    def make_ref(self, start: int, end: int) -> WeightedTextRef:
        """A reference to the characters in [start, end)."""
        return WeightedTextRef(self.text[start:end], self.widths[start : end + 1], self.style)

    def trim_start(self) -> WeightedTextRef:
        """Drop leading whitespace."""
        text = self.text.lstrip()
        trimmed = len(self.text) - len(text)
        return WeightedTextRef(text, self.widths[trimmed:], self.style)

    def width(self) -> int:
        """The display width, scaled by the font size."""
        if not self.widths:
            return 0
        return (self.widths[-1] - self.widths[0]) * self.style.size

    def chars_until(self, index: int) -> int:
        """The number of characters before the given index, clamped to the text."""
        if not self.widths:
            return 0
        return min(index, len(self.widths) - 1)


@dataclass(frozen=True)
class WeightedText:
    """A styled text with its cumulative character widths."""

    text: Text
    widths: tuple[int, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.text, str):
            object.__setattr__(self, "text", Text(self.text))
        widths = [0]
        for char in self.text.content:
            widths.append(widths[-1] + _char_width(char))
        object.__setattr__(self, "widths", tuple(widths))

    def to_ref(self) -> WeightedTextRef:
        return WeightedTextRef(self.text.content, self.widths, self.text.style)

    def width(self) -> int:
        return self.to_ref().width()


class WeightedLine:
    """A line of weighted text chunks, with its total width and font size."""

    def __init__(
        self,
        texts: Iterable[Union[WeightedText, Text, str]] = (),
        width: int = 0,
        font_size: int = 1,
    ) -> None:
        self._texts = [t if isinstance(t, WeightedText) else WeightedText(t) for t in texts]
        self._width = width
        self._font_size = font_size

    @classmethod
    def from_texts(cls, texts: Iterable[Text]) -> WeightedLine:
        """Build a line, merging consecutive chunks that share a style."""
        merged: list[Text] = []
        for text in texts:
            if merged and merged[-1].style == text.style:
                merged[-1] = Text(merged[-1].content + text.content, text.style)
            else:
                merged.append(text)
        width = 0
        font_size = 1
        for text in merged:
            size = max(text.style.size, 1)
            width += WeightedText(text).widths[-1] * size
            font_size = max(font_size, size)
        return cls(merged, width, font_size)

    @classmethod
    def from_str(cls, text: str) -> WeightedLine:
        weighted = WeightedText(Text(text))
        return cls([weighted], weighted.widths[-1], 1)

    def split(self, max_length: int) -> Iterator[list[WeightedTextRef]]:
        """Yield chunks of this line, each at most max_length wide where possible."""
        remaining_texts = iter(self._texts)
        first = next(remaining_texts, None)
        current = first.to_ref() if first is not None else None
        while current is not None:
            elements: list[WeightedTextRef] = []
            remaining = max_length
            while current is not None:
                head, rest = current.word_split_at_length(remaining % _UNSIGNED_RANGE)
                # Never cut a word partially unless it is the first chunk in the line.
                if rest.text and not rest.text.startswith(" ") and elements:
                    break
                remaining -= head.width()
                elements.append(head)
                if rest.text:
                    current = rest.trim_start()
                    break
                following = next(remaining_texts, None)
                current = following.to_ref() if following is not None else None
            yield elements

    def width(self) -> int:
        return self._width

    def font_size(self) -> int:
        return self._font_size

    def texts(self) -> Iterator[WeightedText]:
        return iter(self._texts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeightedLine):
            return NotImplemented
        return (self._texts, self._width, self._font_size) == (
            other._texts,
            other._width,
            other._font_size,
        )

    def __repr__(self) -> str:
        return (
            f"WeightedLine(texts={self._texts!r}, width={self._width}, "
            f"font_size={self._font_size})"
        )