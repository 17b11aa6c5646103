"""Editor positions counted in UTF-16 code units."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(slots=True, frozen=True, order=True)
class Position:
    """Zero-based line/character pair."""

    line: int
    character: int

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "character": self.character}


@dataclass(slots=True, frozen=True)
class Range:
    """Half-open span between two positions."""

    start: Position
    end: Position

    def to_dict(self) -> dict[str, object]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}


ZERO_RANGE = Range(Position(0, 0), Position(0, 0))


def utf16_length(text: str) -> int:
    """Return the number of UTF-16 code units needed to encode text."""
    return len(text) + sum(1 for char in text if ord(char) > 0xFFFF)


class LineIndex:
    """Maps string or UTF-8 byte offsets onto UTF-16 line/character positions."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._line_starts: list[int] = [0]
        self._byte_line_starts: list[int] = [0]
        byte_offset = 0
        for index, char in enumerate(text):
            byte_offset += _utf8_width(char)
            if char == "\n":
                self._line_starts.append(index + 1)
                self._byte_line_starts.append(byte_offset)
        self._byte_length = byte_offset

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def position_at(self, offset: int) -> Position:
        """Return the position of a character offset into the text."""
        clamped = min(max(offset, 0), len(self._text))
        line = bisect_right(self._line_starts, clamped) - 1
        line_start = self._line_starts[line]
        return Position(line, utf16_length(self._text[line_start:clamped]))

    def position_at_byte(self, byte_offset: int) -> Position:
        """Return the position of a UTF-8 byte offset into the text."""
        clamped = min(max(byte_offset, 0), self._byte_length)
        line = bisect_right(self._byte_line_starts, clamped) - 1
        line_start = self._line_starts[line]
        line_end = (
            self._line_starts[line + 1] if line + 1 < len(self._line_starts) else len(self._text)
        )
        # Only the containing line is re-encoded.
        encoded_line = self._text[line_start:line_end].encode("utf-8")
        prefix = encoded_line[: clamped - self._byte_line_starts[line]]
        return Position(line, utf16_length(prefix.decode("utf-8", errors="ignore")))

    def range_between(self, start: int, end: int) -> Range:
        return Range(self.position_at(start), self.position_at(end))

    def range_between_bytes(self, start: int, end: int) -> Range:
        return Range(self.position_at_byte(start), self.position_at_byte(end))


def _utf8_width(char: str) -> int:
    code_point = ord(char)
    if code_point < 0x80:
        return 1
    if code_point < 0x800:
        return 2
    if code_point < 0x10000:
        return 3
    return 4
