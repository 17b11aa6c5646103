"""Position-aware JSON tree used to anchor diagnostics inside config files."""

from __future__ import annotations

import json
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Final

from nh_lsp.text.positions import LineIndex, Range

_WHITESPACE: Final[str] = " \t\r\n"
_NUMBER_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?"
)
_STRING_PATTERN: Final[re.Pattern[str]] = re.compile(r'"(?:[^"\\\x00-\x1f]|\\.)*"', re.DOTALL)
_LITERALS: Final[dict[str, object]] = {"true": True, "false": False, "null": None}


class JsonLocateError(ValueError):
    """Raised when text is not valid JSON."""

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(f"{message} at offset {offset}")
        self.offset = offset


@dataclass(slots=True)
class JsonNode:
    """Parsed JSON value with its character span in the source."""

    kind: str
    start: int
    end: int
    value: object = None
    items: list[JsonNode] = field(default_factory=list)
    members: dict[str, JsonNode] = field(default_factory=dict)


class JsonTree:
    """Root node plus a line index for range conversion."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._index = 1 if text.startswith("\ufeff") else 0
        self._skip_whitespace()
        self.root = self._parse_value()
        self._skip_whitespace()
        if self._index != len(text):
            raise JsonLocateError("Unexpected trailing content", self._index)
        self.line_index = LineIndex(text)

    def range_of(self, node: JsonNode) -> Range:
        return self.line_index.range_between(node.start, node.end)

    def select(self, pointer: str) -> Iterator[JsonNode]:
        """Yield nodes matching a JSON pointer where `*` matches any key or index."""
        segments = [segment for segment in pointer.split("/") if segment]
        yield from _select(self.root, segments)

    def _skip_whitespace(self) -> None:
        text = self._text
        while self._index < len(text) and text[self._index] in _WHITESPACE:
            self._index += 1

    def _parse_value(self) -> JsonNode:
        text = self._text
        if self._index >= len(text):
            raise JsonLocateError("Unexpected end of input", self._index)
        char = text[self._index]
        if char == "{":
            return self._parse_object()
        if char == "[":
            return self._parse_array()
        if char == '"':
            start = self._index
            value = self._parse_string()
            return JsonNode(kind="string", start=start, end=self._index, value=value)
        for literal, literal_value in _LITERALS.items():
            if text.startswith(literal, self._index):
                start = self._index
                self._index += len(literal)
                return JsonNode(kind="literal", start=start, end=self._index, value=literal_value)
        match = _NUMBER_PATTERN.match(text, self._index)
        if match is None:
            raise JsonLocateError(f"Unexpected character {char!r}", self._index)
        self._index = match.end()
        return JsonNode(
            kind="number",
            start=match.start(),
            end=match.end(),
            value=json.loads(match.group(0)),
        )

    def _parse_string(self) -> str:
        match = _STRING_PATTERN.match(self._text, self._index)
        if match is None:
            raise JsonLocateError("Unterminated string", self._index)
        self._index = match.end()
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError as error:
            raise JsonLocateError(error.msg, match.start() + error.pos) from error

    def _expect(self, char: str) -> None:
        if self._index >= len(self._text) or self._text[self._index] != char:
            raise JsonLocateError(f"Expected {char!r}", self._index)
        self._index += 1

    def _parse_object(self) -> JsonNode:
        node = JsonNode(kind="object", start=self._index, end=self._index)
        self._expect("{")
        self._skip_whitespace()
        if self._text.startswith("}", self._index):
            self._index += 1
            node.end = self._index
            return node
        while True:
            self._skip_whitespace()
            if not self._text.startswith('"', self._index):
                raise JsonLocateError("Expected object key", self._index)
            key = self._parse_string()
            self._skip_whitespace()
            self._expect(":")
            self._skip_whitespace()
            node.members[key] = self._parse_value()
            self._skip_whitespace()
            if self._text.startswith(",", self._index):
                self._index += 1
                continue
            self._expect("}")
            node.end = self._index
            return node

    def _parse_array(self) -> JsonNode:
        node = JsonNode(kind="array", start=self._index, end=self._index)
        self._expect("[")
        self._skip_whitespace()
        if self._text.startswith("]", self._index):
            self._index += 1
            node.end = self._index
            return node
        while True:
            self._skip_whitespace()
            node.items.append(self._parse_value())
            self._skip_whitespace()
            if self._text.startswith(",", self._index):
                self._index += 1
                continue
            self._expect("]")
            node.end = self._index
            return node


def _select(node: JsonNode, segments: list[str]) -> Iterator[JsonNode]:
    if not segments:
        yield node
        return
    head, rest = segments[0], segments[1:]
    if node.kind == "object":
        if head == "*":
            for child in node.members.values():
                yield from _select(child, rest)
        elif head in node.members:
            yield from _select(node.members[head], rest)
    elif node.kind == "array":
        if head == "*":
            for child in node.items:
                yield from _select(child, rest)
        elif head.isdigit() and int(head) < len(node.items):
            yield from _select(node.items[int(head)], rest)


def parse_json_tree(text: str) -> JsonTree:
    """Parse text into a position-aware JsonTree."""
    return JsonTree(text)
