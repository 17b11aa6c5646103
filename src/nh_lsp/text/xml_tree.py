"""Minimal XML element tree with source ranges, built on expat."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from xml.parsers import expat

from nh_lsp.text.positions import LineIndex, Range


class XmlParseError(ValueError):
    """Raised when a document is not well-formed XML."""

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"{message} (line {line}, column {column})")
        self.line = line
        self.column = column


@dataclass(slots=True)
class XmlElement:
    """Element node; offsets are UTF-8 byte offsets into the source."""

    name: str
    attributes: dict[str, str]
    start_byte: int
    end_byte: int = -1
    text_parts: list[str] = field(default_factory=list)
    children: list[XmlElement] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(self.text_parts)

    def child_elements(self, name: str | None = None) -> Iterator[XmlElement]:
        for child in self.children:
            if name is None or child.name == name:
                yield child

    def find(self, name: str) -> XmlElement | None:
        """Return the first direct child with the given local name."""
        return next(self.child_elements(name), None)

    def iter(self) -> Iterator[XmlElement]:
        """Depth-first iteration over this element and all descendants."""
        stack = [self]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))


@dataclass(slots=True)
class XmlDocument:
    """Parsed document plus the line index used to map element ranges."""

    root: XmlElement
    line_index: LineIndex

    def range_of(self, element: XmlElement) -> Range:
        return self.line_index.range_between_bytes(element.start_byte, element.end_byte)

    def find_first(self, name: str) -> XmlElement | None:
        for element in self.root.iter():
            if element.name == name:
                return element
        return None


def _local_name(qualified: str) -> str:
    return qualified.rsplit(":", 1)[-1]


def parse_xml(text: str) -> XmlDocument:
    """Parse text into an XmlDocument, raising XmlParseError on malformed input."""
    data = text.encode("utf-8")
    parser = expat.ParserCreate(encoding="utf-8")
    stack: list[XmlElement] = []
    roots: list[XmlElement] = []

    def on_start(name: str, attributes: dict[str, str]) -> None:
        element = XmlElement(
            name=_local_name(name),
            attributes=dict(attributes),
            start_byte=parser.CurrentByteIndex,
        )
        if stack:
            stack[-1].children.append(element)
        else:
            roots.append(element)
        stack.append(element)

    def on_end(name: str) -> None:
        element = stack.pop()
        index = parser.CurrentByteIndex
        if index > element.start_byte and not data.startswith(b"</", index):
            # Empty-element tag: expat reports the offset just past "/>".
            element.end_byte = index
            return
        tag_close = data.find(b">", index)
        element.end_byte = len(data) if tag_close < 0 else tag_close + 1

    def on_text(chunk: str) -> None:
        if stack:
            stack[-1].text_parts.append(chunk)

    parser.StartElementHandler = on_start
    parser.EndElementHandler = on_end
    parser.CharacterDataHandler = on_text
    try:
        parser.Parse(data, True)
    except expat.ExpatError as error:
        raise XmlParseError(
            expat.ErrorString(error.code), error.lineno, error.offset
        ) from error
    if not roots:
        raise XmlParseError("no element found", 1, 0)
    return XmlDocument(root=roots[0], line_index=LineIndex(text))
