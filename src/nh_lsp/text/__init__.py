"""Text positions, document identifiers and position-aware parsers."""

from .json_locator import JsonLocateError, JsonNode, JsonTree, parse_json_tree
from .positions import ZERO_RANGE, LineIndex, Position, Range, utf16_length
from .uris import normalize_uri, path_to_uri, uri_to_path
from .xml_tree import XmlDocument, XmlElement, XmlParseError, parse_xml

__all__ = [
    "JsonLocateError",
    "JsonNode",
    "JsonTree",
    "LineIndex",
    "Position",
    "Range",
    "XmlDocument",
    "XmlElement",
    "XmlParseError",
    "ZERO_RANGE",
    "normalize_uri",
    "parse_json_tree",
    "parse_xml",
    "path_to_uri",
    "uri_to_path",
    "utf16_length",
]
