from __future__ import annotations

from nh_lsp.text import LineIndex, Position, Range, utf16_length


def test_position_at_counts_lines_and_columns() -> None:
    index = LineIndex("ab\ncde\n\nf")

    assert index.line_count == 4
    assert index.position_at(0) == Position(0, 0)
    assert index.position_at(2) == Position(0, 2)
    assert index.position_at(3) == Position(1, 0)
    assert index.position_at(5) == Position(1, 2)
    assert index.position_at(7) == Position(2, 0)
    assert index.position_at(8) == Position(3, 0)


def test_position_at_clamps_out_of_range_offsets() -> None:
    index = LineIndex("abc")

    assert index.position_at(-5) == Position(0, 0)
    assert index.position_at(99) == Position(0, 3)


def test_characters_are_counted_in_utf16_code_units() -> None:
    text = "a\U0001f680b"

    assert utf16_length(text) == 4
    assert LineIndex(text).position_at(2) == Position(0, 3)


def test_byte_offsets_map_through_multibyte_characters() -> None:
    text = "é<ID>X</ID>"
    index = LineIndex(text)

    # "é" is two UTF-8 bytes but one UTF-16 unit.
    assert index.position_at_byte(2) == Position(0, 1)
    assert index.range_between_bytes(2, len(text.encode("utf-8"))) == Range(
        Position(0, 1), Position(0, 11)
    )


def test_range_serializes_to_protocol_shape() -> None:
    range_ = LineIndex("x\nyz").range_between(2, 4)

    assert range_.to_dict() == {
        "start": {"line": 1, "character": 0},
        "end": {"line": 1, "character": 2},
    }


def test_byte_offsets_resolve_against_their_own_line() -> None:
    text = "<A>é</A>\n  <ID>\U0001f680X</ID>\nlast"
    index = LineIndex(text)
    encoded = text.encode("utf-8")

    assert index.position_at_byte(encoded.index(b"\n") + 1) == Position(1, 0)
    assert index.position_at_byte(encoded.index(b"X")) == Position(1, 8)
    assert index.position_at_byte(encoded.index(b"last")) == Position(2, 0)
    assert index.position_at_byte(len(encoded) + 10) == Position(2, 4)
    for offset in range(len(text)):
        byte_offset = len(text[:offset].encode("utf-8"))
        assert index.position_at_byte(byte_offset) == index.position_at(offset)
