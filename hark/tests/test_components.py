"""Unit tests for the building blocks of the string parsing stream."""

import dataclasses
import os

import pytest

from hark.core import (
    ByteAccumulator,
    InvalidArgumentError,
    ReplacingDecoder,
    StringParsingOptions,
    TextAccumulator,
)
from hark.core.decoder import replacement_error_handler


def test_options_default_uses_platform_separator():
    default = StringParsingOptions.DEFAULT
    assert default.separator == os.linesep
    assert default.buffer_size == 32
    assert default.decode_replacement == "?"


def test_options_create_falls_back_to_default():
    opts = StringParsingOptions.create(encoding="utf-8", separator="|")
    assert opts.encoding == "utf-8"
    assert opts.separator == "|"
    assert opts.buffer_size == StringParsingOptions.DEFAULT.buffer_size


@pytest.mark.parametrize(
    "kwargs, argument",
    [
        ({"encoding": None}, "encoding"),
        ({"encoding": "no-such-codec"}, "encoding"),
        ({"encoding": "hex"}, "encoding"),
        ({"encoding": "base64"}, "encoding"),
        ({"encoding": "rot13"}, "encoding"),
        ({"encoding": "utf-8", "separator": None}, "separator"),
        ({"encoding": "utf-8", "separator": ""}, "separator"),
        ({"encoding": "utf-8", "buffer_size": 3}, "buffer_size"),
        ({"encoding": "utf-8", "buffer_size": 4.5}, "buffer_size"),
        ({"encoding": "utf-8", "decode_replacement": None}, "decode_replacement"),
    ],
)
def test_options_reject_invalid_arguments(kwargs, argument):
    with pytest.raises(InvalidArgumentError) as info:
        StringParsingOptions(**kwargs)
    assert info.value.argument == argument
    assert info.value.code == "INVALID_ARGUMENT"


def test_options_minimum_buffer_size_accepted():
    assert StringParsingOptions("utf-8", buffer_size=4).buffer_size == 4


def test_options_are_frozen():
    opts = StringParsingOptions("utf-8")
    with pytest.raises(dataclasses.FrozenInstanceError):
        opts.separator = "x"


def test_options_with_changes_rejects_unknown_field():
    with pytest.raises(InvalidArgumentError):
        StringParsingOptions("utf-8").with_changes(colour="red")


def test_decoder_holds_partial_sequence():
    decoder = ReplacingDecoder("utf-8")
    assert decoder.decode(b"a\xc3") == "a"
    assert decoder.pending is True
    assert decoder.decode(b"\xa9") == "é"
    assert decoder.pending is False


def test_decoder_replaces_malformed_input():
    decoder = ReplacingDecoder("utf-8")
    assert decoder.decode(b"a\xffb") == "a?b"


def test_decoder_custom_replacement():
    decoder = ReplacingDecoder("utf-8", "<bad>")
    assert decoder.decode(b"\xff", True) == "<bad>"


def test_decoder_replaces_unmappable_byte():
    decoder = ReplacingDecoder("cp1252")
    assert decoder.decode(b"A\x81B") == "A?B"


def test_decoder_flush_emits_replacement_for_truncated_char():
    decoder = ReplacingDecoder("utf-8")
    assert decoder.decode(b"\xe2\x82") == ""
    assert decoder.flush() == "?"
    assert decoder.flush() == ""


def test_decoder_reset_drops_state():
    decoder = ReplacingDecoder("utf-8")
    decoder.decode(b"\xe2")
    decoder.reset()
    assert decoder.pending is False
    assert decoder.decode(b"ok", True) == "ok"


def test_decoder_normalizes_encoding_name():
    assert ReplacingDecoder("UTF8").encoding == "utf-8"


def test_replacement_handler_is_registered_once():
    assert replacement_error_handler("#") == replacement_error_handler("#")


def test_replacement_handler_does_not_swallow_encode_errors():
    with pytest.raises(UnicodeEncodeError):
        "é".encode("ascii", errors=replacement_error_handler("?"))


def test_byte_accumulator_fills_to_capacity():
    acc = ByteAccumulator(4)
    acc.put(0x61)
    consumed = acc.fill_from(memoryview(b"bcdef"), 0)
    assert consumed == 3
    assert acc.is_full
    assert acc.contents() == b"abcd"
    with pytest.raises(BufferError):
        acc.put(0x67)
    acc.clear()
    assert len(acc) == 0
    assert acc.remaining == 4


def test_byte_accumulator_fill_from_offset():
    acc = ByteAccumulator(8)
    assert acc.fill_from(memoryview(b"xyz"), 1) == 2
    assert acc.contents() == b"yz"
    assert acc.fill_from(memoryview(b"xyz"), 3) == 0


def test_text_accumulator_extracts_units_in_order():
    text = TextAccumulator("\n")
    text.append("a\n\nb\nrest")
    assert list(text.extract_all()) == ["a", "", "b"]
    assert text.pending == "rest"
    assert text.drain_remainder() == "rest"
    assert text.drain_remainder() is None


def test_text_accumulator_separator_split_across_appends():
    text = TextAccumulator("\r\n")
    text.append("ab\r")
    assert text.extract_next() is None
    assert text.pending == "ab\r"
    text.append("\ncd")
    assert text.extract_next() == "ab"
    assert text.extract_next() is None
    assert text.pending == "cd"


def test_text_accumulator_long_separator_split_many_times():
    text = TextAccumulator("<END>")
    units = []
    for piece in ["one<", "E", "N", "D", ">two<EN", "D><E"]:
        text.append(piece)
        units.extend(text.extract_all())
    assert units == ["one", "two"]
    assert text.pending == "<E"


def test_text_accumulator_unterminated_text_kept():
    text = TextAccumulator("\n")
    for _ in range(50):
        text.append("xy")
        assert text.extract_next() is None
    assert len(text) == 100
    text.append("\n")
    assert text.extract_next() == "xy" * 50
    assert len(text) == 0


def test_text_accumulator_rejects_empty_separator():
    with pytest.raises(ValueError):
        TextAccumulator("")
