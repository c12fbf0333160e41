"""
Tests for macro literal evaluation.
"""

import pytest

from bindgen.generators.macros import (
    default_int_type,
    evaluate_macro,
    int_slot_token,
    rust_byte_string,
    rust_float_literal,
)

ALL_SLOTS = ["uchar", "ushort", "uint", "ulonglong", "schar", "sshort", "sint", "slonglong"]


class TestEvaluateMacro:
    """Test evaluate_macro."""

    @pytest.mark.parametrize("tokens,value", [
        (["16"], 16),
        (["0"], 0),
        (["0x1F"], 31),
        (["010"], 8),
        (["0b101"], 5),
        (["10UL"], 10),
        (["-", "1"], -1),
        (["(", "-", "1", ")"], -1),
        (["(", "(", "42", ")", ")"], 42),
    ])
    def test_integers(self, tokens, value):
        result = evaluate_macro(tokens)
        assert result.kind == "int"
        assert result.value == value

    @pytest.mark.parametrize("tokens,value", [
        (["1.5"], 1.5),
        (["2.0f"], 2.0),
        (["1e3"], 1000.0),
        (["-", ".5"], -0.5),
    ])
    def test_floats(self, tokens, value):
        result = evaluate_macro(tokens)
        assert result.kind == "float"
        assert result.value == value

    def test_string(self):
        result = evaluate_macro(['"foo"'])
        assert result.kind == "str"
        assert result.value == b"foo"

    def test_string_escapes(self):
        assert evaluate_macro(['"a\\n\\x41\\101"']).value == b"a\nAA"

    @pytest.mark.parametrize("tokens", [
        [],
        ["1", "+", "2"],
        ["FOO"],
        ["-", '"foo"'],
        ["'a'"],
        ["sizeof", "(", "int", ")"],
    ])
    def test_not_literals(self, tokens):
        assert evaluate_macro(tokens) is None


class TestIntegerTypes:
    """Test integer macro type selection."""

    def test_smallest_unsigned_slot(self):
        assert int_slot_token(200, ALL_SLOTS) == "uchar"
        assert int_slot_token(70000, ALL_SLOTS) == "uint"

    def test_negative_uses_signed_slots(self):
        assert int_slot_token(-1, ALL_SLOTS) == "schar"
        assert int_slot_token(-40000, ALL_SLOTS) == "sint"

    def test_empty_slots_skipped(self):
        assert int_slot_token(5, ["", "ushort"]) == "ushort"

    def test_no_eligible_slot(self):
        assert int_slot_token(300, ["uchar"]) is None
        assert int_slot_token(-1, ["uchar", "ushort", "uint", "ulonglong"]) is None
        assert int_slot_token(1, []) is None

    @pytest.mark.parametrize("value,expected", [
        (0, "i32"),
        (-(2**31), "i32"),
        (2**31, "i64"),
        (2**63, "u64"),
        (2**64, None),
    ])
    def test_default_int_type(self, value, expected):
        assert default_int_type(value) == expected


class TestRustLiterals:
    """Test Rust literal rendering."""

    def test_float_literal(self):
        assert rust_float_literal(2.0) == "2.0"
        assert rust_float_literal(0.25) == "0.25"

    def test_byte_string(self):
        assert rust_byte_string(b'a"b\\\n\0') == 'b"a\\"b\\\\\\x0a\\x00"'
