"""
Tests for converting decoded arguments into a GenerationConfig.
"""

import pytest

from bindgen.cli import decode_args
from bindgen.errors import LinkSpecError
from bindgen.link import LinkDirective, LinkKind
from bindgen.options import args_to_config, split_ctypes_prefix, split_macro_int_types


def config_for(*argv):
    return args_to_config(decode_args(list(argv)))


class TestHelpers:
    """Test the value splitting helpers."""

    def test_ctypes_prefix_default(self):
        assert split_ctypes_prefix(None) == ["std", "os", "raw"]

    def test_ctypes_prefix_single_segment(self):
        assert split_ctypes_prefix("libc") == ["libc"]

    def test_macro_int_types_absent(self):
        assert split_macro_int_types(None) is None

    def test_macro_int_types_empty(self):
        assert split_macro_int_types("") == []

    def test_macro_int_types_keeps_empty_slots(self):
        assert split_macro_int_types("uchar,,uint") == ["uchar", "", "uint"]


class TestArgsToConfig:
    """Test args_to_config."""

    def test_defaults(self):
        config = config_for("foo.h")
        assert config.header == "foo.h"
        assert config.match_patterns == set()
        assert config.emit_ast is False
        assert config.builtins is False
        assert config.use_core is False
        assert config.derive_debug is True
        assert config.rust_enums is True
        assert config.convert_floats is True
        assert config.convert_macros is False
        assert config.allow_unknown_types is False
        assert config.override_enum_type == ""
        assert config.ctypes_prefix == ["std", "os", "raw"]
        assert config.remove_prefix is None
        assert config.macro_int_types is None
        assert config.link is None

    def test_match_patterns_are_a_set(self):
        config = config_for("--match=foo", "--match=bar", "--match=foo", "foo.h")
        assert config.match_patterns == {"foo", "bar"}

    def test_custom_ctypes_prefix(self):
        config = config_for("--ctypes-prefix=libc", "foo.h")
        assert config.ctypes_prefix == ["libc"]
        assert config.ctypes_path == "::libc"

    def test_nested_ctypes_prefix(self):
        config = config_for("--ctypes-prefix", "my::ctypes", "foo.h")
        assert config.ctypes_prefix == ["my", "ctypes"]

    @pytest.mark.parametrize("flag,attr", [
        ("--no-derive-debug", "derive_debug"),
        ("--no-rust-enums", "rust_enums"),
        ("--dont-convert-floats", "convert_floats"),
    ])
    def test_negative_flags(self, flag, attr):
        assert getattr(config_for(flag, "foo.h"), attr) is False

    @pytest.mark.parametrize("flag,attr", [
        ("--builtins", "builtins"),
        ("--emit-clang-ast", "emit_ast"),
        ("--use-core", "use_core"),
        ("--convert-macros", "convert_macros"),
        ("--allow-unknown-types", "allow_unknown_types"),
    ])
    def test_positive_flags(self, flag, attr):
        assert getattr(config_for(flag, "foo.h"), attr) is True

    def test_macro_int_types_empty_value(self):
        config = config_for("--macro-int-types=", "foo.h")
        assert config.macro_int_types == []

    def test_macro_int_types_values(self):
        config = config_for("--macro-int-types=uchar,ushort", "foo.h")
        assert config.macro_int_types == ["uchar", "ushort"]

    def test_override_enum_type_passed_verbatim(self):
        config = config_for("--override-enum-type=nonsense", "foo.h")
        assert config.override_enum_type == "nonsense"

    def test_remove_prefix(self):
        assert config_for("--remove-prefix=foo_", "foo.h").remove_prefix == "foo_"

    def test_static_link(self):
        config = config_for("--link=static=foo", "foo.h")
        assert config.link == LinkDirective("foo", LinkKind.STATIC)

    def test_last_link_wins(self):
        config = config_for("--link=foo", "--link=framework=Bar", "foo.h")
        assert config.link == LinkDirective("Bar", LinkKind.FRAMEWORK)

    def test_clang_args_keep_order(self):
        config = config_for("foo.h", "--", "-DB", "-DA", "-DB")
        assert config.clang_args == ["-DB", "-DA", "-DB"]

    def test_bad_link_raises(self):
        with pytest.raises(LinkSpecError) as exc_info:
            config_for("--link=weird=foo", "foo.h")
        assert exc_info.value.token == "weird"
