"""
Tests for --link value parsing.
"""

import pytest

from bindgen.errors import LinkSpecError
from bindgen.link import LinkDirective, LinkKind, parse_link


class TestParseLink:
    """Test parse_link."""

    @pytest.mark.parametrize("lib", ["foo", "ssl", "c++abi", "lib-with-dash"])
    def test_plain_library_is_dynamic(self, lib):
        assert parse_link(lib) == LinkDirective(lib, LinkKind.DYNAMIC)

    @pytest.mark.parametrize("token,kind", [
        ("static", LinkKind.STATIC),
        ("dynamic", LinkKind.DYNAMIC),
        ("framework", LinkKind.FRAMEWORK),
    ])
    def test_explicit_kind(self, token, kind):
        directive = parse_link(f"{token}=foo")
        assert directive.library == "foo"
        assert directive.kind == kind

    def test_unknown_kind_names_token(self):
        with pytest.raises(LinkSpecError) as exc_info:
            parse_link("weird=foo")
        assert exc_info.value.token == "weird"
        assert "weird" in str(exc_info.value)

    def test_kind_is_case_sensitive(self):
        with pytest.raises(LinkSpecError) as exc_info:
            parse_link("Static=foo")
        assert exc_info.value.token == "Static"

    def test_empty_string_fails(self):
        with pytest.raises(LinkSpecError):
            parse_link("")

    def test_two_separators_fail(self):
        with pytest.raises(LinkSpecError) as exc_info:
            parse_link("a=b=c")
        assert "a=b=c" in str(exc_info.value)

    def test_missing_library_fails(self):
        with pytest.raises(LinkSpecError):
            parse_link("static=")

    def test_directive_is_immutable(self):
        directive = parse_link("foo")
        with pytest.raises(AttributeError):
            directive.library = "bar"
