"""
Tests for GenerationConfig and configuration files.
"""

import pytest

from bindgen.config import GenerationConfig, load_config_file
from bindgen.errors import ConfigError


class TestGenerationConfig:
    """Test GenerationConfig."""

    def test_clang_arg_appends_in_order(self):
        config = GenerationConfig(header="foo.h")
        config.clang_arg("-DA").clang_arg("-DB")
        assert config.clang_args == ["-DA", "-DB"]

    def test_match_pat_deduplicates(self):
        config = GenerationConfig(header="foo.h")
        config.match_pat("foo").match_pat("foo")
        assert config.match_patterns == {"foo"}

    def test_instances_do_not_share_lists(self):
        a = GenerationConfig(header="a.h")
        b = GenerationConfig(header="b.h")
        a.clang_arg("-DA")
        a.ctypes_prefix.append("extra")
        assert b.clang_args == []
        assert b.ctypes_prefix == ["std", "os", "raw"]

    def test_ctypes_path(self):
        assert GenerationConfig(header="foo.h").ctypes_path == "::std::os::raw"

    def test_base_crate(self):
        assert GenerationConfig(header="foo.h").base_crate == "std"
        assert GenerationConfig(header="foo.h", use_core=True).base_crate == "core"


class TestLoadConfigFile:
    """Test load_config_file."""

    def write(self, tmp_path, body):
        path = tmp_path / "bindgen.toml"
        path.write_text(body)
        return path

    def test_keys_normalized(self, tmp_path):
        path = self.write(tmp_path, """
[bindgen]
no-derive-debug = true
macro_int_types = "uchar"
match = ["foo", "bar"]
""")
        assert load_config_file(path) == {
            "no_derive_debug": True,
            "macro_int_types": "uchar",
            "match": ["foo", "bar"],
        }

    def test_missing_table_is_empty(self, tmp_path):
        path = self.write(tmp_path, "[other]\nkey = 1\n")
        assert load_config_file(path) == {}

    def test_unreadable_file(self, tmp_path):
        with pytest.raises(ConfigError, match="cannot read"):
            load_config_file(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path):
        path = self.write(tmp_path, "[bindgen\n")
        with pytest.raises(ConfigError, match="invalid config file"):
            load_config_file(path)

    def test_table_required(self, tmp_path):
        path = self.write(tmp_path, 'bindgen = "yes"\n')
        with pytest.raises(ConfigError, match="must be a table"):
            load_config_file(path)

    def test_unknown_key(self, tmp_path):
        path = self.write(tmp_path, "[bindgen]\nfile = \"foo.h\"\n")
        with pytest.raises(ConfigError, match="unknown key 'file'"):
            load_config_file(path)

    def test_wrong_type(self, tmp_path):
        path = self.write(tmp_path, "[bindgen]\nuse-core = \"yes\"\n")
        with pytest.raises(ConfigError, match="must be of type bool"):
            load_config_file(path)

    def test_list_items_must_be_strings(self, tmp_path):
        path = self.write(tmp_path, "[bindgen]\nclang_args = [\"-DA\", 1]\n")
        with pytest.raises(ConfigError, match="list of strings"):
            load_config_file(path)
