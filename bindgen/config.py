"""
Configuration for binding generation.

Supports:
- The GenerationConfig handed to the engine
- TOML files providing option defaults (``--config``)
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .errors import ConfigError
from .link import LinkDirective


# =============================================================================
# Defaults
# =============================================================================

# Namespace separator used by ``--ctypes-prefix``
PATH_SEPARATOR = "::"

DEFAULT_CTYPES_PREFIX = "std::os::raw"

# Enum type names accepted by ``--override-enum-type``
ENUM_TYPE_NAMES = [
    "uchar", "schar",
    "ushort", "sshort",
    "uint", "sint",
    "ulong", "slong",
    "ulonglong", "slonglong",
]


@dataclass
class GenerationConfig:
    """
    Everything the engine needs to generate bindings for one header.

    Built by ``bindgen.options.args_to_config`` and then handed over to the
    engine; the command line does not touch it afterwards.
    """

    header: str
    clang_args: list[str] = field(default_factory=list)
    match_patterns: set[str] = field(default_factory=set)

    emit_ast: bool = False
    builtins: bool = False
    use_core: bool = False
    derive_debug: bool = True
    rust_enums: bool = True
    convert_floats: bool = True
    convert_macros: bool = False
    allow_unknown_types: bool = False

    # Opaque here; the engine validates it
    override_enum_type: str = ""
    ctypes_prefix: list[str] = field(
        default_factory=lambda: DEFAULT_CTYPES_PREFIX.split(PATH_SEPARATOR)
    )
    # Compared case-insensitively by the engine
    remove_prefix: Optional[str] = None
    # None disables typed macro integers; [] enables them with no eligible types
    macro_int_types: Optional[list[str]] = None
    link: Optional[LinkDirective] = None

    def clang_arg(self, arg: str) -> "GenerationConfig":
        """Append one clang argument, keeping order."""
        self.clang_args.append(arg)
        return self

    def match_pat(self, pattern: str) -> "GenerationConfig":
        """Add a file name filter."""
        self.match_patterns.add(pattern)
        return self

    @property
    def ctypes_path(self) -> str:
        """Absolute Rust path of the C types module (e.g. ``::std::os::raw``)."""
        return PATH_SEPARATOR + PATH_SEPARATOR.join(self.ctypes_prefix)

    @property
    def base_crate(self) -> str:
        """Crate providing ``Option`` and friends."""
        return "core" if self.use_core else "std"


# =============================================================================
# Configuration files
# =============================================================================

# Keys accepted in the [bindgen] table, with their expected types
FILE_KEYS: dict[str, type] = {
    "link": str,
    "output": str,
    "match": list,
    "builtins": bool,
    "emit_clang_ast": bool,
    "override_enum_type": str,
    "use_core": bool,
    "ctypes_prefix": str,
    "remove_prefix": str,
    "no_derive_debug": bool,
    "no_rust_enums": bool,
    "dont_convert_floats": bool,
    "convert_macros": bool,
    "macro_int_types": str,
    "allow_unknown_types": bool,
    "clang_args": list,
}


def load_config_file(path: Path) -> dict[str, Any]:
    """
    Load option defaults from the ``[bindgen]`` table of a TOML file.

    Args:
        path: TOML file

    Returns:
        Mapping of option destination names to values

    Raises:
        ConfigError: If the file is unreadable, invalid, or has unknown keys
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e.strerror}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid config file {path}: {e}") from e

    table = data.get("bindgen", {})
    if not isinstance(table, dict):
        raise ConfigError(f"{path}: [bindgen] must be a table")

    values: dict[str, Any] = {}
    for key, value in table.items():
        dest = key.replace("-", "_")
        expected = FILE_KEYS.get(dest)
        if expected is None:
            raise ConfigError(f"{path}: unknown key '{key}'")
        if not isinstance(value, expected):
            raise ConfigError(
                f"{path}: '{key}' must be of type {expected.__name__}"
            )
        if expected is list and not all(isinstance(v, str) for v in value):
            raise ConfigError(f"{path}: '{key}' must be a list of strings")
        values[dest] = value

    return values
