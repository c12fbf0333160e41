"""
Translation of decoded command-line arguments into a GenerationConfig.
"""

from __future__ import annotations

import argparse
from typing import Optional

from .config import DEFAULT_CTYPES_PREFIX, PATH_SEPARATOR, GenerationConfig
from .link import parse_link


def split_ctypes_prefix(prefix: Optional[str]) -> list[str]:
    """Split a ``a::b::c`` path into its segments."""
    if prefix is None:
        prefix = DEFAULT_CTYPES_PREFIX
    return prefix.split(PATH_SEPARATOR)


def split_macro_int_types(value: Optional[str]) -> Optional[list[str]]:
    """
    Split the ``--macro-int-types`` value on commas.

    Absent stays None (feature disabled); an empty string gives an empty list.
    """
    if value is None:
        return None
    if value == "":
        return []
    return value.split(",")


def args_to_config(args: argparse.Namespace) -> GenerationConfig:
    """
    Build the generation configuration from decoded arguments.

    Args:
        args: Namespace produced by ``bindgen.cli.decode_args``

    Returns:
        Populated GenerationConfig

    Raises:
        LinkSpecError: If ``--link`` is malformed
    """
    config = GenerationConfig(
        header=args.file,
        emit_ast=args.emit_clang_ast,
        builtins=args.builtins,
        use_core=args.use_core,
        derive_debug=not args.no_derive_debug,
        rust_enums=not args.no_rust_enums,
        convert_floats=not args.dont_convert_floats,
        convert_macros=args.convert_macros,
        allow_unknown_types=args.allow_unknown_types,
        override_enum_type=args.override_enum_type or "",
        ctypes_prefix=split_ctypes_prefix(args.ctypes_prefix),
        remove_prefix=args.remove_prefix,
        macro_int_types=split_macro_int_types(args.macro_int_types),
    )

    # Order matters to clang
    for arg in args.clang_args:
        config.clang_arg(arg)

    for pattern in args.match or []:
        config.match_pat(pattern)

    if args.link is not None:
        config.link = parse_link(args.link)

    return config
