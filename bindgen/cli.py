"""
Command-line interface for bindgen.

Usage:
    bindgen [options] <file> [-- <clang-args>...]
    bindgen [options] (--match=<name> ...) <file> [-- <clang-args>...]
    bindgen (-h | --help)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

from .config import DEFAULT_CTYPES_PREFIX, ENUM_TYPE_NAMES, GenerationConfig, load_config_file
from .engine import Bindings, Builder
from .errors import ConfigError, GenerationError, LinkSpecError
from .log import init_logging
from .options import args_to_config
from .output import select_output

logger = logging.getLogger("bindgen")

# Status for generation and write failures
EXIT_FAILURE = 255
# Status for a malformed --link value
EXIT_LINK_ERROR = 1

USAGE = """
  bindgen [options] <file> [-- <clang-args>...]
  bindgen [options] (--match=<name> ...) <file> [-- <clang-args>...]
  bindgen (-h | --help)"""

BuilderFactory = Callable[[GenerationConfig], Builder]


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="bindgen",
        usage=USAGE,
        description="Generate C bindings for Rust.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Options after -- are passed directly to clang.

Examples:
  # Bindings for a header, written to stdout
  bindgen foo.h

  # Link statically against libfoo and write to a file
  bindgen --link=static=foo --output=src/ffi.rs foo.h -- -I include
""",
    )

    parser.add_argument(
        "file",
        metavar="<file>",
        help="C header to generate bindings for",
    )
    parser.add_argument(
        "--link",
        metavar="<library>",
        help="Link to a library. <library> is in the format `[kind=]lib`, "
             "where `kind` is one of `static`, `dynamic` or `framework`.",
    )
    parser.add_argument(
        "--output",
        metavar="<output>",
        default="-",
        help="Write bindings to <output> (- is stdout) [default: -]",
    )
    parser.add_argument(
        "--match",
        metavar="<name>",
        action="append",
        help="Only output bindings for definitions from files whose name "
             "contains <name>. Files matching any rule are bound to.",
    )
    parser.add_argument(
        "--builtins",
        action="store_true",
        help="Output bindings for builtin definitions (for example __builtin_va_list)",
    )
    parser.add_argument(
        "--emit-clang-ast",
        action="store_true",
        help="Output the ast (for debugging purposes)",
    )
    parser.add_argument(
        "--override-enum-type",
        metavar="<type>",
        default="",
        help=f"Override enum type, one of: {', '.join(ENUM_TYPE_NAMES)}",
    )
    parser.add_argument(
        "--use-core",
        action="store_true",
        help="Use `core` as a base crate for `Option` and such. See also `--ctypes-prefix`.",
    )
    parser.add_argument(
        "--ctypes-prefix",
        metavar="<prefix>",
        default=DEFAULT_CTYPES_PREFIX,
        help=f"Use this prefix for all the types in the generated code. "
             f"[default: {DEFAULT_CTYPES_PREFIX}]",
    )
    parser.add_argument(
        "--remove-prefix",
        metavar="<prefix>",
        help="Prefix to remove from all the symbols, like `libfoo_`. "
             "The removal is case-insensitive.",
    )
    parser.add_argument(
        "--no-derive-debug",
        action="store_true",
        help="Disable `derive(Debug)` for all generated types.",
    )
    parser.add_argument(
        "--no-rust-enums",
        action="store_true",
        help="Convert C enums to Rust constants instead of enums.",
    )
    parser.add_argument(
        "--dont-convert-floats",
        action="store_true",
        help="Disables the conversion of C `float` and `double` to Rust `f32` and `f64`.",
    )
    parser.add_argument(
        "--convert-macros",
        action="store_true",
        help="Try to convert macros into const definitions",
    )
    parser.add_argument(
        "--macro-int-types",
        metavar="<ty,...>",
        help="When converting macros, convert integers that would fit in a "
             "u8,u16,u32,u64,i8,i16,i32,i64 to the corresponding named C type, "
             "respectively. See `--override-enum-type` for the type names.",
    )
    parser.add_argument(
        "--allow-unknown-types",
        action="store_true",
        help="Don't fail generation on stumbling upon an unknown type, "
             "issue a warning and continue.",
    )
    parser.add_argument(
        "--config",
        metavar="<file.toml>",
        type=Path,
        help="Read option defaults from the [bindgen] table of a TOML file",
    )

    return parser


def decode_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Decode command-line tokens.

    Everything after the first ``--`` is passed to clang untouched. On a usage
    error argparse prints the usage and exits with status 2.
    """
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    clang_args: list[str] = []
    if "--" in argv:
        split = argv.index("--")
        argv, clang_args = argv[:split], argv[split + 1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config is not None:
        try:
            defaults = load_config_file(args.config)
        except ConfigError as e:
            parser.error(str(e))
        # Command-line clang arguments come after the configured ones
        clang_args = defaults.pop("clang_args", []) + clang_args
        parser.set_defaults(**defaults)
        args = parser.parse_args(argv)

    args.clang_args = clang_args
    return args


def run(
    argv: Optional[Sequence[str]] = None,
    builder_factory: BuilderFactory = Builder,
) -> int:
    """
    Run bindgen and return the process exit status.

    Args:
        argv: Command-line tokens, without the program name
        builder_factory: Creates the engine for a configuration

    Returns:
        0 on success, non-zero on failure
    """
    init_logging()

    args = decode_args(argv)
    logger.debug("%r", args)

    # Opened before any generation work; failure to create it is fatal
    with select_output(args.output) as output:
        try:
            config = args_to_config(args)
        except LinkSpecError as e:
            print(e, file=sys.stderr)
            return EXIT_LINK_ERROR
        logger.debug("%r", config)

        try:
            bindings: Bindings = builder_factory(config).generate()
        except GenerationError:
            # The engine reports its own diagnostics
            return EXIT_FAILURE

        # Closing flushes buffered output, so it is part of the write
        try:
            bindings.write(output)
            output.close()
        except OSError as e:
            logger.error("Unable to write bindings to file. %s", e)
            return EXIT_FAILURE

    return 0


def main() -> None:
    """Main CLI entry point."""
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
