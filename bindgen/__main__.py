"""
CLI entry point for the bindgen package.

Usage:
    python -m bindgen [options] <file> [-- <clang-args>...]
"""

from .cli import main

if __name__ == "__main__":
    main()
