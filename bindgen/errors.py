"""
Exceptions raised by bindgen.

Every error the command line can surface derives from BindgenError, so callers
embedding the library can catch one type.
"""

from __future__ import annotations


class BindgenError(Exception):
    """Base exception for all bindgen errors."""


class LinkSpecError(BindgenError):
    """Raised when a ``--link`` value is malformed or names an unknown kind."""

    def __init__(self, message: str, token: str):
        self.token = token
        super().__init__(message)


class OutputCreateError(BindgenError, OSError):
    """Raised when the output file cannot be created."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f'"{path}" unwritable')


class ConfigError(BindgenError):
    """Raised when a configuration file cannot be loaded."""


class GenerationError(BindgenError):
    """
    Raised by the engine when bindings cannot be generated.

    Carries no structured detail; the engine logs its own diagnostics before
    raising.
    """


class UnknownTypeError(GenerationError):
    """Raised when a C type has no Rust equivalent."""

    def __init__(self, spelling: str):
        self.spelling = spelling
        super().__init__(f"unknown type: {spelling}")
