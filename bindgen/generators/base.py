"""
Base classes for code generators.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from jinja2 import Environment, PackageLoader, select_autoescape

from ..config import GenerationConfig
from ..parser.c_types import ParsedHeader
from ..types.rust_mapper import safe_ident


class Generator(ABC):
    """
    Abstract base class for code generators.

    Subclasses turn a ParsedHeader into the text of a bindings module.
    """

    def __init__(self, config: GenerationConfig):
        """
        Initialize the generator.

        Args:
            config: Generation configuration
        """
        self.config = config
        self._env: Optional[Environment] = None

    @property
    def env(self) -> Environment:
        """Lazy-load Jinja2 environment."""
        if self._env is None:
            self._env = self._create_jinja_env()
        return self._env

    def _create_jinja_env(self) -> Environment:
        """Create and configure Jinja2 environment."""
        env = Environment(
            loader=PackageLoader("bindgen", "templates"),
            autoescape=select_autoescape(default=False),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        env.filters["ident"] = safe_ident

        return env

    @abstractmethod
    def generate(self, parsed: ParsedHeader) -> str:
        """
        Generate output from a parsed header.

        Args:
            parsed: Parsed header content

        Returns:
            Generated module text
        """
