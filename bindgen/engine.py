"""
Binding generation engine.

The command line talks to the engine through two calls only:
``Builder(config).generate()`` and ``Bindings.write(sink)``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .config import GenerationConfig
from .generators import RustBindingGenerator
from .output import OutputSink
from .parser import ClangParser

logger = logging.getLogger(__name__)


class Bindings:
    """Generated bindings, ready to be written to a sink."""

    def __init__(self, text: str):
        self.text = text

    def write(self, sink: OutputSink) -> None:
        """
        Write the bindings to a sink.

        Raises:
            OSError: If writing fails
        """
        sink.write(self.text.encode("utf-8"))

    def __str__(self) -> str:
        return self.text


class Builder:
    """
    Generates bindings for the header described by a GenerationConfig.
    """

    def __init__(self, config: GenerationConfig):
        self.config = config

    def generate(self) -> Bindings:
        """
        Parse the header and render its bindings.

        Raises:
            GenerationError: If parsing or generation fails; details have
                already been logged
        """
        parser = ClangParser(self.config)
        parsed = parser.parse(Path(self.config.header))
        logger.debug(
            "parsed %s: %d functions, %d structs, %d enums, %d typedefs",
            parsed.path,
            len(parsed.functions),
            len(parsed.structs),
            len(parsed.enums),
            len(parsed.typedefs),
        )

        generator = RustBindingGenerator(self.config)
        return Bindings(generator.generate(parsed))
