"""
bindgen

Generates Rust FFI bindings from C headers using libclang.
"""

__version__ = "0.1.0"

from .config import GenerationConfig
from .engine import Bindings, Builder
from .errors import (
    BindgenError,
    ConfigError,
    GenerationError,
    LinkSpecError,
    OutputCreateError,
)
from .link import LinkDirective, LinkKind, parse_link
from .options import args_to_config
from .output import FileSink, StdoutSink, select_output

__all__ = [
    "GenerationConfig",
    "Bindings",
    "Builder",
    "BindgenError",
    "ConfigError",
    "GenerationError",
    "LinkSpecError",
    "OutputCreateError",
    "LinkDirective",
    "LinkKind",
    "parse_link",
    "args_to_config",
    "FileSink",
    "StdoutSink",
    "select_output",
    "__version__",
]
