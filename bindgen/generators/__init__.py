"""
Binding generators.
"""

from .base import Generator
from .rust_binding import RustBindingGenerator

__all__ = [
    "Generator",
    "RustBindingGenerator",
]
