"""
Type system for C to Rust mapping.
"""

from .registry import TypeRegistry
from .rust_mapper import RustTypeMapper

__all__ = ["TypeRegistry", "RustTypeMapper"]
