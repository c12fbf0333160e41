"""
Type registry for C to Rust mappings.

This module defines the tables mapping C type names to the Rust types used in
generated bindings, including the enum representation and macro integer type
names accepted on the command line.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from ..errors import GenerationError


class TypeKind(Enum):
    """Classification of mapped types."""
    BUILTIN = auto()      # int, char, ... (resolved under the ctypes prefix)
    NATIVE = auto()       # bool, f32, f64 (Rust primitives)
    FIXED_WIDTH = auto()  # int32_t, size_t, ... (Rust primitives)


@dataclass
class TypeInfo:
    """Information about a mapped type."""
    c_name: str
    rust_name: str
    kind: TypeKind


# =============================================================================
# Built-in C Types
# =============================================================================

BUILTIN_TYPES: dict[str, str] = {
    # Character types
    "char": "c_char",
    "signed char": "c_schar",
    "unsigned char": "c_uchar",

    # Integer types
    "short": "c_short",
    "unsigned short": "c_ushort",
    "int": "c_int",
    "unsigned int": "c_uint",
    "long": "c_long",
    "unsigned long": "c_ulong",
    "long long": "c_longlong",
    "unsigned long long": "c_ulonglong",

    # Floating point (only with --dont-convert-floats)
    "float": "c_float",
    "double": "c_double",

    # Only valid behind a pointer
    "void": "c_void",
}

NATIVE_TYPES: dict[str, str] = {
    "bool": "bool",
    "_Bool": "bool",
    "float": "f32",
    "double": "f64",
}

# =============================================================================
# Fixed-Width Integer Types (stdint.h / stddef.h)
# =============================================================================

FIXED_WIDTH_TYPES: dict[str, str] = {
    # Signed
    "int8_t": "i8",
    "int16_t": "i16",
    "int32_t": "i32",
    "int64_t": "i64",

    # Unsigned
    "uint8_t": "u8",
    "uint16_t": "u16",
    "uint32_t": "u32",
    "uint64_t": "u64",

    # Size types
    "size_t": "usize",
    "ssize_t": "isize",
    "ptrdiff_t": "isize",
    "intptr_t": "isize",
    "uintptr_t": "usize",
}

# =============================================================================
# Enum and Macro Integer Types
# =============================================================================

# --override-enum-type tokens to the Rust integer used as enum repr
ENUM_REPR_TYPES: dict[str, str] = {
    "uchar": "u8",
    "schar": "i8",
    "ushort": "u16",
    "sshort": "i16",
    "uint": "u32",
    "sint": "i32",
    "ulong": "u64",
    "slong": "i64",
    "ulonglong": "u64",
    "slonglong": "i64",
}

# Underlying C integer type of an enum to its Rust repr
INTEGER_REPR_TYPES: dict[str, str] = {
    "bool": "u8",
    "char": "i8",
    "signed char": "i8",
    "unsigned char": "u8",
    "short": "i16",
    "unsigned short": "u16",
    "int": "i32",
    "unsigned int": "u32",
    "long": "i64",
    "unsigned long": "u64",
    "long long": "i64",
    "unsigned long long": "u64",
}

# --macro-int-types tokens to C type names under the ctypes prefix
MACRO_INT_TYPES: dict[str, str] = {
    "uchar": "c_uchar",
    "schar": "c_schar",
    "ushort": "c_ushort",
    "sshort": "c_short",
    "uint": "c_uint",
    "sint": "c_int",
    "ulong": "c_ulong",
    "slong": "c_long",
    "ulonglong": "c_ulonglong",
    "slonglong": "c_longlong",
}


class TypeRegistry:
    """
    Central registry for type mappings.

    Resolves C type names to Rust types; floating point types resolve to
    ``f32``/``f64`` unless float conversion is disabled.
    """

    def __init__(self, convert_floats: bool = True):
        """
        Initialize the type registry.

        Args:
            convert_floats: Map ``float``/``double`` to ``f32``/``f64``
        """
        self.convert_floats = convert_floats

    def lookup(self, c_type: str) -> Optional[TypeInfo]:
        """
        Look up type information for a C type name.

        Args:
            c_type: The C type name (e.g., "unsigned int", "uint32_t")

        Returns:
            TypeInfo if found, None otherwise
        """
        c_type = c_type.strip()

        if c_type in NATIVE_TYPES and (self.convert_floats or c_type not in ("float", "double")):
            return TypeInfo(c_type, NATIVE_TYPES[c_type], TypeKind.NATIVE)

        if c_type in BUILTIN_TYPES:
            return TypeInfo(c_type, BUILTIN_TYPES[c_type], TypeKind.BUILTIN)

        if c_type in FIXED_WIDTH_TYPES:
            return TypeInfo(c_type, FIXED_WIDTH_TYPES[c_type], TypeKind.FIXED_WIDTH)

        return None

    def is_fixed_width(self, c_type: str) -> bool:
        """Check if a typedef name maps straight to a Rust primitive."""
        return c_type in FIXED_WIDTH_TYPES

    def enum_repr(self, int_type: str, override: str = "") -> str:
        """
        Get the Rust repr of an enum.

        Args:
            int_type: Underlying C integer type of the enum
            override: ``--override-enum-type`` token, empty for none

        Raises:
            GenerationError: If the override token is not a known type name
        """
        if override:
            try:
                return ENUM_REPR_TYPES[override]
            except KeyError:
                raise GenerationError(f"unknown enum type: {override}") from None
        return INTEGER_REPR_TYPES.get(int_type, "u32")

    def macro_int_type(self, token: str) -> str:
        """
        Get the C type name for a ``--macro-int-types`` token.

        Raises:
            GenerationError: If the token is not a known type name
        """
        try:
            return MACRO_INT_TYPES[token]
        except KeyError:
            raise GenerationError(f"unknown macro integer type: {token}") from None
