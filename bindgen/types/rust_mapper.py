"""
C type to Rust type expression mapper.

Handles pointers, arrays, function pointers and named types, applying the
ctypes prefix, ``core``/``std`` selection and prefix removal from the
configuration.
"""

from __future__ import annotations

from typing import Optional

from ..config import GenerationConfig
from ..errors import UnknownTypeError
from ..parser.c_types import CType, TypeClass
from .registry import TypeInfo, TypeKind, TypeRegistry

# Identifiers that must be escaped in generated Rust code
RUST_KEYWORDS = {
    "abstract", "as", "async", "await", "become", "box", "break", "const",
    "continue", "crate", "do", "dyn", "else", "enum", "extern", "false",
    "final", "fn", "for", "if", "impl", "in", "let", "loop", "macro",
    "match", "mod", "move", "mut", "override", "priv", "pub", "ref",
    "return", "self", "Self", "static", "struct", "super", "trait", "true",
    "try", "type", "typeof", "unsafe", "unsized", "use", "virtual", "where",
    "while", "yield",
}


def safe_ident(name: str) -> str:
    """Escape a Rust keyword by appending an underscore."""
    if name in RUST_KEYWORDS:
        return f"{name}_"
    return name


class RustTypeMapper:
    """
    Maps CType trees to Rust type expressions.

    Handles:
    - Basic types (int -> ::std::os::raw::c_int, float -> f32)
    - Pointer types (const char* -> *const c_char, void* -> *mut c_void)
    - Arrays (int[4] -> [c_int; 4])
    - Function pointers (-> Option<unsafe extern "C" fn(..)>)
    """

    def __init__(self, config: GenerationConfig, registry: Optional[TypeRegistry] = None):
        """
        Initialize the mapper.

        Args:
            config: Generation configuration
            registry: Type registry for base type lookups
        """
        self.config = config
        self.registry = registry or TypeRegistry(convert_floats=config.convert_floats)

    def rust_name(self, name: str) -> str:
        """
        Name of a declared C symbol in the bindings.

        The configured prefix is removed case-insensitively, unless that would
        leave an empty or invalid identifier.
        """
        prefix = self.config.remove_prefix
        if prefix and name.lower().startswith(prefix.lower()):
            stripped = name[len(prefix):]
            if stripped and not stripped[0].isdigit():
                name = stripped
        return safe_ident(name)

    def _qualify(self, info: TypeInfo) -> str:
        if info.kind == TypeKind.BUILTIN:
            return f"{self.config.ctypes_path}::{info.rust_name}"
        return info.rust_name

    def map_type(self, ctype: CType, in_pointer: bool = False) -> str:
        """
        Map a C type to a Rust type expression.

        Args:
            ctype: Parsed C type
            in_pointer: Whether the type is a pointee (``void`` is then ``c_void``)

        Raises:
            UnknownTypeError: If the type has no Rust equivalent
        """
        kind = ctype.kind

        if kind == TypeClass.PRIMITIVE:
            if ctype.is_void and not in_pointer:
                return "()"
            info = self.registry.lookup(ctype.name)
            if info is None:
                raise UnknownTypeError(str(ctype))
            return self._qualify(info)

        if kind == TypeClass.POINTER:
            pointee = ctype.pointee
            if pointee.kind == TypeClass.FUNCTION:
                return self.fn_pointer(pointee)
            qualifier = "*const" if pointee.is_const else "*mut"
            return f"{qualifier} {self.map_type(pointee, in_pointer=True)}"

        if kind == TypeClass.ARRAY:
            element = self.map_type(ctype.pointee)
            # Flexible array members become zero-length arrays
            size = ctype.array_size if ctype.array_size is not None else 0
            return f"[{element}; {size}]"

        if kind == TypeClass.FUNCTION:
            return self.fn_type(ctype)

        if kind == TypeClass.NAMED:
            if ctype.named_kind == "typedef":
                info = self.registry.lookup(ctype.name)
                if info is not None:
                    return self._qualify(info)
            return self.rust_name(ctype.name)

        raise UnknownTypeError(str(ctype))

    def map_param(self, ctype: CType) -> str:
        """Map a parameter type; arrays decay to pointers."""
        if ctype.kind == TypeClass.ARRAY:
            return self.map_type(CType.pointer_to(ctype.pointee))
        return self.map_type(ctype)

    def map_return(self, ctype: CType) -> Optional[str]:
        """Map a return type; ``void`` gives None."""
        if ctype.is_void:
            return None
        return self.map_type(ctype)

    def fn_type(self, ctype: CType) -> str:
        """Bare ``unsafe extern "C" fn`` type for a function type."""
        params = [self.map_param(p) for p in ctype.parameters]
        if ctype.is_variadic:
            params.append("...")
        ret = self.map_return(ctype.result) if ctype.result is not None else None
        suffix = f" -> {ret}" if ret else ""
        return f'unsafe extern "C" fn({", ".join(params)}){suffix}'

    def fn_pointer(self, ctype: CType) -> str:
        """Nullable function pointer for a function type."""
        return f"::{self.config.base_crate}::option::Option<{self.fn_type(ctype)}>"
