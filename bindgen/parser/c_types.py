"""
C declaration data structures.

These dataclasses represent parsed C constructs (functions, structs, enums,
macros) independently of libclang, so generators can be driven and tested
without a clang installation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Optional


@dataclass
class SourceLocation:
    """Source code location for error reporting."""
    file: Path
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


class TypeClass(Enum):
    """Classification of a C type."""
    PRIMITIVE = auto()  # int, unsigned long, double, void, ...
    POINTER = auto()
    ARRAY = auto()
    FUNCTION = auto()
    NAMED = auto()      # typedef, struct, union or enum reference
    UNKNOWN = auto()    # no Rust equivalent (long double, vectors, ...)


@dataclass
class CType:
    """
    Representation of a C type.

    Pointers and arrays point at their element through ``pointee``; function
    types carry their parameter and result types.
    """
    kind: TypeClass
    name: str = ""
    is_const: bool = False
    pointee: Optional[CType] = None
    array_size: Optional[int] = None
    parameters: list[CType] = field(default_factory=list)
    result: Optional[CType] = None
    is_variadic: bool = False
    # struct | union | enum | typedef, for NAMED types
    named_kind: str = ""

    @classmethod
    def primitive(cls, name: str, is_const: bool = False) -> CType:
        return cls(TypeClass.PRIMITIVE, name=name, is_const=is_const)

    @classmethod
    def named(cls, name: str, named_kind: str = "typedef", is_const: bool = False) -> CType:
        return cls(TypeClass.NAMED, name=name, named_kind=named_kind, is_const=is_const)

    @classmethod
    def pointer_to(cls, pointee: CType) -> CType:
        return cls(TypeClass.POINTER, pointee=pointee)

    @classmethod
    def array_of(cls, element: CType, size: Optional[int]) -> CType:
        return cls(TypeClass.ARRAY, pointee=element, array_size=size)

    @classmethod
    def function(
        cls,
        result: CType,
        parameters: Optional[list[CType]] = None,
        is_variadic: bool = False,
    ) -> CType:
        return cls(
            TypeClass.FUNCTION,
            result=result,
            parameters=parameters or [],
            is_variadic=is_variadic,
        )

    @classmethod
    def unknown(cls, spelling: str) -> CType:
        return cls(TypeClass.UNKNOWN, name=spelling)

    @property
    def is_void(self) -> bool:
        return self.kind == TypeClass.PRIMITIVE and self.name == "void"

    def __str__(self) -> str:
        """Return an approximate C spelling, for diagnostics."""
        const = "const " if self.is_const else ""
        if self.kind == TypeClass.POINTER:
            return f"{self.pointee}*"
        if self.kind == TypeClass.ARRAY:
            size = "" if self.array_size is None else self.array_size
            return f"{self.pointee}[{size}]"
        if self.kind == TypeClass.FUNCTION:
            params = ", ".join(str(p) for p in self.parameters)
            if self.is_variadic:
                params = f"{params}, ..." if params else "..."
            return f"{self.result}({params})"
        if self.kind == TypeClass.NAMED and self.named_kind in ("struct", "union", "enum"):
            return f"{const}{self.named_kind} {self.name}"
        return f"{const}{self.name}"


@dataclass
class CParameter:
    """Function parameter."""
    name: str
    type: CType


@dataclass
class CFunction:
    """C function declaration."""
    name: str
    return_type: CType
    parameters: list[CParameter] = field(default_factory=list)
    is_variadic: bool = False
    location: Optional[SourceLocation] = None


@dataclass
class CField:
    """Struct or union field."""
    name: str
    type: CType
    bit_width: Optional[int] = None  # For bit fields


@dataclass
class CStruct:
    """C struct or union definition."""
    name: str
    fields: list[CField] = field(default_factory=list)
    location: Optional[SourceLocation] = None
    is_union: bool = False

    # Whether this is an opaque/forward-declared struct
    is_opaque: bool = False


@dataclass
class CEnumValue:
    """Enum constant."""
    name: str
    value: int


@dataclass
class CEnum:
    """C enum definition. ``name`` is empty for anonymous enums."""
    name: str
    values: list[CEnumValue] = field(default_factory=list)
    # Spelling of the underlying integer type, e.g. "unsigned int"
    int_type: str = "unsigned int"
    location: Optional[SourceLocation] = None


@dataclass
class CTypedef:
    """C typedef declaration."""
    name: str
    target_type: CType
    location: Optional[SourceLocation] = None


@dataclass
class CVariable:
    """Global variable declaration."""
    name: str
    type: CType
    location: Optional[SourceLocation] = None


@dataclass
class CMacro:
    """Object-like macro definition with its replacement token spellings."""
    name: str
    tokens: list[str] = field(default_factory=list)
    location: Optional[SourceLocation] = None


@dataclass
class ParsedHeader:
    """
    Complete parsed representation of a C header and what it includes.
    """
    path: Path
    functions: list[CFunction] = field(default_factory=list)
    structs: list[CStruct] = field(default_factory=list)
    enums: list[CEnum] = field(default_factory=list)
    typedefs: list[CTypedef] = field(default_factory=list)
    variables: list[CVariable] = field(default_factory=list)
    macros: list[CMacro] = field(default_factory=list)

    @property
    def has_content(self) -> bool:
        """Check if header has any declarations."""
        return bool(
            self.functions or self.structs or self.enums
            or self.typedefs or self.variables or self.macros
        )

    def get_struct(self, name: str) -> Optional[CStruct]:
        for s in self.structs:
            if s.name == name:
                return s
        return None

    def add_struct(self, struct: CStruct) -> None:
        """Add a struct, letting a definition replace an earlier forward declaration."""
        existing = self.get_struct(struct.name)
        if existing is None:
            self.structs.append(struct)
        elif existing.is_opaque and not struct.is_opaque:
            self.structs[self.structs.index(existing)] = struct
