"""
C header parsing module.
"""

from .c_types import (
    TypeClass,
    CType,
    CFunction,
    CParameter,
    CStruct,
    CField,
    CEnum,
    CEnumValue,
    CTypedef,
    CVariable,
    CMacro,
    ParsedHeader,
)
from .clang_parser import ClangParser

__all__ = [
    "TypeClass",
    "CType",
    "CFunction",
    "CParameter",
    "CStruct",
    "CField",
    "CEnum",
    "CEnumValue",
    "CTypedef",
    "CVariable",
    "CMacro",
    "ParsedHeader",
    "ClangParser",
]
