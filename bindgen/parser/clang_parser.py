"""
Clang-based C header parser.

Uses libclang to parse a header and extract function declarations,
struct/union definitions, enums, typedefs, global variables and macros.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from clang.cindex import (
    Cursor,
    CursorKind,
    Diagnostic,
    Index,
    LibclangError,
    StorageClass,
    TranslationUnit,
    TranslationUnitLoadError,
    TypeKind,
)

from ..config import GenerationConfig
from ..errors import GenerationError
from .c_types import (
    CEnum,
    CEnumValue,
    CField,
    CFunction,
    CMacro,
    CParameter,
    CStruct,
    CType,
    CTypedef,
    CVariable,
    ParsedHeader,
    SourceLocation,
)

logger = logging.getLogger(__name__)

PRIMITIVE_KINDS = {
    TypeKind.VOID: "void",
    TypeKind.BOOL: "bool",
    TypeKind.CHAR_S: "char",
    TypeKind.CHAR_U: "char",
    TypeKind.SCHAR: "signed char",
    TypeKind.UCHAR: "unsigned char",
    TypeKind.SHORT: "short",
    TypeKind.USHORT: "unsigned short",
    TypeKind.INT: "int",
    TypeKind.UINT: "unsigned int",
    TypeKind.LONG: "long",
    TypeKind.ULONG: "unsigned long",
    TypeKind.LONGLONG: "long long",
    TypeKind.ULONGLONG: "unsigned long long",
    TypeKind.FLOAT: "float",
    TypeKind.DOUBLE: "double",
}

RECORD_KINDS = (CursorKind.STRUCT_DECL, CursorKind.UNION_DECL)


class ClangParser:
    """
    Parser for C headers using libclang.

    Which declarations are kept depends on the configuration:
    - declarations without a source file (builtins) only with ``builtins``
    - with match patterns, only declarations from files whose name contains
      one of them
    - macros only with ``convert_macros``
    """

    def __init__(self, config: GenerationConfig, ast_stream: Optional[TextIO] = None):
        """
        Initialize the parser.

        Args:
            config: Generation configuration
            ast_stream: Where ``emit_ast`` dumps go (default: stderr)
        """
        self.config = config
        self.ast_stream = ast_stream

        # Anonymous struct/union/enum declarations named by a typedef
        self._anon_names: dict[int, str] = {}

        try:
            self._index = Index.create()
        except LibclangError as e:
            logger.error("Unable to load libclang: %s", e)
            raise GenerationError() from e

    def _build_args(self) -> list[str]:
        """Build clang argument list."""
        return list(self.config.clang_args)

    def parse(self, header_path: Path) -> ParsedHeader:
        """
        Parse a C header file.

        Args:
            header_path: Path to the header file

        Returns:
            ParsedHeader containing all kept declarations

        Raises:
            GenerationError: If clang cannot parse the header
        """
        try:
            tu = self._index.parse(
                str(header_path),
                args=self._build_args(),
                options=TranslationUnit.PARSE_DETAILED_PROCESSING_RECORD,
            )
        except TranslationUnitLoadError as e:
            logger.error("Unable to parse %s: %s", header_path, e)
            raise GenerationError() from e

        has_errors = False
        for diag in tu.diagnostics:
            if diag.severity >= Diagnostic.Error:
                logger.error("%s", self._format_diagnostic(diag))
                has_errors = True
            else:
                logger.debug("%s", self._format_diagnostic(diag))
        if has_errors:
            raise GenerationError()

        result = ParsedHeader(path=header_path)

        children = [c for c in tu.cursor.get_children() if self._should_include(c)]
        self._collect_anonymous_names(children)

        for child in children:
            if self.config.emit_ast:
                self.dump_ast(child)
            self._process_cursor(child, result)

        return result

    # =========================================================================
    # Filtering
    # =========================================================================

    def _should_include(self, cursor: Cursor) -> bool:
        location_file = cursor.location.file
        if location_file is None:
            return self.config.builtins
        if not self.config.match_patterns:
            return True
        name = location_file.name
        return any(pattern in name for pattern in self.config.match_patterns)

    @staticmethod
    def _is_anonymous(cursor: Cursor) -> bool:
        # Newer libclang spells anonymous records "struct (unnamed at ...)"
        spelling = cursor.spelling
        return not spelling or "(unnamed" in spelling or "(anonymous" in spelling

    def _collect_anonymous_names(self, children: list[Cursor]) -> None:
        """Name anonymous records and enums after the typedef that declares them."""
        for child in children:
            if child.kind != CursorKind.TYPEDEF_DECL:
                continue
            decl = child.underlying_typedef_type.get_declaration()
            if decl.kind in RECORD_KINDS + (CursorKind.ENUM_DECL,) and self._is_anonymous(decl):
                self._anon_names.setdefault(decl.hash, child.spelling)

    @staticmethod
    def _record_hash(clang_type) -> int:
        """Hash of the declaration behind a type, looking through pointers and arrays."""
        while clang_type.kind in (
            TypeKind.POINTER, TypeKind.CONSTANTARRAY, TypeKind.INCOMPLETEARRAY,
        ):
            if clang_type.kind == TypeKind.POINTER:
                clang_type = clang_type.get_pointee()
            else:
                clang_type = clang_type.element_type
        return clang_type.get_declaration().hash

    def _declared_name(self, cursor: Cursor) -> Optional[str]:
        if not self._is_anonymous(cursor):
            return cursor.spelling
        return self._anon_names.get(cursor.hash)

    # =========================================================================
    # Declarations
    # =========================================================================

    def _process_cursor(self, cursor: Cursor, result: ParsedHeader) -> None:
        """Process one top-level cursor."""
        kind = cursor.kind

        if kind == CursorKind.FUNCTION_DECL:
            func = self._parse_function(cursor)
            if func is not None and all(f.name != func.name for f in result.functions):
                result.functions.append(func)

        elif kind in RECORD_KINDS:
            struct = self._parse_struct(cursor, result)
            if struct is not None:
                result.add_struct(struct)

        elif kind == CursorKind.ENUM_DECL:
            self._add_enum(self._parse_enum(cursor), result)

        elif kind == CursorKind.TYPEDEF_DECL:
            typedef = self._parse_typedef(cursor)
            if typedef is not None and all(t.name != typedef.name for t in result.typedefs):
                result.typedefs.append(typedef)

        elif kind == CursorKind.VAR_DECL:
            var = self._parse_variable(cursor)
            if var is not None and all(v.name != var.name for v in result.variables):
                result.variables.append(var)

        elif kind == CursorKind.MACRO_DEFINITION and self.config.convert_macros:
            macro = self._parse_macro(cursor)
            if macro is not None:
                result.macros.append(macro)

    def _parse_function(self, cursor: Cursor) -> Optional[CFunction]:
        """Parse a function declaration."""
        name = cursor.spelling
        if not name or cursor.storage_class == StorageClass.STATIC:
            return None

        params = []
        for arg in cursor.get_arguments():
            params.append(CParameter(
                name=arg.spelling or f"arg{len(params)}",
                type=self._parse_type(arg.type),
            ))

        fn_type = cursor.type
        is_variadic = (
            fn_type.kind == TypeKind.FUNCTIONPROTO and fn_type.is_function_variadic()
        )

        return CFunction(
            name=name,
            return_type=self._parse_type(cursor.result_type),
            parameters=params,
            is_variadic=is_variadic,
            location=self._get_location(cursor),
        )

    @staticmethod
    def _add_enum(enum: Optional[CEnum], result: ParsedHeader) -> None:
        if enum is not None and (not enum.name or all(e.name != enum.name for e in result.enums)):
            result.enums.append(enum)

    def _parse_struct(self, cursor: Cursor, result: ParsedHeader) -> Optional[CStruct]:
        """
        Parse a struct or union declaration.

        Records and enums defined inside the body are added to ``result`` as
        declarations of their own. Anonymous ones are named
        ``<parent>__bindgen_ty_<n>``; an anonymous member without a field name
        (C11 anonymous struct/union) becomes a ``__bindgen_anon_<n>`` field.
        """
        name = self._declared_name(cursor)
        if not name:
            return None

        # Forward declaration with no definition
        is_opaque = not cursor.is_definition()

        fields = []
        if not is_opaque:
            children = list(cursor.get_children())
            anon_types = 0
            anon_members = 0
            for index, child in enumerate(children):
                if child.kind in RECORD_KINDS + (CursorKind.ENUM_DECL,):
                    if self._is_anonymous(child):
                        anon_types += 1
                        self._anon_names[child.hash] = f"{name}__bindgen_ty_{anon_types}"

                    if child.kind == CursorKind.ENUM_DECL:
                        self._add_enum(self._parse_enum(child), result)
                        continue

                    nested = self._parse_struct(child, result)
                    if nested is None:
                        continue
                    result.add_struct(nested)

                    following = children[index + 1] if index + 1 < len(children) else None
                    if self._is_anonymous(child) and not (
                        following is not None
                        and following.kind == CursorKind.FIELD_DECL
                        and self._record_hash(following.type) == child.hash
                    ):
                        anon_members += 1
                        fields.append(CField(
                            name=f"__bindgen_anon_{anon_members}",
                            type=CType.named(nested.name, "union" if nested.is_union else "struct"),
                        ))
                    continue

                if child.kind != CursorKind.FIELD_DECL:
                    continue
                field_name = child.spelling
                if not field_name:
                    # Some libclang versions expose the anonymous member itself
                    anon_members += 1
                    field_name = f"__bindgen_anon_{anon_members}"
                bit_width = child.get_bitfield_width() if child.is_bitfield() else None
                fields.append(CField(
                    name=field_name,
                    type=self._parse_type(child.type),
                    bit_width=bit_width,
                ))

        return CStruct(
            name=name,
            fields=fields,
            is_union=cursor.kind == CursorKind.UNION_DECL,
            is_opaque=is_opaque,
            location=self._get_location(cursor),
        )

    def _parse_enum(self, cursor: Cursor) -> Optional[CEnum]:
        """Parse an enum declaration. Anonymous enums keep an empty name."""
        name = self._declared_name(cursor) or ""

        values = [
            CEnumValue(name=child.spelling, value=child.enum_value)
            for child in cursor.get_children()
            if child.kind == CursorKind.ENUM_CONSTANT_DECL
        ]

        int_type = PRIMITIVE_KINDS.get(
            cursor.enum_type.get_canonical().kind, "unsigned int"
        )

        return CEnum(
            name=name,
            values=values,
            int_type=int_type,
            location=self._get_location(cursor),
        )

    def _parse_typedef(self, cursor: Cursor) -> Optional[CTypedef]:
        """Parse a typedef declaration."""
        name = cursor.spelling
        if not name:
            return None

        underlying = cursor.underlying_typedef_type
        decl = underlying.get_declaration()
        if self._anon_names.get(decl.hash) == name:
            # Emitted as the record or enum itself
            return None

        return CTypedef(
            name=name,
            target_type=self._parse_type(underlying),
            location=self._get_location(cursor),
        )

    def _parse_variable(self, cursor: Cursor) -> Optional[CVariable]:
        """Parse a global variable declaration."""
        if not cursor.spelling or cursor.storage_class == StorageClass.STATIC:
            return None
        return CVariable(
            name=cursor.spelling,
            type=self._parse_type(cursor.type),
            location=self._get_location(cursor),
        )

    def _parse_macro(self, cursor: Cursor) -> Optional[CMacro]:
        """Parse an object-like macro; function-like macros are skipped."""
        tokens = list(cursor.get_tokens())
        if len(tokens) < 2:
            return None

        name_token, first = tokens[0], tokens[1]
        if first.spelling == "(":
            name_end = name_token.extent.end
            paren_start = first.extent.start
            if name_end.line == paren_start.line and name_end.column == paren_start.column:
                return None

        return CMacro(
            name=cursor.spelling,
            tokens=[t.spelling for t in tokens[1:]],
            location=self._get_location(cursor),
        )

    # =========================================================================
    # Types
    # =========================================================================

    def _parse_type(self, clang_type) -> CType:
        """Convert a clang type to our CType representation."""
        kind = clang_type.kind
        is_const = clang_type.is_const_qualified()

        if kind == TypeKind.ELABORATED:
            inner = self._parse_type(clang_type.get_named_type())
            inner.is_const = inner.is_const or is_const
            return inner

        if kind in PRIMITIVE_KINDS:
            return CType.primitive(PRIMITIVE_KINDS[kind], is_const=is_const)

        if kind == TypeKind.POINTER:
            pointer = CType.pointer_to(self._parse_type(clang_type.get_pointee()))
            pointer.is_const = is_const
            return pointer

        if kind == TypeKind.CONSTANTARRAY:
            return CType.array_of(
                self._parse_type(clang_type.element_type),
                clang_type.element_count,
            )

        if kind == TypeKind.INCOMPLETEARRAY:
            return CType.array_of(self._parse_type(clang_type.element_type), None)

        if kind == TypeKind.FUNCTIONPROTO:
            return CType.function(
                self._parse_type(clang_type.get_result()),
                [self._parse_type(a) for a in clang_type.argument_types()],
                clang_type.is_function_variadic(),
            )

        if kind == TypeKind.FUNCTIONNOPROTO:
            return CType.function(self._parse_type(clang_type.get_result()))

        if kind == TypeKind.TYPEDEF:
            decl = clang_type.get_declaration()
            return CType.named(decl.spelling, "typedef", is_const=is_const)

        if kind in (TypeKind.RECORD, TypeKind.ENUM):
            decl = clang_type.get_declaration()
            name = self._declared_name(decl)
            if not name:
                return CType.unknown(clang_type.spelling)
            if kind == TypeKind.ENUM:
                named_kind = "enum"
            elif decl.kind == CursorKind.UNION_DECL:
                named_kind = "union"
            else:
                named_kind = "struct"
            return CType.named(name, named_kind, is_const=is_const)

        return CType.unknown(clang_type.spelling)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _get_location(self, cursor: Cursor) -> Optional[SourceLocation]:
        """Get source location from cursor."""
        loc = cursor.location
        if loc.file is None:
            return None
        return SourceLocation(
            file=Path(loc.file.name),
            line=loc.line,
            column=loc.column,
        )

    @staticmethod
    def _format_diagnostic(diag: Diagnostic) -> str:
        loc = diag.location
        if loc.file is None:
            return diag.spelling
        return f"{loc.file.name}:{loc.line}:{loc.column}: {diag.spelling}"

    def dump_ast(self, cursor: Cursor, depth: int = 0) -> None:
        """Write the cursor tree to the AST stream, one node per line."""
        stream = self.ast_stream if self.ast_stream is not None else sys.stderr
        type_spelling = cursor.type.spelling if cursor.type is not None else ""
        stream.write(
            f"{'  ' * depth}{cursor.kind.name} {cursor.spelling!r} {type_spelling}\n"
        )
        for child in cursor.get_children():
            self.dump_ast(child, depth + 1)
