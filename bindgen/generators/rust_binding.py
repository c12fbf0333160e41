"""
Rust FFI binding generator.

Generates a Rust module with:
- ``pub const`` items for enum constants and converted macros
- ``pub type`` aliases for typedefs
- ``#[repr(C)]`` structs and unions, ``#[repr(..)]`` enums
- an ``extern "C"`` block with functions and globals, carrying the
  ``#[link]`` attribute when a library was given
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..config import GenerationConfig
from ..errors import GenerationError, UnknownTypeError
from ..link import LinkKind
from ..parser.c_types import (
    CEnum,
    CFunction,
    CMacro,
    CStruct,
    CType,
    CTypedef,
    CVariable,
    ParsedHeader,
    TypeClass,
)
from ..types.registry import TypeRegistry
from ..types.rust_mapper import RustTypeMapper, safe_ident
from .base import Generator
from .macros import (
    default_int_type,
    evaluate_macro,
    int_slot_token,
    rust_byte_string,
    rust_float_literal,
)

logger = logging.getLogger(__name__)

TEMPLATE_NAME = "bindings.rs.j2"


@dataclass
class RustConst:
    name: str
    ty: str
    value: str


@dataclass
class RustAlias:
    name: str
    ty: str


@dataclass
class RustVariant:
    name: str
    value: int


@dataclass
class RustEnum:
    name: str
    repr: str
    variants: List[RustVariant]
    derives: List[str]


@dataclass
class RustField:
    name: str
    ty: str


@dataclass
class RustStruct:
    name: str
    keyword: str  # "struct" | "union"
    fields: List[RustField]
    derives: List[str]
    is_opaque: bool = False


@dataclass
class RustStatic:
    name: str
    ty: str
    mutable: bool
    link_name: Optional[str] = None


@dataclass
class RustFunction:
    name: str
    params: List[str]
    ret: Optional[str]
    link_name: Optional[str] = None


@dataclass
class RustModule:
    """Items of a generated module, grouped by the section they render in."""
    consts: List[RustConst] = field(default_factory=list)
    aliases: List[RustAlias] = field(default_factory=list)
    enums: List[RustEnum] = field(default_factory=list)
    structs: List[RustStruct] = field(default_factory=list)
    statics: List[RustStatic] = field(default_factory=list)
    functions: List[RustFunction] = field(default_factory=list)
    link_attr: Optional[str] = None

    def add_const(self, const: RustConst) -> None:
        if all(c.name != const.name for c in self.consts):
            self.consts.append(const)

    @property
    def has_extern_block(self) -> bool:
        return bool(self.statics or self.functions or self.link_attr)


def link_attribute(config: GenerationConfig) -> Optional[str]:
    """The ``#[link(...)]`` attribute for the configured library, if any."""
    link = config.link
    if link is None:
        return None
    if link.kind == LinkKind.DYNAMIC:
        return f'#[link(name = "{link.library}")]'
    return f'#[link(name = "{link.library}", kind = "{link.kind.value}")]'


class RustBindingGenerator(Generator):
    """
    Generator for Rust FFI bindings.
    """

    def __init__(self, config: GenerationConfig):
        super().__init__(config)
        self.registry = TypeRegistry(convert_floats=config.convert_floats)
        self.mapper = RustTypeMapper(config, self.registry)

    def generate(self, parsed: ParsedHeader) -> str:
        """
        Generate the bindings module.

        Raises:
            GenerationError: On an unknown type (unless allowed) or an invalid
                enum/macro type name
        """
        module = RustModule(link_attr=link_attribute(self.config))

        for macro in parsed.macros:
            self._convert(self._gen_macro, macro, module)
        for typedef in parsed.typedefs:
            self._convert(self._gen_typedef, typedef, module)
        for enum in parsed.enums:
            self._convert(self._gen_enum, enum, module)
        for struct in parsed.structs:
            self._convert(self._gen_struct, struct, module)
        for var in parsed.variables:
            self._convert(self._gen_variable, var, module)
        for func in parsed.functions:
            self._convert(self._gen_function, func, module)

        template = self.env.get_template(TEMPLATE_NAME)
        return template.render(module=module)

    def _convert(self, gen: Callable, decl, module: RustModule) -> None:
        """Run one declaration converter, applying the unknown type policy."""
        where = f"{decl.location}: " if decl.location is not None else ""
        try:
            gen(decl, module)
        except UnknownTypeError as e:
            if not self.config.allow_unknown_types:
                logger.error("%s%s (in %s)", where, e, decl.name)
                raise
            logger.warning("%s%s (in %s), skipping", where, e, decl.name)
        except GenerationError as e:
            logger.error("%s%s", where, e)
            raise

    # =========================================================================
    # Declarations
    # =========================================================================

    def _gen_macro(self, macro: CMacro, module: RustModule) -> None:
        value = evaluate_macro(macro.tokens)
        if value is None:
            logger.debug("macro %s is not a literal, skipping", macro.name)
            return

        name = self.mapper.rust_name(macro.name)

        if value.kind == "int":
            ty = self._macro_int_type(value.value)
            if ty is None:
                logger.debug("macro %s has no eligible integer type, skipping", macro.name)
                return
            module.add_const(RustConst(name, ty, str(value.value)))

        elif value.kind == "float":
            ty = self.mapper.map_type(CType.primitive("double"))
            module.add_const(RustConst(name, ty, rust_float_literal(value.value)))

        else:
            data = value.value + b"\0"
            ty = f"&'static [u8; {len(data)}]"
            module.add_const(RustConst(name, ty, rust_byte_string(data)))

    def _macro_int_type(self, value: int) -> Optional[str]:
        type_tokens = self.config.macro_int_types
        if type_tokens is None:
            return default_int_type(value)

        token = int_slot_token(value, [t.strip() for t in type_tokens])
        if token is None:
            return None
        return f"{self.config.ctypes_path}::{self.registry.macro_int_type(token)}"

    def _gen_typedef(self, typedef: CTypedef, module: RustModule) -> None:
        # stdint names resolve straight to Rust primitives
        if self.registry.is_fixed_width(typedef.name):
            return

        name = self.mapper.rust_name(typedef.name)
        target = typedef.target_type
        # typedef struct foo foo;
        if target.kind == TypeClass.NAMED and self.mapper.rust_name(target.name) == name:
            return

        module.aliases.append(RustAlias(name, self.mapper.map_type(target)))

    def _gen_enum(self, enum: CEnum, module: RustModule) -> None:
        repr_ty = self.registry.enum_repr(enum.int_type, self.config.override_enum_type)

        if not enum.name:
            for value in enum.values:
                module.add_const(RustConst(
                    self.mapper.rust_name(value.name), repr_ty, str(value.value),
                ))
            return

        name = self.mapper.rust_name(enum.name)
        distinct = len({v.value for v in enum.values}) == len(enum.values)

        if self.config.rust_enums and enum.values and distinct:
            derives = ["Copy", "Clone"]
            if self.config.derive_debug:
                derives.append("Debug")
            derives.extend(["PartialEq", "Eq", "Hash"])
            module.enums.append(RustEnum(
                name=name,
                repr=repr_ty,
                variants=[
                    RustVariant(self.mapper.rust_name(v.name), v.value)
                    for v in enum.values
                ],
                derives=derives,
            ))
            return

        if self.config.rust_enums and not distinct:
            logger.debug("enum %s has duplicate values, using constants", enum.name)

        module.aliases.append(RustAlias(name, repr_ty))
        for value in enum.values:
            module.add_const(RustConst(
                self.mapper.rust_name(value.name), name, str(value.value),
            ))

    def _gen_struct(self, struct: CStruct, module: RustModule) -> None:
        fields = []
        for index, f in enumerate(struct.fields):
            if f.bit_width is not None:
                raise UnknownTypeError(f"bitfield {struct.name}::{f.name}")
            fields.append(RustField(
                name=f.name or f"field{index}",
                ty=self.mapper.map_type(f.type),
            ))

        derives = ["Copy", "Clone"]
        if self.config.derive_debug and not struct.is_union:
            derives.append("Debug")

        module.structs.append(RustStruct(
            name=self.mapper.rust_name(struct.name),
            keyword="union" if struct.is_union else "struct",
            fields=fields,
            derives=derives,
            is_opaque=struct.is_opaque,
        ))

    def _gen_variable(self, var: CVariable, module: RustModule) -> None:
        name = self.mapper.rust_name(var.name)
        module.statics.append(RustStatic(
            name=name,
            ty=self.mapper.map_type(var.type),
            mutable=not var.type.is_const,
            link_name=var.name if name != var.name else None,
        ))

    def _gen_function(self, func: CFunction, module: RustModule) -> None:
        params = []
        seen = set()
        for index, param in enumerate(func.parameters):
            param_name = safe_ident(param.name) if param.name else f"arg{index}"
            if param_name in seen:
                param_name = f"arg{index}"
            seen.add(param_name)
            params.append(f"{param_name}: {self.mapper.map_param(param.type)}")
        if func.is_variadic:
            params.append("...")

        name = self.mapper.rust_name(func.name)
        module.functions.append(RustFunction(
            name=name,
            params=params,
            ret=self.mapper.map_return(func.return_type),
            link_name=func.name if name != func.name else None,
        ))
