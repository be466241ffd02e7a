"""
Type algebra for the runtime API schema.

Parses the raw ``type`` values found in ``runtime-api.json`` into an
immutable, recursive representation and classifies scalar types.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union


class TypeParseError(ValueError):
    """Raised when a raw type value cannot be parsed."""

    pass


class PrimitiveKind(Enum):
    """Leaf kinds that are exported as plain values."""

    INT8 = "int8"
    INT16 = "int16"
    INT = "int"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT = "uint"
    UINT64 = "uint64"
    FLOAT = "float"
    DOUBLE = "double"
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"

    @property
    def is_numeric(self) -> bool:
        return self not in (PrimitiveKind.STRING, PrimitiveKind.BOOLEAN)

    @property
    def is_integer(self) -> bool:
        return self.is_numeric and self not in (
            PrimitiveKind.FLOAT,
            PrimitiveKind.DOUBLE,
            PrimitiveKind.NUMBER,
        )


# Builtin type names as they appear in the schema
PRIMITIVE_NAMES: Dict[str, PrimitiveKind] = {
    "int8": PrimitiveKind.INT8,
    "int16": PrimitiveKind.INT16,
    "int": PrimitiveKind.INT,
    "int64": PrimitiveKind.INT64,
    "uint8": PrimitiveKind.UINT8,
    "uint16": PrimitiveKind.UINT16,
    "uint": PrimitiveKind.UINT,
    "uint64": PrimitiveKind.UINT64,
    "float": PrimitiveKind.FLOAT,
    "double": PrimitiveKind.DOUBLE,
    "number": PrimitiveKind.NUMBER,
    "string": PrimitiveKind.STRING,
    "LocalisedString": PrimitiveKind.STRING,
    "boolean": PrimitiveKind.BOOLEAN,
}


@dataclass(frozen=True)
class Primitive:
    kind: PrimitiveKind


@dataclass(frozen=True)
class NamedType:
    """Reference to a class or concept, resolved lazily."""

    name: str


@dataclass(frozen=True)
class ArrayType:
    value: "Type"


@dataclass(frozen=True)
class DictionaryType:
    key: "Type"
    value: "Type"


@dataclass(frozen=True)
class KeyedTableType:
    """Dictionary-like custom table (``LuaCustomTable`` in the schema)."""

    key: "Type"
    value: "Type"


@dataclass(frozen=True)
class LiteralType:
    value: Union[str, bool, int, float]
    description: Optional[str] = None


@dataclass(frozen=True)
class StructType:
    attributes: Tuple["Attribute", ...]


@dataclass(frozen=True)
class TableType:
    parameters: Tuple["Attribute", ...]
    variant_parameter_groups: Optional[Tuple["VariantParameterGroup", ...]] = None


@dataclass(frozen=True)
class TupleType:
    parameters: Tuple["Attribute", ...]


@dataclass(frozen=True)
class TypeAlias:
    value: "Type"


@dataclass(frozen=True)
class UnionType:
    options: Tuple["Type", ...]


Type = Union[
    Primitive,
    NamedType,
    ArrayType,
    DictionaryType,
    KeyedTableType,
    LiteralType,
    StructType,
    TableType,
    TupleType,
    TypeAlias,
    UnionType,
]


@dataclass(frozen=True)
class Attribute:
    """A typed member of a class, table, struct or tuple."""

    name: str
    type: Type
    optional: bool = False
    order: int = 0
    description: str = ""
    readable: Optional[bool] = None
    subclasses: Optional[Tuple[str, ...]] = None

    @property
    def is_readable(self) -> bool:
        return self.readable is not False


@dataclass(frozen=True)
class VariantParameterGroup:
    """Alternative parameter set of a table type."""

    name: str
    order: int
    parameters: Tuple[Attribute, ...]


def is_number(type_: Type) -> bool:
    """
    Check whether a type is numeric.

    True for numeric primitives and for unions where every option is numeric.
    """
    if isinstance(type_, Primitive):
        return type_.kind.is_numeric
    if isinstance(type_, UnionType):
        return bool(type_.options) and all(is_number(o) for o in type_.options)
    return False


def scalar_kind(type_: Type) -> Optional[PrimitiveKind]:
    """
    Classify a type as a leaf value.

    Args:
        type_: Type to classify

    Returns:
        The primitive kind to export, ``PrimitiveKind.NUMBER`` for numeric
        unions, or None if the type is not a scalar
    """
    if isinstance(type_, Primitive):
        return type_.kind
    if is_number(type_):
        return PrimitiveKind.NUMBER
    return None


def ordered(attributes) -> Tuple[Attribute, ...]:
    """Sort attributes by declared order, ties broken by name."""
    return tuple(sorted(attributes, key=lambda a: (a.order, a.name)))


def dedup_by_name(attributes) -> Tuple[Attribute, ...]:
    """Keep the first attribute seen for each name."""
    seen = set()
    result = []
    for attribute in attributes:
        if attribute.name in seen:
            continue
        seen.add(attribute.name)
        result.append(attribute)
    return tuple(result)


def table_attributes(table: TableType) -> Tuple[Attribute, ...]:
    """
    Ordered attribute view of a table type.

    Direct parameters are merged with the parameters of every variant group,
    deduplicated by name and sorted by ``(order, name)``.
    """
    merged = list(table.parameters)
    for group in table.variant_parameter_groups or ():
        merged.extend(group.parameters)
    return ordered(dedup_by_name(merged))


def parse_type(raw: Any) -> Type:
    """
    Parse a raw schema type.

    Plain strings are builtin names or references; dicts carry a
    ``complex_type`` discriminator.

    Raises:
        TypeParseError: If the raw value has an unknown shape
    """
    if isinstance(raw, str):
        kind = PRIMITIVE_NAMES.get(raw)
        if kind is not None:
            return Primitive(kind)
        return NamedType(raw)

    if not isinstance(raw, dict) or "complex_type" not in raw:
        raise TypeParseError(f"Unsupported type value: {raw!r}")

    complex_type = raw["complex_type"]
    try:
        if complex_type == "array":
            return ArrayType(parse_type(raw["value"]))
        elif complex_type == "dictionary":
            return DictionaryType(parse_type(raw["key"]), parse_type(raw["value"]))
        elif complex_type == "LuaCustomTable":
            return KeyedTableType(parse_type(raw["key"]), parse_type(raw["value"]))
        elif complex_type == "literal":
            return LiteralType(raw["value"], raw.get("description"))
        elif complex_type == "struct":
            return StructType(_parse_attributes(raw["attributes"]))
        elif complex_type == "table":
            groups = raw.get("variant_parameter_groups")
            return TableType(
                _parse_attributes(raw["parameters"]),
                None if groups is None else tuple(parse_group(g) for g in groups),
            )
        elif complex_type == "tuple":
            return TupleType(_parse_attributes(raw["parameters"]))
        elif complex_type == "type":
            return TypeAlias(parse_type(raw["value"]))
        elif complex_type == "union":
            return UnionType(tuple(parse_type(o) for o in raw["options"]))
    except KeyError as e:
        raise TypeParseError(f"Missing key {e} in {complex_type} type") from e

    raise TypeParseError(f"Unknown complex_type: {complex_type!r}")


def parse_attribute(raw: Dict[str, Any]) -> Attribute:
    """Parse a raw attribute or parameter."""
    try:
        subclasses = raw.get("subclasses")
        return Attribute(
            name=raw["name"],
            type=parse_type(raw["type"]),
            optional=bool(raw.get("optional", False)),
            order=int(raw.get("order", 0)),
            description=raw.get("description") or "",
            readable=raw.get("read"),
            subclasses=None if subclasses is None else tuple(subclasses),
        )
    except KeyError as e:
        raise TypeParseError(f"Attribute is missing key {e}: {raw!r}") from e


def parse_group(raw: Dict[str, Any]) -> VariantParameterGroup:
    """Parse a raw variant parameter group."""
    try:
        return VariantParameterGroup(
            name=raw["name"],
            order=int(raw.get("order", 0)),
            parameters=_parse_attributes(raw["parameters"]),
        )
    except KeyError as e:
        raise TypeParseError(f"Variant group is missing key {e}") from e


def _parse_attributes(raw_list) -> Tuple[Attribute, ...]:
    return tuple(parse_attribute(raw) for raw in raw_list)
