"""
Core schema representation for code generation.

Describes an already-resolved module schema (typespace, exported types,
tables, reducers, procedures) as immutable dataclasses that generators
can walk consistently, and decodes the JSON form of that schema.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union
from enum import Enum


class SchemaError(Exception):
    """Exception raised for malformed schemas and broken schema invariants."""

    pass


class PrimitiveType(Enum):
    """Fixed-width scalar types."""

    BOOL = "bool"
    I8 = "i8"
    U8 = "u8"
    I16 = "i16"
    U16 = "u16"
    I32 = "i32"
    U32 = "u32"
    I64 = "i64"
    U64 = "u64"
    I128 = "i128"
    U128 = "u128"
    I256 = "i256"
    U256 = "u256"
    F32 = "f32"
    F64 = "f64"

    @property
    def is_wide_integer(self) -> bool:
        """True for integers with no native fixed-width equivalent."""
        return self in WIDE_INTEGERS


WIDE_INTEGERS = frozenset(
    {PrimitiveType.I128, PrimitiveType.U128, PrimitiveType.I256, PrimitiveType.U256}
)


class TypeUseKind(Enum):
    """Shapes a type-use can take."""

    UNIT = "unit"
    NEVER = "never"
    IDENTITY = "identity"
    CONNECTION_ID = "connection_id"
    UUID = "uuid"
    TIMESTAMP = "timestamp"
    TIME_DURATION = "time_duration"
    SCHEDULE_AT = "schedule_at"
    OPTION = "option"
    RESULT = "result"
    PRIMITIVE = "primitive"
    STRING = "string"
    ARRAY = "array"
    REF = "ref"


# Kinds that carry no payload and are spelled as a bare keyword in JSON
SCALAR_KINDS = {
    TypeUseKind.UNIT,
    TypeUseKind.NEVER,
    TypeUseKind.IDENTITY,
    TypeUseKind.CONNECTION_ID,
    TypeUseKind.UUID,
    TypeUseKind.TIMESTAMP,
    TypeUseKind.TIME_DURATION,
    TypeUseKind.SCHEDULE_AT,
    TypeUseKind.STRING,
}


@dataclass(frozen=True)
class AlgebraicTypeUse:
    """
    Recursive description of a value's shape.

    Only the slots relevant to ``kind`` are set: ``primitive`` for
    primitives, ``inner`` for options and arrays, ``ok``/``err`` for
    results and ``ref`` for typespace references.
    """

    kind: TypeUseKind
    primitive: Optional[PrimitiveType] = None
    inner: Optional["AlgebraicTypeUse"] = None
    ok: Optional["AlgebraicTypeUse"] = None
    err: Optional["AlgebraicTypeUse"] = None
    ref: Optional[int] = None

    @classmethod
    def scalar(cls, kind: TypeUseKind) -> "AlgebraicTypeUse":
        if kind not in SCALAR_KINDS:
            raise ValueError(f"Not a scalar type-use kind: {kind}")
        return cls(kind=kind)

    @classmethod
    def of_primitive(cls, primitive: PrimitiveType) -> "AlgebraicTypeUse":
        return cls(kind=TypeUseKind.PRIMITIVE, primitive=primitive)

    @classmethod
    def option(cls, inner: "AlgebraicTypeUse") -> "AlgebraicTypeUse":
        return cls(kind=TypeUseKind.OPTION, inner=inner)

    @classmethod
    def array(cls, inner: "AlgebraicTypeUse") -> "AlgebraicTypeUse":
        return cls(kind=TypeUseKind.ARRAY, inner=inner)

    @classmethod
    def result(
        cls, ok: "AlgebraicTypeUse", err: "AlgebraicTypeUse"
    ) -> "AlgebraicTypeUse":
        return cls(kind=TypeUseKind.RESULT, ok=ok, err=err)

    @classmethod
    def type_ref(cls, ref: int) -> "AlgebraicTypeUse":
        return cls(kind=TypeUseKind.REF, ref=ref)

    def children(self) -> Tuple["AlgebraicTypeUse", ...]:
        """Inline child uses (references are not followed)."""
        if self.kind in (TypeUseKind.OPTION, TypeUseKind.ARRAY):
            return (self.inner,)
        if self.kind == TypeUseKind.RESULT:
            return (self.ok, self.err)
        return ()


@dataclass(frozen=True)
class ProductTypeDef:
    """Ordered, named fields."""

    elements: Tuple[Tuple[str, AlgebraicTypeUse], ...] = ()


@dataclass(frozen=True)
class SumTypeDef:
    """Ordered, named variants, each with a payload (a tagged union)."""

    variants: Tuple[Tuple[str, AlgebraicTypeUse], ...] = ()


@dataclass(frozen=True)
class PlainEnumTypeDef:
    """Ordered nullary variant names (a closed integer enumeration)."""

    variants: Tuple[str, ...] = ()


AlgebraicTypeDef = Union[ProductTypeDef, SumTypeDef, PlainEnumTypeDef]


@dataclass(frozen=True)
class Typespace:
    """Arena of type definitions addressed by stable index."""

    types: Tuple[AlgebraicTypeDef, ...] = ()

    def __getitem__(self, ref: int) -> AlgebraicTypeDef:
        if not isinstance(ref, int) or ref < 0 or ref >= len(self.types):
            raise SchemaError(
                f"Type reference {ref} is outside the typespace "
                f"(size {len(self.types)})"
            )
        return self.types[ref]

    def __len__(self) -> int:
        return len(self.types)


@dataclass(frozen=True)
class TypeDef:
    """A typespace entry exported under a (possibly scoped) name."""

    name_segments: Tuple[str, ...]
    ty: int

    @property
    def scoped_name(self) -> str:
        return "::".join(self.name_segments)


@dataclass(frozen=True)
class TableDef:
    name: str
    accessor_name: str
    product_type_ref: int
    is_public: bool = True


class Lifecycle(Enum):
    """Reducers invoked by the host rather than by clients."""

    INIT = "init"
    CLIENT_CONNECTED = "client_connected"
    CLIENT_DISCONNECTED = "client_disconnected"


@dataclass(frozen=True)
class ReducerDef:
    name: str
    accessor_name: str
    lifecycle: Optional[Lifecycle] = None
    is_public: bool = True


@dataclass(frozen=True)
class ProcedureDef:
    name: str
    accessor_name: str
    is_public: bool = True


@dataclass(frozen=True)
class ModuleDef:
    """Resolved module schema snapshot."""

    typespace: Typespace = field(default_factory=Typespace)
    types: Tuple[TypeDef, ...] = ()
    tables: Tuple[TableDef, ...] = ()
    reducers: Tuple[ReducerDef, ...] = ()
    procedures: Tuple[ProcedureDef, ...] = ()

    def type_at(self, ref: int) -> AlgebraicTypeDef:
        """Get the definition stored at a typespace index."""
        return self.typespace[ref]

    def type_def_for_ref(self, ref: int) -> TypeDef:
        """
        Get the exported TypeDef naming a typespace index.

        Raises:
            SchemaError: If the index is out of range or nothing exports it
        """
        self.type_at(ref)  # range check
        for type_def in self.types:
            if type_def.ty == ref:
                return type_def
        raise SchemaError(f"Type reference {ref} has no exported name")

    def iter_tables(self, include_private: bool = False) -> Iterator[TableDef]:
        """Tables visible to clients, sorted by wire name."""
        tables = [t for t in self.tables if include_private or t.is_public]
        return iter(sorted(tables, key=lambda t: t.name))

    def iter_reducers(self, include_private: bool = False) -> Iterator[ReducerDef]:
        """Client-callable reducers, sorted by wire name."""
        reducers = [
            r
            for r in self.reducers
            if r.lifecycle is None and (include_private or r.is_public)
        ]
        return iter(sorted(reducers, key=lambda r: r.name))

    def iter_procedures(
        self, include_private: bool = False
    ) -> Iterator[ProcedureDef]:
        """Client-callable procedures, sorted by wire name."""
        procedures = [p for p in self.procedures if include_private or p.is_public]
        return iter(sorted(procedures, key=lambda p: p.name))

    def iter_types(self) -> Iterator[TypeDef]:
        """Exported types, sorted by scoped name."""
        return iter(sorted(self.types, key=lambda t: t.name_segments))


# JSON decoding

_SCALAR_KEYWORDS: Dict[str, AlgebraicTypeUse] = {
    kind.value: AlgebraicTypeUse(kind=kind) for kind in SCALAR_KINDS
}
_SCALAR_KEYWORDS.update(
    {prim.value: AlgebraicTypeUse.of_primitive(prim) for prim in PrimitiveType}
)


def type_use_from_json(data: Any, path: str = "type") -> AlgebraicTypeUse:
    """
    Decode a type-use from its JSON form.

    Args:
        data: A scalar keyword string or a single-key object
        path: Location used in error messages

    Returns:
        Decoded type-use

    Raises:
        SchemaError: If the value is not a recognised type-use
    """
    if isinstance(data, str):
        if data in _SCALAR_KEYWORDS:
            return _SCALAR_KEYWORDS[data]
        raise SchemaError(f"{path}: unknown type keyword '{data}'")

    if not isinstance(data, dict) or len(data) != 1:
        raise SchemaError(f"{path}: expected a type keyword or single-key object")

    (key, value), = data.items()
    if key == "array":
        return AlgebraicTypeUse.array(type_use_from_json(value, f"{path}.array"))
    if key == "option":
        return AlgebraicTypeUse.option(type_use_from_json(value, f"{path}.option"))
    if key == "result":
        if not isinstance(value, dict) or "ok" not in value or "err" not in value:
            raise SchemaError(f"{path}.result: expected 'ok' and 'err'")
        return AlgebraicTypeUse.result(
            type_use_from_json(value["ok"], f"{path}.result.ok"),
            type_use_from_json(value["err"], f"{path}.result.err"),
        )
    if key == "ref":
        if not isinstance(value, int) or isinstance(value, bool):
            raise SchemaError(f"{path}.ref: expected an integer index")
        return AlgebraicTypeUse.type_ref(value)

    raise SchemaError(f"{path}: unknown type constructor '{key}'")


def _named_uses(
    items: Any, path: str
) -> Tuple[Tuple[str, AlgebraicTypeUse], ...]:
    if not isinstance(items, list):
        raise SchemaError(f"{path}: expected a list")
    decoded = []
    for idx, item in enumerate(items):
        item_path = f"{path}[{idx}]"
        if not isinstance(item, dict) or "type" not in item:
            raise SchemaError(f"{item_path}: expected an object with 'type'")
        name = item.get("name") or ""
        if not isinstance(name, str):
            raise SchemaError(f"{item_path}.name: expected a string")
        decoded.append((name, type_use_from_json(item["type"], f"{item_path}.type")))
    return tuple(decoded)


def type_def_from_json(data: Any, path: str = "typespace") -> AlgebraicTypeDef:
    """Decode one typespace entry."""
    if not isinstance(data, dict) or len(data) != 1:
        raise SchemaError(
            f"{path}: expected one of 'product', 'sum' or 'plain_enum'"
        )

    (key, value), = data.items()
    if value is None:
        value = {}
    elif not isinstance(value, dict):
        raise SchemaError(f"{path}.{key}: expected an object")
    if key == "product":
        return ProductTypeDef(
            elements=_named_uses(value.get("elements", []), f"{path}.product.elements")
        )
    if key == "sum":
        return SumTypeDef(
            variants=_named_uses(value.get("variants", []), f"{path}.sum.variants")
        )
    if key == "plain_enum":
        variants = value.get("variants", [])
        if not isinstance(variants, list) or not all(
            isinstance(v, str) for v in variants
        ):
            raise SchemaError(f"{path}.plain_enum.variants: expected a list of names")
        return PlainEnumTypeDef(variants=tuple(variants))

    raise SchemaError(f"{path}: unknown type definition '{key}'")


def _require(entry: Dict[str, Any], key: str, path: str) -> Any:
    if key not in entry:
        raise SchemaError(f"{path}: missing '{key}'")
    return entry[key]


def _require_str(entry: Dict[str, Any], key: str, path: str) -> str:
    value = _require(entry, key, path)
    if not isinstance(value, str):
        raise SchemaError(f"{path}.{key}: expected a string")
    return value


def _require_index(entry: Dict[str, Any], key: str, path: str) -> int:
    value = _require(entry, key, path)
    if not isinstance(value, int) or isinstance(value, bool):
        raise SchemaError(f"{path}.{key}: expected an integer index")
    return value


def _optional(
    entry: Dict[str, Any], key: str, kind: type, default: Any, path: str
) -> Any:
    value = entry.get(key)
    if value is None:
        return default
    if not isinstance(value, kind):
        raise SchemaError(f"{path}.{key}: expected {kind.__name__}")
    return value


def _scoped_name(entry: Dict[str, Any], path: str) -> Tuple[str, ...]:
    name = _require(entry, "name", path)
    if isinstance(name, str):
        return tuple(name.split("::"))
    if isinstance(name, list) and name and all(isinstance(s, str) for s in name):
        return tuple(name)
    raise SchemaError(f"{path}.name: expected a string or a list of strings")


def _entries(data: Dict[str, Any], key: str) -> List[Tuple[str, Dict[str, Any]]]:
    items = data.get(key, [])
    if not isinstance(items, list):
        raise SchemaError(f"{key}: expected a list")
    entries = []
    for idx, entry in enumerate(items):
        if not isinstance(entry, dict):
            raise SchemaError(f"{key}[{idx}]: expected an object")
        entries.append((f"{key}[{idx}]", entry))
    return entries


def module_from_dict(data: Dict[str, Any]) -> ModuleDef:
    """
    Convert the JSON form of a module schema into a ModuleDef.

    Args:
        data: Parsed JSON object

    Returns:
        Module schema snapshot

    Raises:
        SchemaError: If the document is malformed
    """
    if not isinstance(data, dict):
        raise SchemaError("Module schema must be a JSON object")

    raw_typespace = data.get("typespace", [])
    if not isinstance(raw_typespace, list):
        raise SchemaError("typespace: expected a list")
    typespace = Typespace(
        types=tuple(
            type_def_from_json(entry, f"typespace[{idx}]")
            for idx, entry in enumerate(raw_typespace)
        )
    )

    types = [
        TypeDef(
            name_segments=_scoped_name(entry, path),
            ty=_require_index(entry, "ty", path),
        )
        for path, entry in _entries(data, "types")
    ]

    tables = []
    for path, entry in _entries(data, "tables"):
        name = _require_str(entry, "name", path)
        tables.append(
            TableDef(
                name=name,
                accessor_name=_optional(entry, "accessor_name", str, "", path) or name,
                product_type_ref=_require_index(entry, "product_type_ref", path),
                is_public=_optional(entry, "public", bool, True, path),
            )
        )

    reducers = []
    for path, entry in _entries(data, "reducers"):
        name = _require_str(entry, "name", path)
        lifecycle = _optional(entry, "lifecycle", str, "", path)
        try:
            lifecycle = Lifecycle(lifecycle) if lifecycle else None
        except ValueError:
            raise SchemaError(f"{path}: unknown lifecycle '{lifecycle}'")
        reducers.append(
            ReducerDef(
                name=name,
                accessor_name=_optional(entry, "accessor_name", str, "", path) or name,
                lifecycle=lifecycle,
                is_public=_optional(entry, "public", bool, True, path),
            )
        )

    procedures = []
    for path, entry in _entries(data, "procedures"):
        name = _require_str(entry, "name", path)
        procedures.append(
            ProcedureDef(
                name=name,
                accessor_name=_optional(entry, "accessor_name", str, "", path) or name,
                is_public=_optional(entry, "public", bool, True, path),
            )
        )

    return ModuleDef(
        typespace=typespace,
        types=tuple(types),
        tables=tuple(tables),
        reducers=tuple(reducers),
        procedures=tuple(procedures),
    )
