"""
Go-specific type system for code generation.

Maps algebraic type-uses onto Go syntax with configuration-driven behavior.
References always render as the name of the referenced type, never as an
inline expansion, so recursive type graphs render in finite time.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional
from enum import Enum

from ...core.schema import AlgebraicTypeUse, ModuleDef, PrimitiveType, TypeUseKind
from .naming import type_def_name


class ImportPolicy(Enum):
    """Strategies for collecting a type file's imports."""

    TRANSITIVE = "transitive"  # Follow references into their definitions
    RENDERED = "rendered"  # Only shapes that appear in the file's text


@dataclass(frozen=True)
class GoType:
    """
    Immutable representation of a rendered Go type.

    Carries the Go syntax plus the imports that syntax needs directly.
    Import resolution reads ``imports_needed`` for every leaf shape.
    """

    name: str  # The Go type name (e.g., "string", "*User")
    imports_needed: FrozenSet[str] = field(default_factory=frozenset)

    def as_pointer(self) -> "GoType":
        """Return a pointer version of this type."""
        return GoType(name=f"*{self.name}", imports_needed=self.imports_needed)


@dataclass
class GoTypeConfig:
    """Configuration for Go type mapping behavior."""

    # String-encoded opaque identifiers (identity, connection id, uuid)
    opaque_id_type: str = "string"

    # Time handling
    time_type: str = "time.Time"
    duration_type: str = "time.Duration"
    time_import: str = "time"

    # 128/256-bit integers
    big_int_type: str = "*big.Int"
    big_int_import: str = "math/big"

    # Module-wide helper types emitted in client.go
    result_type: str = "Result"
    schedule_at_type: str = "ScheduleAt"

    # Never-type and sum payload slot
    unknown_type: str = "any"

    import_policy: ImportPolicy = ImportPolicy.TRANSITIVE


PRIMITIVE_GO_TYPES: Dict[PrimitiveType, str] = {
    PrimitiveType.BOOL: "bool",
    PrimitiveType.I8: "int8",
    PrimitiveType.U8: "uint8",
    PrimitiveType.I16: "int16",
    PrimitiveType.U16: "uint16",
    PrimitiveType.I32: "int32",
    PrimitiveType.U32: "uint32",
    PrimitiveType.I64: "int64",
    PrimitiveType.U64: "uint64",
    PrimitiveType.F32: "float32",
    PrimitiveType.F64: "float64",
}


class GoTypeMapper:
    """
    Central engine for mapping type-uses to Go types.

    Holds no per-module state: the module is passed to each call, so one
    mapper can serve any number of generation runs.
    """

    def __init__(self, config: Optional[GoTypeConfig] = None):
        """Initialize with type configuration."""
        self.config = config or GoTypeConfig()
        self._scalar_types = self._build_scalar_type_map()

    def _build_scalar_type_map(self) -> Dict[TypeUseKind, GoType]:
        """Build mapping of payload-free kinds to Go types."""
        time_imports = frozenset({self.config.time_import})
        opaque = GoType(name=self.config.opaque_id_type)
        return {
            TypeUseKind.UNIT: GoType(name="struct{}"),
            TypeUseKind.NEVER: GoType(name=self.config.unknown_type),
            TypeUseKind.IDENTITY: opaque,
            TypeUseKind.CONNECTION_ID: opaque,
            TypeUseKind.UUID: opaque,
            TypeUseKind.TIMESTAMP: GoType(
                name=self.config.time_type, imports_needed=time_imports
            ),
            TypeUseKind.TIME_DURATION: GoType(
                name=self.config.duration_type, imports_needed=time_imports
            ),
            TypeUseKind.SCHEDULE_AT: GoType(name=self.config.schedule_at_type),
            TypeUseKind.STRING: GoType(name="string"),
        }

    def map_type_use(self, module: ModuleDef, use: AlgebraicTypeUse) -> GoType:
        """
        Map a type-use to a Go type.

        Args:
            module: Module whose typespace references point into
            use: The type-use to map

        Returns:
            GoType with the rendered syntax and its direct imports

        Raises:
            SchemaError: If a reference does not name an exported type
        """
        if use.kind in self._scalar_types:
            return self._scalar_types[use.kind]

        if use.kind == TypeUseKind.PRIMITIVE:
            return self._map_primitive(use.primitive)

        if use.kind == TypeUseKind.OPTION:
            # Pointer keeps absent (nil) distinct from a zero value
            return self.map_type_use(module, use.inner).as_pointer()

        if use.kind == TypeUseKind.ARRAY:
            inner = self.map_type_use(module, use.inner)
            return GoType(name=f"[]{inner.name}", imports_needed=inner.imports_needed)

        if use.kind == TypeUseKind.RESULT:
            ok = self.map_type_use(module, use.ok)
            err = self.map_type_use(module, use.err)
            return GoType(
                name=f"{self.config.result_type}[{ok.name}, {err.name}]",
                imports_needed=ok.imports_needed | err.imports_needed,
            )

        if use.kind == TypeUseKind.REF:
            return GoType(name=type_def_name(module.type_def_for_ref(use.ref)))

        raise ValueError(f"Unhandled type-use kind: {use.kind}")

    def _map_primitive(self, primitive: PrimitiveType) -> GoType:
        if primitive.is_wide_integer:
            return GoType(
                name=self.config.big_int_type,
                imports_needed=frozenset({self.config.big_int_import}),
            )
        return GoType(name=PRIMITIVE_GO_TYPES[primitive])

    def render(self, module: ModuleDef, use: AlgebraicTypeUse) -> str:
        """Render a type-use to Go syntax."""
        return self.map_type_use(module, use).name

    def render_ref(self, module: ModuleDef, ref: int) -> str:
        """Render the Go name of a typespace entry."""
        return self.render(module, AlgebraicTypeUse.type_ref(ref))
