"""
Import resolution for generated Go files.

Walks a type graph and collects the support packages the rendered code
needs. Leaf shapes take their imports from the type mapper, composites are
walked child by child and references are followed per the import policy.
The accumulator and the set of visited references are passed explicitly
through the walk, so resolution is reentrant and terminates on mutually
recursive types.
"""

from typing import List, Optional, Set

from ...core.schema import (
    AlgebraicTypeDef,
    AlgebraicTypeUse,
    ModuleDef,
    PlainEnumTypeDef,
    ProductTypeDef,
    SumTypeDef,
    TypeUseKind,
)
from .types import GoTypeConfig, GoTypeMapper, ImportPolicy


class ImportResolver:
    """Collects Go import paths for type-uses and type definitions."""

    def __init__(
        self,
        config: Optional[GoTypeConfig] = None,
        type_mapper: Optional[GoTypeMapper] = None,
    ):
        self.config = config or GoTypeConfig()
        self.type_mapper = type_mapper or GoTypeMapper(self.config)

    def resolve_type_imports(self, module: ModuleDef, use: AlgebraicTypeUse) -> List[str]:
        """Sorted, duplicate-free imports needed to render a type-use."""
        imports: Set[str] = set()
        self.gather_type(module, use, imports, set())
        return sorted(imports)

    def resolve_definition_imports(
        self, module: ModuleDef, definition: AlgebraicTypeDef
    ) -> List[str]:
        """
        Sorted, duplicate-free imports for a named type definition's file.

        Under ``ImportPolicy.RENDERED`` sum payloads are skipped since the
        sum's struct stores them in an untyped slot.
        """
        imports: Set[str] = set()
        visited: Set[int] = set()
        if isinstance(definition, ProductTypeDef):
            for _, use in definition.elements:
                self.gather_type(module, use, imports, visited)
        elif isinstance(definition, SumTypeDef):
            if self.config.import_policy == ImportPolicy.TRANSITIVE:
                for _, use in definition.variants:
                    self.gather_type(module, use, imports, visited)
        return sorted(imports)

    def gather_type(
        self,
        module: ModuleDef,
        use: AlgebraicTypeUse,
        imports: Set[str],
        visited: Set[int],
    ) -> None:
        """
        Add the imports for ``use`` to ``imports``.

        Args:
            module: Module whose typespace references point into
            use: Type-use to walk
            imports: Accumulator, updated in place
            visited: Typespace indices already entered during this walk
        """
        if use.kind == TypeUseKind.REF:
            if self.config.import_policy == ImportPolicy.TRANSITIVE:
                self._gather_ref(module, use.ref, imports, visited)
            return

        children = use.children()
        if not children:
            imports.update(self.type_mapper.map_type_use(module, use).imports_needed)
        for child in children:
            self.gather_type(module, child, imports, visited)

    def _gather_ref(
        self, module: ModuleDef, ref: int, imports: Set[str], visited: Set[int]
    ) -> None:
        if ref in visited:
            return
        visited.add(ref)

        definition = module.type_at(ref)
        if isinstance(definition, ProductTypeDef):
            uses = [use for _, use in definition.elements]
        elif isinstance(definition, SumTypeDef):
            uses = [use for _, use in definition.variants]
        else:
            assert isinstance(definition, PlainEnumTypeDef)
            uses = []

        for use in uses:
            self.gather_type(module, use, imports, visited)


def resolve_type_imports(
    module: ModuleDef, use: AlgebraicTypeUse, config: Optional[GoTypeConfig] = None
) -> List[str]:
    """Convenience wrapper around ImportResolver.resolve_type_imports."""
    return ImportResolver(config).resolve_type_imports(module, use)


def resolve_definition_imports(
    module: ModuleDef,
    definition: AlgebraicTypeDef,
    config: Optional[GoTypeConfig] = None,
) -> List[str]:
    """Convenience wrapper around ImportResolver.resolve_definition_imports."""
    return ImportResolver(config).resolve_definition_imports(module, definition)
