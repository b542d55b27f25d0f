"""
Tests for Go import resolution.
"""

import pytest

from stdb_bindgen.codegen.core.schema import (
    AlgebraicTypeUse as T,
    PrimitiveType,
    ProductTypeDef,
    SumTypeDef,
    TypeUseKind,
)
from stdb_bindgen.codegen.languages.go.imports import (
    ImportResolver,
    resolve_definition_imports,
    resolve_type_imports,
)
from stdb_bindgen.codegen.languages.go.types import GoTypeConfig, GoTypeMapper, ImportPolicy

TIMESTAMP = T.scalar(TypeUseKind.TIMESTAMP)
DURATION = T.scalar(TypeUseKind.TIME_DURATION)
I256 = T.of_primitive(PrimitiveType.I256)


@pytest.fixture
def rendered_resolver():
    return ImportResolver(GoTypeConfig(import_policy=ImportPolicy.RENDERED))


class TestTypeImports:
    """Imports for individual type-uses."""

    def test_no_imports(self, sample_module):
        assert resolve_type_imports(sample_module, T.scalar(TypeUseKind.STRING)) == []

    def test_nested_composites(self, sample_module):
        use = T.array(T.result(TIMESTAMP, T.option(I256)))
        assert resolve_type_imports(sample_module, use) == ["math/big", "time"]

    def test_sorted_and_deduplicated(self, sample_module):
        use = T.result(T.array(DURATION), T.option(TIMESTAMP))
        assert resolve_type_imports(sample_module, use) == ["time"]

    def test_ref_followed_transitively(self, sample_module):
        assert resolve_type_imports(sample_module, T.type_ref(0)) == ["math/big", "time"]

    def test_ref_not_followed_when_rendered(self, sample_module, rendered_resolver):
        assert rendered_resolver.resolve_type_imports(sample_module, T.type_ref(0)) == []

    @pytest.mark.parametrize(
        "use",
        [
            TIMESTAMP,
            DURATION,
            I256,
            T.of_primitive(PrimitiveType.U8),
            T.scalar(TypeUseKind.UUID),
        ],
    )
    def test_leaf_imports_match_mapped_type(self, sample_module, use):
        mapped = GoTypeMapper().map_type_use(sample_module, use)
        assert resolve_type_imports(sample_module, use) == sorted(mapped.imports_needed)

    def test_configured_import_paths(self, sample_module):
        config = GoTypeConfig(
            big_int_type="*uint256.Int", big_int_import="github.com/holiman/uint256"
        )
        mapper = GoTypeMapper(config)
        resolver = ImportResolver(config, mapper)

        assert resolver.type_mapper is mapper
        assert resolver.resolve_type_imports(sample_module, T.option(I256)) == [
            "github.com/holiman/uint256"
        ]


class TestDefinitionImports:
    """Imports for whole type definition files."""

    def test_product(self, sample_module):
        definition = sample_module.type_at(0)
        assert resolve_definition_imports(sample_module, definition) == [
            "math/big",
            "time",
        ]

    def test_product_repeated_field_types(self, sample_module):
        definition = ProductTypeDef((("a", TIMESTAMP), ("b", TIMESTAMP), ("c", DURATION)))
        assert resolve_definition_imports(sample_module, definition) == ["time"]

    def test_plain_enum(self, sample_module):
        assert resolve_definition_imports(sample_module, sample_module.type_at(2)) == []

    def test_empty_product(self, sample_module):
        assert resolve_definition_imports(sample_module, sample_module.type_at(3)) == []

    def test_sum_payloads_transitive(self, sample_module):
        definition = SumTypeDef((("At", TIMESTAMP), ("Never", T.scalar(TypeUseKind.UNIT))))
        assert resolve_definition_imports(sample_module, definition) == ["time"]

    def test_sum_payloads_rendered(self, sample_module, rendered_resolver):
        definition = SumTypeDef((("At", TIMESTAMP),))
        assert rendered_resolver.resolve_definition_imports(sample_module, definition) == []


class TestCycles:
    """Resolution terminates on recursive type graphs."""

    def test_self_reference(self, sample_module):
        assert resolve_definition_imports(sample_module, sample_module.type_at(4)) == []
        assert resolve_type_imports(sample_module, T.type_ref(4)) == []

    def test_mutual_reference(self, sample_module):
        ping = sample_module.type_at(5)
        assert resolve_definition_imports(sample_module, ping) == ["time"]
        assert resolve_type_imports(sample_module, T.option(T.type_ref(6))) == ["time"]

    def test_mutual_reference_rendered(self, sample_module, rendered_resolver):
        ping = sample_module.type_at(5)
        pong = sample_module.type_at(6)
        assert rendered_resolver.resolve_definition_imports(sample_module, ping) == []
        assert rendered_resolver.resolve_definition_imports(sample_module, pong) == [
            "time"
        ]

    def test_accumulator_is_explicit(self, sample_module):
        resolver = ImportResolver()
        imports = {"context"}
        visited = set()
        resolver.gather_type(sample_module, T.type_ref(5), imports, visited)
        assert imports == {"context", "time"}
        assert visited == {5, 6}
