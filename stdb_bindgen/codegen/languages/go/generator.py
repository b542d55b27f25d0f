"""
Go code generator implementation.

Generates Go client bindings for a module: one file per table, exported
type, reducer and procedure, plus the shared client and schema files.
"""

import json
from typing import Any, Dict, List, Optional, Sequence
from pathlib import Path

from ...core.config import GeneratorConfig, load_config
from ...core.generator import CodeGenerator, OutputFile
from ...core.naming import to_pascal_case, to_snake_case
from ...core.schema import (
    ModuleDef,
    PlainEnumTypeDef,
    ProcedureDef,
    ProductTypeDef,
    ReducerDef,
    SumTypeDef,
    TableDef,
    TypeDef,
)
from .config import (
    CONTEXT_IMPORT,
    ERRORS_IMPORT,
    GENERATED_BANNER,
    build_go_settings,
    build_type_config,
)
from .imports import ImportResolver
from .naming import call_method_name, go_exported_field_name, table_type_name, type_def_name
from .types import GoTypeMapper


def go_quote(value: Any) -> str:
    """Render a value as a Go interpreted string literal."""
    return json.dumps(str(value), ensure_ascii=False)


class GoGenerator(CodeGenerator):
    """Code generator for Go client bindings."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize Go generator with configuration."""
        super().__init__(config)
        self.template_engine.add_filter("go_quote", go_quote)

        self.settings = build_go_settings(self.config)
        self.type_config = build_type_config(self.config)
        self.type_mapper = GoTypeMapper(self.type_config)
        self.import_resolver = ImportResolver(self.type_config, self.type_mapper)

    def get_template_directory(self) -> Optional[Path]:
        """Return the Go templates directory."""
        return Path(__file__).parent / "templates"

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "go"

    @property
    def file_extension(self) -> str:
        """Return Go file extension."""
        return ".go"

    # Output assembly

    def render_file(
        self,
        filename: str,
        template_name: str,
        context: Dict[str, Any],
        imports: Sequence[str] = (),
    ) -> OutputFile:
        """Render a template body behind the generated-file header."""
        header = self.render_header(imports)
        body = self.render_template(template_name, context)
        return OutputFile(filename=filename, code=header + body)

    def render_header(self, imports: Sequence[str] = ()) -> str:
        """Render the banner, package clause and a sorted import block."""
        return self.render_template(
            "header.go.j2",
            {
                "banner": GENERATED_BANNER,
                "package_name": self.settings.package_name,
                "imports": sorted(set(imports)),
            },
        )

    def _filename(self, prefix: str, stem: str) -> str:
        return f"{prefix}_{stem}{self.file_extension}"

    # Entity operations

    def generate_table_file(self, module: ModuleDef, table: TableDef) -> OutputFile:
        """Generate a zero-field marker type and row alias for a table."""
        context = {
            "table_type": table_type_name(table.accessor_name),
            "row_type": self.type_mapper.render_ref(module, table.product_type_ref),
            "wire_name": table.name,
            "accessor_name": table.accessor_name,
        }
        return self.render_file(
            self._filename("tables", to_snake_case(table.accessor_name)),
            "table.go.j2",
            context,
        )

    def generate_type_files(self, module: ModuleDef, type_def: TypeDef) -> List[OutputFile]:
        """Generate the single file holding one exported type."""
        type_name = type_def_name(type_def)
        definition = module.type_at(type_def.ty)
        imports = self.import_resolver.resolve_definition_imports(module, definition)

        if isinstance(definition, ProductTypeDef):
            template_name = "product.go.j2"
            context = self._product_context(module, type_name, definition)
        elif isinstance(definition, SumTypeDef):
            template_name = "sum.go.j2"
            context = self._sum_context(type_name, definition)
        elif isinstance(definition, PlainEnumTypeDef):
            template_name = "plain_enum.go.j2"
            context = self._plain_enum_context(type_name, definition)
        else:
            raise TypeError(f"Unknown type definition: {definition!r}")

        filename = self._filename("types", "_".join(type_def.name_segments))
        return [self.render_file(filename, template_name, context, imports)]

    def _product_context(
        self, module: ModuleDef, type_name: str, product: ProductTypeDef
    ) -> Dict[str, Any]:
        fields = [
            {
                "name": go_exported_field_name(field_name, idx),
                "type": self.type_mapper.render(module, field_type),
                "wire_name": field_name,
            }
            for idx, (field_name, field_type) in enumerate(product.elements)
        ]
        return {"type_name": type_name, "fields": fields}

    def _sum_context(self, type_name: str, sum_def: SumTypeDef) -> Dict[str, Any]:
        tags = [
            {
                "const_name": f"{type_name}Tag{to_pascal_case(variant_name)}",
                "wire_name": variant_name,
            }
            for variant_name, _ in sum_def.variants
        ]
        return {
            "type_name": type_name,
            "tags": tags,
            "unknown_type": self.type_config.unknown_type,
        }

    def _plain_enum_context(
        self, type_name: str, plain_enum: PlainEnumTypeDef
    ) -> Dict[str, Any]:
        variants = [
            f"{type_name}{to_pascal_case(variant)}" for variant in plain_enum.variants
        ]
        return {"type_name": type_name, "variants": variants}

    def generate_reducer_file(self, module: ModuleDef, reducer: ReducerDef) -> OutputFile:
        """Generate the typed forwarding method for a reducer."""
        return self._render_call_file(
            prefix="reducers",
            wire_name=reducer.name,
            accessor_name=reducer.accessor_name,
            callback_type="ReducerResultCallback",
            dispatch_method="CallReducer",
        )

    def generate_procedure_file(
        self, module: ModuleDef, procedure: ProcedureDef
    ) -> OutputFile:
        """Generate the typed forwarding method for a procedure."""
        return self._render_call_file(
            prefix="procedures",
            wire_name=procedure.name,
            accessor_name=procedure.accessor_name,
            callback_type="ProcedureResultCallback",
            dispatch_method="CallProcedure",
        )

    def _render_call_file(
        self,
        prefix: str,
        wire_name: str,
        accessor_name: str,
        callback_type: str,
        dispatch_method: str,
    ) -> OutputFile:
        context = {
            "method_name": call_method_name(accessor_name),
            "wire_name": wire_name,
            "sdk_package": self.settings.sdk_package,
            "callback_type": callback_type,
            "dispatch_method": dispatch_method,
        }
        return self.render_file(
            self._filename(prefix, to_snake_case(accessor_name)),
            "call.go.j2",
            context,
            imports=[CONTEXT_IMPORT, self.settings.sdk_import],
        )

    def generate_global_files(self, module: ModuleDef) -> List[OutputFile]:
        """Generate client.go and schema.go."""
        include_private = self.config.include_private

        client = self.render_file(
            f"client{self.file_extension}",
            "client.go.j2",
            {
                "result_type": self.type_config.result_type,
                "schedule_at_type": self.type_config.schedule_at_type,
                "sdk_package": self.settings.sdk_package,
            },
            imports=[CONTEXT_IMPORT, ERRORS_IMPORT, self.settings.sdk_import],
        )

        schema = self.render_file(
            f"schema{self.file_extension}",
            "schema.go.j2",
            {
                "table_accessors": [
                    t.accessor_name for t in module.iter_tables(include_private)
                ],
                "reducer_names": [
                    r.name for r in module.iter_reducers(include_private)
                ],
                "procedure_names": [
                    p.name for p in module.iter_procedures(include_private)
                ],
            },
        )

        return [client, schema]

    def validate_module(self, module: ModuleDef) -> List[str]:
        """Validate a module for Go generation."""
        warnings = super().validate_module(module)

        for type_def in module.types:
            definition = module.type_at(type_def.ty)
            if not isinstance(definition, ProductTypeDef):
                continue
            for idx, (field_name, _) in enumerate(definition.elements):
                go_name = go_exported_field_name(field_name, idx)
                if go_name != to_pascal_case(field_name):
                    warnings.append(
                        f"Field {type_def.scoped_name}.{field_name or idx} renamed to "
                        f"{go_name} to form a valid Go identifier"
                    )

        return warnings


def create_go_generator(config: Optional[Dict[str, Any]] = None) -> GoGenerator:
    """Create a Go generator from a dict of overrides on the Go defaults."""
    return GoGenerator(load_config("go", custom_config=config))
