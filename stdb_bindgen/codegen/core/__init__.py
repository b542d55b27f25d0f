"""
Core code generation components.

Provides base classes and utilities used by all language generators.
"""

from .generator import (
    CodeGenerator,
    GeneratorError,
    GenerationResult,
    OutputFile,
    generate_code,
)
from .schema import (
    AlgebraicTypeUse,
    Lifecycle,
    ModuleDef,
    PlainEnumTypeDef,
    PrimitiveType,
    ProcedureDef,
    ProductTypeDef,
    ReducerDef,
    SchemaError,
    SumTypeDef,
    TableDef,
    TypeDef,
    TypeUseKind,
    Typespace,
    module_from_dict,
)
from .naming import NameSanitizer, NamingCase
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "OutputFile",
    "generate_code",
    # Schema model
    "AlgebraicTypeUse",
    "Lifecycle",
    "ModuleDef",
    "PlainEnumTypeDef",
    "PrimitiveType",
    "ProcedureDef",
    "ProductTypeDef",
    "ReducerDef",
    "SchemaError",
    "SumTypeDef",
    "TableDef",
    "TypeDef",
    "TypeUseKind",
    "Typespace",
    "module_from_dict",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
