"""
Go code generator module.

Generates Go client bindings from a module schema, and drives the Go
toolchain (WASI builds and gofmt).
"""

from .generator import GoGenerator, create_go_generator, go_quote
from .imports import ImportResolver, resolve_definition_imports, resolve_type_imports
from .naming import create_go_sanitizer, type_def_name
from .toolchain import ToolchainError, build_go, gofmt, has_go, has_gofmt
from .types import GoType, GoTypeConfig, GoTypeMapper, ImportPolicy

__all__ = [
    "GoGenerator",
    "create_go_generator",
    "go_quote",
    # Type system
    "GoType",
    "GoTypeConfig",
    "GoTypeMapper",
    "ImportPolicy",
    # Imports
    "ImportResolver",
    "resolve_type_imports",
    "resolve_definition_imports",
    # Naming
    "create_go_sanitizer",
    "type_def_name",
    # Toolchain
    "ToolchainError",
    "build_go",
    "gofmt",
    "has_go",
    "has_gofmt",
]
