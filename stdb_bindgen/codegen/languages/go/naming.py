"""
Go-specific naming utilities and sanitization.

Handles Go reserved words and the naming conventions used by the
generated bindings.
"""

from ...core.naming import NameSanitizer, NamingCase, collect_case, to_pascal_case
from ...core.schema import TypeDef


# Go reserved words
GO_RESERVED_WORDS = {
    "break",
    "case",
    "chan",
    "const",
    "continue",
    "default",
    "defer",
    "else",
    "fallthrough",
    "for",
    "func",
    "go",
    "goto",
    "if",
    "import",
    "interface",
    "map",
    "package",
    "range",
    "return",
    "select",
    "struct",
    "switch",
    "type",
    "var",
}


def create_go_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for exported Go identifiers."""
    return NameSanitizer(GO_RESERVED_WORDS, fallback_prefix="Field", suffix_on_conflict="_")


_SANITIZER = create_go_sanitizer()


def go_exported_field_name(field_name: str, index: int) -> str:
    """Sanitize a product field name into an exported Go struct field."""
    return _SANITIZER.sanitize_name(field_name, index, NamingCase.PASCAL_CASE)


def type_def_name(type_def: TypeDef) -> str:
    """Go type name for an exported type definition."""
    name = collect_case(type_def.name_segments, NamingCase.PASCAL_CASE)
    return _SANITIZER.sanitize_name(name, type_def.ty, NamingCase.PASCAL_CASE)


def table_type_name(accessor_name: str) -> str:
    return f"{_SANITIZER.ensure_letter_start(to_pascal_case(accessor_name))}Table"


def call_method_name(accessor_name: str) -> str:
    """Client method name for a reducer or procedure."""
    return f"Call{to_pascal_case(accessor_name)}"


def validate_go_package_name(name: str) -> list[str]:
    """
    Validate Go package name according to Go naming rules.

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not name:
        errors.append("Package name cannot be empty")
        return errors

    # Check basic identifier rules
    if not name.isidentifier() or not name.isascii():
        errors.append(f"'{name}' is not a valid Go identifier")

    if name[0].isupper():
        errors.append("Package names should be lowercase")

    if name in GO_RESERVED_WORDS:
        errors.append(f"'{name}' is a Go reserved word")

    return errors
