"""
SpacetimeDB Client Binding Generation Module

Generates client bindings in various languages from a module schema.
"""

from .registry import GeneratorRegistry, get_generator, list_supported_languages
from .core.generator import CodeGenerator, GenerationResult, OutputFile, generate_code
from .core.schema import ModuleDef, SchemaError, module_from_dict
from .core.config import GeneratorConfig, ConfigManager, load_config


# Convenience functions
def generate_bindings(module, language="go", config=None):
    """
    Generate client bindings for a module.

    Args:
        module: ModuleDef, or a decoded module schema dict
        language: Target language name
        config: Generator configuration (GeneratorConfig, dict or path)

    Returns:
        GenerationResult with the generated files
    """
    if isinstance(module, dict):
        module = module_from_dict(module)

    generator = get_generator(language, config)
    return generate_code(generator, module)


# Export main interfaces
__all__ = [
    "GeneratorRegistry",
    "CodeGenerator",
    "GenerationResult",
    "OutputFile",
    "ModuleDef",
    "SchemaError",
    "GeneratorConfig",
    "ConfigManager",
    "generate_bindings",
    "generate_code",
    "get_generator",
    "list_supported_languages",
    "load_config",
    "module_from_dict",
]
