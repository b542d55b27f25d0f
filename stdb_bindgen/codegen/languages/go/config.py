"""
Go-specific configuration.

Reads the Go backend settings out of a GeneratorConfig's ``custom`` dict.
"""

from dataclasses import dataclass

from ...core.config import GO_SDK_IMPORT, ConfigError, GeneratorConfig
from .types import GoTypeConfig, ImportPolicy


GENERATED_BANNER = (
    "// THIS FILE IS AUTOMATICALLY GENERATED BY SPACETIMEDB. EDITS TO THIS FILE",
    "// WILL NOT BE SAVED. MODIFY TABLES IN YOUR MODULE SOURCE CODE INSTEAD.",
)

CONTEXT_IMPORT = "context"
ERRORS_IMPORT = "errors"


@dataclass
class GoSettings:
    """Go backend settings."""

    package_name: str = "module_bindings"
    sdk_import: str = GO_SDK_IMPORT

    @property
    def sdk_package(self) -> str:
        """Package identifier the SDK import path is referenced by."""
        return self.sdk_import.rstrip("/").rsplit("/", 1)[-1]


def build_go_settings(config: GeneratorConfig) -> GoSettings:
    return GoSettings(
        package_name=config.package_name,
        sdk_import=config.custom.get("sdk_import", GO_SDK_IMPORT),
    )


def build_type_config(config: GeneratorConfig) -> GoTypeConfig:
    """Build GoTypeConfig from generator config."""
    custom = config.custom
    policy = custom.get("import_policy", ImportPolicy.TRANSITIVE.value)
    try:
        import_policy = ImportPolicy(policy)
    except ValueError:
        raise ConfigError(f"Invalid import_policy: {policy}")

    return GoTypeConfig(
        unknown_type=custom.get("unknown_type", "any"),
        import_policy=import_policy,
    )
