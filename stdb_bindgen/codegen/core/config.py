"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass, field, fields


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GeneratorConfig:
    """Base configuration for code generators."""

    # Output settings
    package_name: str = "module_bindings"

    # Emit private tables, reducers and procedures too
    include_private: bool = False

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)


GO_SDK_IMPORT = "github.com/clockworklabs/spacetimedb/sdks/go/connection"


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported languages."""
        self._configs["go"] = {
            "package_name": "module_bindings",
            "include_private": False,
            "custom": {
                "sdk_import": GO_SDK_IMPORT,
                "import_policy": "transitive",
                "unknown_type": "any",
            },
        }

    def get_config(
        self,
        language: str,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Later sources win: defaults, then the file, then custom overrides.

        Args:
            language: Target language name
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration for the language
        """
        base_config = self._copy_defaults(language)

        if config_file:
            self._merge(base_config, self._load_config_file(config_file))

        if custom_config:
            self._merge(base_config, custom_config)

        return self._dict_to_config(base_config)

    def _copy_defaults(self, language: str) -> Dict[str, Any]:
        defaults = self._configs.get(language.lower(), {})
        copied = dict(defaults)
        copied["custom"] = dict(defaults.get("custom", {}))
        return copied

    @staticmethod
    def _merge(base: Dict[str, Any], overrides: Dict[str, Any]):
        """Merge overrides into base, merging nested ``custom`` dicts."""
        for key, value in overrides.items():
            if key == "custom" and isinstance(value, dict):
                base.setdefault("custom", {}).update(value)
            else:
                base[key] = value

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {str(e)}")
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {str(e)}")

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        # Unknown keys are backend settings
        if custom_args:
            existing_custom = dict(config_args.get("custom", {}))
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GeneratorConfig(**config_args)

    def list_languages(self) -> List[str]:
        """Get list of languages with default configuration."""
        return list(self._configs.keys())

    def validate_config(self, config: GeneratorConfig, language: str) -> List[str]:
        """
        Validate configuration for a language.

        Returns:
            List of validation warnings/errors
        """
        warnings = []

        if language == "go":
            from ..languages.go.naming import validate_go_package_name

            warnings.extend(validate_go_package_name(config.package_name))

            policy = config.custom.get("import_policy", "transitive")
            if policy not in {"transitive", "rendered"}:
                warnings.append(f"Invalid import_policy: {policy}")

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: str = "go",
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language name
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration for the language
    """
    manager = get_config_manager()
    return manager.get_config(language, custom_config, config_file)
