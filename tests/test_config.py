"""
Tests for configuration loading and merging.
"""

import json

import pytest

from stdb_bindgen.codegen.core.config import (
    GO_SDK_IMPORT,
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    load_config,
)
from stdb_bindgen.codegen.languages.go.config import (
    build_go_settings,
    build_type_config,
)
from stdb_bindgen.codegen.languages.go.types import ImportPolicy


@pytest.fixture
def manager():
    return ConfigManager()


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestConfigManager:
    """Merging defaults, files and overrides."""

    def test_go_defaults(self, manager):
        config = manager.get_config("go")
        assert config.package_name == "module_bindings"
        assert config.include_private is False
        assert config.custom == {
            "sdk_import": GO_SDK_IMPORT,
            "import_policy": "transitive",
            "unknown_type": "any",
        }

    def test_unknown_language_gets_base_defaults(self, manager):
        config = manager.get_config("cobol")
        assert config == GeneratorConfig()

    def test_file_then_overrides(self, manager, tmp_path):
        config_file = write_json(
            tmp_path / "bindgen.json",
            {"package_name": "from_file", "import_policy": "rendered"},
        )
        config = manager.get_config(
            "go", custom_config={"package_name": "from_cli"}, config_file=config_file
        )
        assert config.package_name == "from_cli"
        assert config.custom["import_policy"] == "rendered"
        assert config.custom["sdk_import"] == GO_SDK_IMPORT

    def test_nested_custom_is_merged(self, manager):
        config = manager.get_config("go", {"custom": {"unknown_type": "interface{}"}})
        assert config.custom["unknown_type"] == "interface{}"
        assert config.custom["import_policy"] == "transitive"

    def test_defaults_are_not_mutated(self, manager):
        manager.get_config("go", {"custom": {"unknown_type": "interface{}"}})
        assert manager.get_config("go").custom["unknown_type"] == "any"

    def test_missing_file(self, manager, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            manager.get_config("go", config_file=tmp_path / "nope.json")

    def test_non_json_suffix(self, manager, tmp_path):
        path = tmp_path / "bindgen.toml"
        path.write_text("x = 1", encoding="utf-8")
        with pytest.raises(ConfigError, match="must be JSON"):
            manager.get_config("go", config_file=path)

    def test_invalid_json(self, manager, tmp_path):
        path = tmp_path / "bindgen.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            manager.get_config("go", config_file=path)

    def test_non_object_json(self, manager, tmp_path):
        path = write_json(tmp_path / "bindgen.json", ["a"])
        with pytest.raises(ConfigError, match="JSON object"):
            manager.get_config("go", config_file=path)

    def test_validate_config(self, manager):
        assert manager.validate_config(manager.get_config("go"), "go") == []

        bad = manager.get_config(
            "go", {"package_name": "func", "import_policy": "everything"}
        )
        warnings = manager.validate_config(bad, "go")
        assert any("reserved" in w for w in warnings)
        assert any("import_policy" in w for w in warnings)

    def test_list_languages(self, manager):
        assert manager.list_languages() == ["go"]

    def test_load_config_helper(self):
        assert load_config("go", {"include_private": True}).include_private is True


class TestGoSettings:
    """Go backend settings derived from GeneratorConfig."""

    def test_sdk_package(self):
        settings = build_go_settings(load_config("go"))
        assert settings.sdk_import == GO_SDK_IMPORT
        assert settings.sdk_package == "connection"

    def test_type_config(self):
        type_config = build_type_config(
            load_config("go", {"import_policy": "rendered", "unknown_type": "interface{}"})
        )
        assert type_config.import_policy == ImportPolicy.RENDERED
        assert type_config.unknown_type == "interface{}"

    def test_invalid_import_policy(self):
        with pytest.raises(ConfigError, match="import_policy"):
            build_type_config(load_config("go", {"import_policy": "everything"}))
