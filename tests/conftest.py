"""
Pytest configuration and shared fixtures for stdb_bindgen tests.

Provides a small module schema, in both its JSON form and decoded form,
that exercises every entity category plus self- and mutually-recursive
types.
"""

import copy
import json

import pytest

from stdb_bindgen.codegen.core.config import GO_SDK_IMPORT, load_config
from stdb_bindgen.codegen.core.schema import module_from_dict
from stdb_bindgen.codegen.languages.go import GoGenerator


BANNER = (
    "// THIS FILE IS AUTOMATICALLY GENERATED BY SPACETIMEDB. EDITS TO THIS FILE\n"
    "// WILL NOT BE SAVED. MODIFY TABLES IN YOUR MODULE SOURCE CODE INSTEAD.\n"
)

SAMPLE_SCHEMA = {
    "typespace": [
        # 0: User
        {
            "product": {
                "elements": [
                    {"name": "id", "type": "u64"},
                    {"name": "name", "type": "string"},
                    {"name": "created", "type": "timestamp"},
                    {"name": "balance", "type": "i128"},
                    {"name": "avatar", "type": {"option": {"array": "u8"}}},
                ]
            }
        },
        # 1: Status
        {
            "sum": {
                "variants": [
                    {"name": "Active", "type": "unit"},
                    {"name": "Done", "type": "unit"},
                ]
            }
        },
        # 2: Color
        {"plain_enum": {"variants": ["Red", "Green", "Blue"]}},
        # 3: Empty
        {"product": {"elements": []}},
        # 4: Node, refers to itself
        {
            "product": {
                "elements": [
                    {"name": "value", "type": "i32"},
                    {"name": "next", "type": {"option": {"ref": 4}}},
                ]
            }
        },
        # 5: Ping and 6: Pong refer to each other
        {
            "product": {
                "elements": [{"name": "pong", "type": {"option": {"ref": 6}}}]
            }
        },
        {
            "product": {
                "elements": [
                    {"name": "ping", "type": {"option": {"ref": 5}}},
                    {"name": "sent_at", "type": "timestamp"},
                ]
            }
        },
    ],
    "types": [
        {"name": "User", "ty": 0},
        {"name": "Status", "ty": 1},
        {"name": "Color", "ty": 2},
        {"name": "Empty", "ty": 3},
        {"name": "Node", "ty": 4},
        {"name": ["net", "Ping"], "ty": 5},
        {"name": "net::Pong", "ty": 6},
    ],
    "tables": [
        {"name": "user", "product_type_ref": 0},
        {"name": "audit_log", "product_type_ref": 3, "public": False},
    ],
    "reducers": [
        {"name": "create-user"},
        {"name": "init", "lifecycle": "init"},
        {"name": "admin_reset", "public": False},
    ],
    "procedures": [{"name": "get_stats"}],
}


@pytest.fixture
def sample_schema_dict():
    """A fresh copy of the sample schema in JSON form."""
    return copy.deepcopy(SAMPLE_SCHEMA)


@pytest.fixture
def sample_module(sample_schema_dict):
    """The sample schema decoded into a ModuleDef."""
    return module_from_dict(sample_schema_dict)


@pytest.fixture
def go_generator():
    """A Go generator with default configuration."""
    return GoGenerator(load_config("go"))


@pytest.fixture
def schema_file(tmp_path, sample_schema_dict):
    """The sample schema written to a temporary JSON file."""
    path = tmp_path / "module.json"
    path.write_text(json.dumps(sample_schema_dict), encoding="utf-8")
    return path


@pytest.fixture
def banner():
    return BANNER


@pytest.fixture
def sdk_import():
    return GO_SDK_IMPORT
