"""
Tests for the Jinja2 template engine wrapper.
"""

import pytest

from stdb_bindgen.codegen.core.templates import (
    TemplateEngine,
    TemplateError,
    create_template_engine,
)


@pytest.fixture
def template_dir(tmp_path):
    templates = {
        "greet.j2": "hello {{ name | pascal_case }}\n",
        "missing_var.j2": "{{ missing }}",
        "raw.j2": "{{ v }}",
        "loop.j2": "{% for x in xs %}\n\t{{ x | snake_case }}\n{% endfor %}\n",
        "shout.j2": "{{ 'go' | shout }}",
    }
    for name, source in templates.items():
        (tmp_path / name).write_text(source, encoding="utf-8")
    return tmp_path


@pytest.fixture
def engine(template_dir):
    return create_template_engine(template_dir)


class TestTemplateEngine:
    def test_renders_from_directory(self, engine):
        assert engine.template_exists("greet.j2")
        assert engine.render_template("greet.j2", {"name": "create-user"}) == (
            "hello CreateUser\n"
        )

    def test_missing_template(self, engine):
        assert not engine.template_exists("nope.j2")
        with pytest.raises(TemplateError, match="nope.j2"):
            engine.render_template("nope.j2", {})

    def test_undefined_variable_is_an_error(self, engine):
        with pytest.raises(TemplateError, match="missing_var.j2"):
            engine.render_template("missing_var.j2", {})

    def test_values_are_not_escaped(self, engine):
        assert engine.render_template("raw.j2", {"v": '<a & "b">'}) == '<a & "b">'

    def test_block_whitespace_is_trimmed(self, engine):
        assert engine.render_template("loop.j2", {"xs": ["AB", "cD"]}) == "\tab\n\tc_d\n"

    def test_custom_filter(self, engine):
        engine.add_filter("shout", str.upper)
        assert engine.render_template("shout.j2", {}) == "GO"

    def test_missing_directory_has_no_templates(self, tmp_path):
        engine = TemplateEngine(tmp_path / "absent")
        assert not engine.template_exists("greet.j2")
        with pytest.raises(TemplateError):
            engine.render_template("greet.j2", {})
