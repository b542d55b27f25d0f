"""
End-to-end tests for the command-line interface.
"""

import json

import pytest

from stdb_bindgen import cli
from stdb_bindgen.codegen.languages.go.toolchain import ToolchainError


class TestGenerateCommand:
    def test_writes_bindings(self, schema_file, tmp_path):
        out_dir = tmp_path / "module_bindings"
        exit_code = cli.main(
            ["generate", "--schema", str(schema_file), "--out-dir", str(out_dir)]
        )

        assert exit_code == 0
        written = sorted(p.name for p in out_dir.iterdir())
        assert len(written) == 12
        assert "client.go" in written
        assert "reducers_create_user.go" in written
        assert "reducers_init.go" not in written

        reducer = (out_dir / "reducers_create_user.go").read_text(encoding="utf-8")
        assert "func (c *Client) CallCreateUser(" in reducer

    def test_package_name_and_private(self, schema_file, tmp_path):
        out_dir = tmp_path / "out"
        exit_code = cli.main(
            [
                "generate",
                "--schema",
                str(schema_file),
                "--out-dir",
                str(out_dir),
                "--package-name",
                "bindings",
                "--include-private",
            ]
        )

        assert exit_code == 0
        assert (out_dir / "tables_audit_log.go").exists()
        assert "\npackage bindings\n" in (out_dir / "schema.go").read_text(
            encoding="utf-8"
        )

    def test_config_file(self, schema_file, tmp_path):
        config_file = tmp_path / "bindgen.json"
        config_file.write_text(json.dumps({"package_name": "configured"}), encoding="utf-8")
        out_dir = tmp_path / "out"

        exit_code = cli.main(
            [
                "generate",
                "--schema",
                str(schema_file),
                "--out-dir",
                str(out_dir),
                "--config",
                str(config_file),
            ]
        )

        assert exit_code == 0
        assert "\npackage configured\n" in (out_dir / "client.go").read_text(
            encoding="utf-8"
        )

    def test_dry_run_writes_nothing(self, schema_file, tmp_path, capsys):
        out_dir = tmp_path / "out"
        exit_code = cli.main(
            [
                "generate",
                "--schema",
                str(schema_file),
                "--out-dir",
                str(out_dir),
                "--dry-run",
            ]
        )

        assert exit_code == 0
        assert not out_dir.exists()
        assert "schema.go" in capsys.readouterr().out

    def test_format_runs_gofmt(self, schema_file, tmp_path, monkeypatch):
        calls = []

        def fake_gofmt(project_dir, files):
            calls.append((project_dir, list(files)))
            return list(files)

        monkeypatch.setattr(cli, "gofmt", fake_gofmt)
        out_dir = tmp_path / "out"
        exit_code = cli.main(
            [
                "generate",
                "--schema",
                str(schema_file),
                "--out-dir",
                str(out_dir),
                "--format",
            ]
        )

        assert exit_code == 0
        project_dir, files = calls[0]
        assert project_dir == out_dir
        assert len(files) == 12

    def test_golang_alias(self, schema_file, tmp_path):
        out_dir = tmp_path / "out"
        exit_code = cli.main(
            [
                "generate",
                "--schema",
                str(schema_file),
                "--out-dir",
                str(out_dir),
                "--lang",
                "golang",
            ]
        )
        assert exit_code == 0
        assert (out_dir / "client.go").exists()

    def test_unsupported_language(self, schema_file, tmp_path):
        exit_code = cli.main(
            ["generate", "--schema", str(schema_file), "--lang", "cobol"]
        )
        assert exit_code == 1

    def test_missing_schema_file(self, tmp_path, capsys):
        exit_code = cli.main(
            ["generate", "--schema", str(tmp_path / "missing.json")]
        )
        assert exit_code == 1
        assert "File not found" in capsys.readouterr().out

    def test_inconsistent_schema(self, tmp_path):
        schema = tmp_path / "module.json"
        schema.write_text(
            json.dumps(
                {
                    "typespace": [{"product": {"elements": []}}],
                    "tables": [{"name": "t", "product_type_ref": 0}],
                }
            ),
            encoding="utf-8",
        )
        out_dir = tmp_path / "out"

        exit_code = cli.main(
            ["generate", "--schema", str(schema), "--out-dir", str(out_dir)]
        )

        assert exit_code == 1
        assert not out_dir.exists()

    @pytest.mark.parametrize(
        "document",
        [
            {"typespace": [{"product": []}]},
            {"typespace": [{"plain_enum": ["Red"]}]},
            {"types": [{"name": 5, "ty": 0}]},
        ],
    )
    def test_malformed_schema(self, document, tmp_path, capsys):
        schema = tmp_path / "module.json"
        schema.write_text(json.dumps(document), encoding="utf-8")
        out_dir = tmp_path / "out"

        exit_code = cli.main(
            ["generate", "--schema", str(schema), "--out-dir", str(out_dir)]
        )

        assert exit_code == 1
        assert not out_dir.exists()
        assert "Invalid module schema" in capsys.readouterr().out

    def test_out_dir_is_a_file(self, schema_file, tmp_path, capsys):
        out_dir = tmp_path / "taken"
        out_dir.write_text("not a directory", encoding="utf-8")

        exit_code = cli.main(
            ["generate", "--schema", str(schema_file), "--out-dir", str(out_dir)]
        )

        assert exit_code == 1
        assert "Failed to write bindings" in capsys.readouterr().out

    def test_schema_source_is_required(self):
        with pytest.raises(SystemExit):
            cli.main(["generate"])

    def test_log_file(self, schema_file, tmp_path):
        log_file = tmp_path / "bindgen.log"
        exit_code = cli.main(
            [
                "generate",
                "--schema",
                str(schema_file),
                "--out-dir",
                str(tmp_path / "out"),
                "--log-file",
                str(log_file),
            ]
        )

        assert exit_code == 0
        cli.setup_logging()
        assert "Wrote 12 file(s)" in log_file.read_text(encoding="utf-8")


class TestBuildCommand:
    def test_build(self, tmp_path, monkeypatch):
        calls = []

        def fake_build(project_path, debug=False):
            calls.append((project_path, debug))
            return project_path / "build" / "module.wasm"

        monkeypatch.setattr(cli, "build_go", fake_build)
        exit_code = cli.main(["build", "--project-path", str(tmp_path), "--debug"])

        assert exit_code == 0
        assert calls == [(tmp_path, True)]

    def test_toolchain_error(self, tmp_path, monkeypatch, capsys):
        def fake_build(project_path, debug=False):
            raise ToolchainError("Go compiler not found in PATH.", "Please install Go.")

        monkeypatch.setattr(cli, "build_go", fake_build)
        exit_code = cli.main(["build", "--project-path", str(tmp_path)])

        assert exit_code == 1
        assert "Please install Go." in capsys.readouterr().out

    def test_missing_project_dir(self, tmp_path):
        exit_code = cli.main(["build", "--project-path", str(tmp_path / "nope")])
        assert exit_code == 1


class TestOtherCommands:
    def test_languages(self, capsys):
        assert cli.main(["languages"]) == 0
        output = capsys.readouterr().out
        assert "golang" in output
        assert "GoGenerator" in output

    def test_no_command_prints_help(self, capsys):
        assert cli.main([]) == 1
        assert "stdb-bindgen" in capsys.readouterr().out
