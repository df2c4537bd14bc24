"""Tests for apidiff.cli.main using click's CliRunner."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from apidiff.cli.main import cli


def _model(name: str, *, extra_method: bool = False, duplicate: bool = False) -> dict[str, object]:
    base_methods: list[dict[str, object]] = [{"name": "m", "return_type": "int"}]
    if extra_method:
        base_methods.append({"name": "n"})
    types: list[dict[str, object]] = [
        {"name": "Base", "methods": base_methods},
        {"name": "Derived", "extends": "p.Base"},
    ]
    if duplicate:
        types.append({"name": "Base"})
    return {"name": name, "packages": [{"name": "p", "types": types}]}


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def old_file(tmp_path: Path) -> Path:
    path = tmp_path / "old.json"
    path.write_text(json.dumps(_model("lib-1.0")), encoding="utf-8")
    return path


@pytest.fixture()
def new_file(tmp_path: Path) -> Path:
    path = tmp_path / "new.yaml"
    path.write_text(yaml.safe_dump(_model("lib-2.0", extra_method=True)), encoding="utf-8")
    return path


# ===========================================================================
# version
# ===========================================================================


class TestVersion:
    def test_version_command(self, runner: CliRunner, expected_version: str) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert expected_version in result.output

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("diff", "resolve", "validate", "version"):
            assert command in result.output


# ===========================================================================
# validate
# ===========================================================================


class TestValidate:
    def test_valid_file(self, runner: CliRunner, old_file: Path) -> None:
        result = runner.invoke(cli, ["validate", str(old_file)])
        assert result.exit_code == 0
        assert "no issues found" in result.output

    def test_invalid_file(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text(json.dumps(_model("broken", duplicate=True)), encoding="utf-8")
        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 1
        assert "APD002" in result.output

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["validate", str(tmp_path / "nope.json")])
        assert result.exit_code == 1

    def test_syntax_error(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 1

    def test_model_missing_name(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "incomplete.json"
        path.write_text(json.dumps({"packages": []}), encoding="utf-8")
        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 1

    def test_unnamed_method_reports_location(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "unnamed.json"
        model = {"name": "s", "packages": [{"name": "p", "types": [{"name": "A", "methods": [{}]}]}]}
        path.write_text(json.dumps(model), encoding="utf-8")
        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 1
        assert "p.A#<method" in result.output

    def test_untyped_field_is_an_error(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "untyped.json"
        model = {"name": "s", "packages": [{"name": "p", "types": [{"name": "A", "fields": [{"name": "count"}]}]}]}
        path.write_text(json.dumps(model), encoding="utf-8")
        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 1
        assert "APD004" in result.output


# ===========================================================================
# resolve
# ===========================================================================


class TestResolve:
    def test_resolve_to_file(self, runner: CliRunner, old_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "resolved.json"
        result = runner.invoke(cli, ["resolve", str(old_file), "-o", str(out)])
        assert result.exit_code == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        derived = data["packages"][0]["types"][1]
        assert derived["methods"][0]["inherited_from"] == "p.Base"

    def test_resolve_yaml(self, runner: CliRunner, old_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "resolved.yaml"
        result = runner.invoke(cli, ["resolve", str(old_file), "--format", "yaml", "-o", str(out)])
        assert result.exit_code == 0
        assert yaml.safe_load(out.read_text(encoding="utf-8"))["name"] == "lib-1.0"

    def test_cycle_exits(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "cycle.json"
        model = {
            "name": "cycle",
            "packages": [
                {"name": "p", "types": [{"name": "A", "extends": "p.B"}, {"name": "B", "extends": "p.A"}]}
            ],
        }
        path.write_text(json.dumps(model), encoding="utf-8")
        result = runner.invoke(cli, ["resolve", str(path)])
        assert result.exit_code == 1


# ===========================================================================
# diff
# ===========================================================================


class TestDiff:
    def test_table_output(self, runner: CliRunner, old_file: Path, new_file: Path) -> None:
        result = runner.invoke(cli, ["diff", str(old_file), str(new_file)])
        assert result.exit_code == 0
        assert "Base" in result.output
        assert "Derived" in result.output

    def test_no_changes(self, runner: CliRunner, old_file: Path) -> None:
        result = runner.invoke(cli, ["diff", str(old_file), str(old_file)])
        assert result.exit_code == 0
        assert "No structural changes" in result.output

    def test_json_output(self, runner: CliRunner, old_file: Path, new_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "diff.json"
        result = runner.invoke(
            cli, ["diff", str(old_file), str(new_file), "--format", "json", "-o", str(out)]
        )
        assert result.exit_code == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["kind"] == "ApiDiff"
        changed = data["packages_changed"][0]["types_changed"]
        assert [t["name"] for t in changed] == ["Base", "Derived"]
        inherited = changed[1]["methods"]["added"][0]
        assert inherited["inherited_from"] == "p.Base"

    def test_yaml_output(self, runner: CliRunner, old_file: Path, new_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "diff.yaml"
        result = runner.invoke(
            cli, ["diff", str(old_file), str(new_file), "--format", "yaml", "-o", str(out)]
        )
        assert result.exit_code == 0
        assert yaml.safe_load(out.read_text(encoding="utf-8"))["old_name"] == "lib-1.0"

    def test_sort_by_name(self, runner: CliRunner, old_file: Path, new_file: Path) -> None:
        result = runner.invoke(cli, ["diff", str(old_file), str(new_file), "--sort", "name"])
        assert result.exit_code == 0

    def test_malformed_input(self, runner: CliRunner, old_file: Path, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text(json.dumps(_model("broken", duplicate=True)), encoding="utf-8")
        result = runner.invoke(cli, ["diff", str(old_file), str(path)])
        assert result.exit_code == 1

    def test_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        old = tmp_path / "old.json"
        new = tmp_path / "new.json"
        old_model = _model("a")
        new_model = _model("b")
        new_model["packages"][0]["types"][0]["methods"][0]["synchronized"] = True  # type: ignore[index]
        old.write_text(json.dumps(old_model), encoding="utf-8")
        new.write_text(json.dumps(new_model), encoding="utf-8")

        plain = runner.invoke(cli, ["diff", str(old), str(new)])
        assert "No structural changes" in plain.output

        config = tmp_path / "options.yaml"
        config.write_text("showAllChanges: true\n", encoding="utf-8")
        out = tmp_path / "diff.json"
        result = runner.invoke(
            cli,
            ["diff", str(old), str(new), "--config", str(config), "--format", "json", "-o", str(out)],
        )
        assert result.exit_code == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        base = data["packages_changed"][0]["types_changed"][0]
        assert base["methods"]["changed"][0]["changes"] == ["synchronized"]

    def test_show_all_changes_flag(self, runner: CliRunner, tmp_path: Path) -> None:
        old = tmp_path / "old.json"
        new = tmp_path / "new.json"
        new_model = _model("b")
        new_model["packages"][0]["types"][0]["methods"][0]["native"] = True  # type: ignore[index]
        old.write_text(json.dumps(_model("a")), encoding="utf-8")
        new.write_text(json.dumps(new_model), encoding="utf-8")
        result = runner.invoke(cli, ["diff", str(old), str(new), "--show-all-changes"])
        assert result.exit_code == 0
        assert "Base" in result.output

    def test_bad_config(self, runner: CliRunner, old_file: Path, tmp_path: Path) -> None:
        config = tmp_path / "options.yaml"
        config.write_text("colour: true\n", encoding="utf-8")
        result = runner.invoke(cli, ["diff", str(old_file), str(old_file), "--config", str(config)])
        assert result.exit_code == 1

    def test_verbose_flag(self, runner: CliRunner, old_file: Path) -> None:
        result = runner.invoke(cli, ["--verbose", "diff", str(old_file), str(old_file)])
        assert result.exit_code == 0
