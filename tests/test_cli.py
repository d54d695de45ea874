"""
Tests for the fixtura command-line interface.
"""

import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from fixtura import __version__
from fixtura.cli import app, load_target

runner = CliRunner()


class TestLoadTarget:
    """Tests for load_target."""

    def test_loads_class(self) -> None:
        from fixture_samples import Calculator

        assert load_target("fixture_samples:Calculator") is Calculator

    @pytest.mark.parametrize(
        "target",
        ["fixture_samples", "fixture_samples:", ":Calculator", "no_such_module:X", "fixture_samples:Nope"],
    )
    def test_bad_targets(self, target: str) -> None:
        with pytest.raises(ValueError):
            load_target(target)


class TestBuildCommand:
    """Tests for `fixtura build`."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_console_output(self) -> None:
        result = runner.invoke(app, ["build", "fixture_samples:Calculator"])
        assert result.exit_code == 0
        assert "test_add" in result.output
        assert "runnable" in result.output
        assert "6 test(s)" in result.output

    def test_json_output(self) -> None:
        result = runner.invoke(app, ["build", "fixture_samples:Calculator", "-f", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["run_state"] == "runnable"
        assert len(data["tests"]) == 6

    def test_arguments_and_type_arguments(self) -> None:
        result = runner.invoke(
            app, ["build", "fixture_samples:Repo", "-t", "int", "-a", "seed", "-f", "json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["name"] == 'Repo[int]("seed")'
        assert data["run_state"] == "runnable"

    def test_arguments_are_parsed_as_yaml(self) -> None:
        result = runner.invoke(
            app, ["build", "fixture_samples:Counter", "-a", "5", "-f", "json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["arguments"] == [5]
        assert data["run_state"] == "runnable"

    def test_not_runnable_fixture_is_reported(self) -> None:
        result = runner.invoke(app, ["build", "fixture_samples:Box", "-f", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["run_state"] == "not_runnable"
        assert data["properties"]["_SKIPREASON"]

    def test_yaml_output_with_data_file(self, tmp_path: Path) -> None:
        data_file = tmp_path / "data.yaml"
        data_file.write_text(
            "arguments:\n  - type: str\n  - seed\nproperties:\n  Owner: qa\n"
        )
        result = runner.invoke(
            app, ["build", "fixture_samples:Repo", "-d", str(data_file), "-f", "yaml"]
        )
        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert data["type"] == "fixture_samples.Repo[str]"
        assert data["properties"]["Owner"] == ["qa"]

    def test_config_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "fixtura.yaml"
        config_file.write_text("test_prefixes: [helper]\n")
        result = runner.invoke(
            app, ["build", "fixture_samples:Calculator", "-c", str(config_file), "-f", "json"]
        )
        assert result.exit_code == 0
        names = [test["name"] for test in json.loads(result.output)["tests"]]
        assert names == ["helper", "checks_marked"]

    def test_unknown_target_exits_with_error(self) -> None:
        result = runner.invoke(app, ["build", "fixture_samples:Nope"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_non_class_target_exits_with_error(self) -> None:
        result = runner.invoke(app, ["build", "fixture_samples:T"])
        assert result.exit_code == 1

    def test_missing_data_file(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["build", "fixture_samples:Repo", "-d", str(tmp_path / "missing.yaml")]
        )
        assert result.exit_code == 1

    def test_unknown_format(self) -> None:
        result = runner.invoke(app, ["build", "fixture_samples:Calculator", "-f", "xml"])
        assert result.exit_code == 1


class TestSampleConfigCommand:
    """Tests for `fixtura sample-config`."""

    def test_prints_yaml(self) -> None:
        result = runner.invoke(app, ["sample-config"])
        assert result.exit_code == 0
        assert yaml.safe_load(result.output)["test_prefixes"] == ["test", "check"]
