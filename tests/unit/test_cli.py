"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from json_renderer import __version__
from json_renderer.cli import app
from json_renderer.config import API_ENV_VAR, LOG_LEVEL_ENV_VAR


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated(tmp_path: Path, monkeypatch):
    """Run each command in an empty directory without env overrides."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(API_ENV_VAR, raising=False)
    monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)


@pytest.fixture
def tree_file(tmp_path: Path, sample_tree: dict) -> Path:
    path = tmp_path / "tree.json"
    path.write_text(json.dumps(sample_tree))
    return path


class TestVersion:
    """Tests for --version."""

    def test_version(self, cli_runner):
        """Test --version prints the package version."""
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestApplyCommand:
    """Tests for the apply command."""

    def test_apply_prints_tree(self, cli_runner, patch_file):
        """Test apply prints the built tree as JSON."""
        result = cli_runner.invoke(app, ["apply", str(patch_file)])
        assert result.exit_code == 0, result.output
        tree = json.loads(result.stdout)
        assert tree["elements"]["a"]["props"]["text"] == "hi"

    def test_apply_writes_file(self, cli_runner, patch_file, tmp_path):
        """Test --out writes the tree to a file."""
        out = tmp_path / "out.json"
        result = cli_runner.invoke(app, ["apply", str(patch_file), "--out", str(out)])
        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text())["root"] == "a"

    def test_apply_missing_file(self, cli_runner, tmp_path):
        """Test a missing patch file is a usage error."""
        result = cli_runner.invoke(app, ["apply", str(tmp_path / "nope.ndjson")])
        assert result.exit_code != 0


class TestShowCommand:
    """Tests for the show command."""

    def test_show_hides_auth_elements(self, cli_runner, tree_file):
        """Test signed-out outline omits auth-gated elements."""
        result = cli_runner.invoke(app, ["show", str(tree_file)])
        assert result.exit_code == 0, result.output
        assert "Card" in result.stdout
        assert "Hello" in result.stdout
        assert "Admin only" not in result.stdout

    def test_show_signed_in(self, cli_runner, tree_file):
        """Test --signed-in reveals auth-gated elements."""
        result = cli_runner.invoke(app, ["show", str(tree_file), "--signed-in"])
        assert result.exit_code == 0, result.output
        assert "Admin only" in result.stdout

    def test_show_with_data(self, cli_runner, tree_file, tmp_path, sample_tree):
        """Test --data drives path conditions."""
        sample_tree["elements"]["page"]["visible"] = {"path": "/ready"}
        tree_file.write_text(json.dumps(sample_tree))
        data = tmp_path / "data.json"
        data.write_text(json.dumps({"ready": False}))

        result = cli_runner.invoke(app, ["show", str(tree_file), "--data", str(data)])
        assert result.exit_code == 0, result.output
        assert "Nothing visible" in result.stdout

    def test_show_invalid_json(self, cli_runner, tmp_path):
        """Test an invalid tree file fails cleanly."""
        bad = tmp_path / "bad.json"
        bad.write_text("{")
        result = cli_runner.invoke(app, ["show", str(bad)])
        assert result.exit_code == 1


class TestStreamCommand:
    """Tests for the stream command."""

    def test_stream_connection_failure(self, cli_runner):
        """Test an unreachable endpoint exits non-zero."""
        result = cli_runner.invoke(app, ["stream", "hello", "--api", "http://127.0.0.1:9/api/generate"])
        assert result.exit_code == 1

    def test_stream_invalid_context(self, cli_runner):
        """Test --context must be JSON."""
        result = cli_runner.invoke(app, ["stream", "hello", "--context", "{oops"])
        assert result.exit_code == 1


class TestConfigOption:
    """Tests for the global --config option."""

    def test_invalid_config_file(self, cli_runner, tmp_path, patch_file):
        """Test a broken config file aborts before the command runs."""
        config = tmp_path / "bad.toml"
        config.write_text("[json_renderer\n")
        result = cli_runner.invoke(app, ["--config", str(config), "apply", str(patch_file)])
        assert result.exit_code == 1
