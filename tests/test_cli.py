"""Smoke tests for the CLI.

These tests verify basic CLI functionality without requiring
Xcode or any other external tools.
"""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from xcprebuild import __version__
from xcprebuild.cli import app
from xcprebuild.errors import BuildError
from xcprebuild.types import PrebuildResult

runner = CliRunner()


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point the shared cache and packages at tmp_path."""
    monkeypatch.setenv("XCPREBUILD_TMP_DIR", str(tmp_path / "tmp"))
    monkeypatch.setenv("XCPREBUILD_PACKAGES_DIR", str(tmp_path / "packages"))
    monkeypatch.setenv("XCPREBUILD_PREBUILD_PACKAGES", '["expo-foo", "expo-missing"]')
    package_dir = tmp_path / "packages" / "expo-foo"
    (package_dir / "ios").mkdir(parents=True)
    (package_dir / "package.json").write_text(json.dumps({"name": "expo-foo"}))
    return tmp_path


class TestCLIHelp:
    """Test CLI help and version commands."""

    def test_help_returns_zero(self) -> None:
        """CLI --help should return exit code 0."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "xcframeworks" in result.stdout

    def test_version_flag(self) -> None:
        """CLI --version should print version and exit 0."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_short_version_flag(self) -> None:
        """CLI -V should print version and exit 0."""
        result = runner.invoke(app, ["-V"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_no_args_shows_help(self) -> None:
        """CLI with no args should show help."""
        result = runner.invoke(app, [])
        assert "Usage:" in result.stdout


class TestCLIConfig:
    """Test CLI config command."""

    def test_config_command(self, isolated_env) -> None:
        """CLI config should show all sections."""
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "Paths:" in result.stdout
        assert "Tools:" in result.stdout
        assert "Operational:" in result.stdout
        assert "Derived data" in result.stdout

    def test_config_json(self, isolated_env) -> None:
        """CLI config --json should output JSON."""
        result = runner.invoke(app, ["config", "--json"])
        assert result.exit_code == 0
        parsed = json.loads(result.stdout)
        assert parsed["prebuild_packages"] == ["expo-foo", "expo-missing"]


class TestCLIPrebuild:
    """Test CLI prebuild command."""

    def test_flags_map_to_modes(self, isolated_env) -> None:
        """Flags should be passed to run_prebuild."""
        with patch("xcprebuild.builds.service.run_prebuild", return_value=[]) as mock:
            result = runner.invoke(
                app, ["prebuild", "expo-foo", "expo-bar", "-r", "-c", "-g", "-v"]
            )

        assert result.exit_code == 0
        assert mock.call_args.args[0] == ["expo-foo", "expo-bar"]
        kwargs = mock.call_args.kwargs
        assert kwargs["remove_artifacts_only"] is True
        assert kwargs["clean_cache"] is True
        assert kwargs["generate_specs"] is True
        assert kwargs["verbose"] is True

    def test_no_packages(self, isolated_env) -> None:
        """No names should mean all prebuildable packages."""
        with patch("xcprebuild.builds.service.run_prebuild", return_value=[]) as mock:
            result = runner.invoke(app, ["prebuild"])

        assert result.exit_code == 0
        assert mock.call_args.args[0] == []
        assert mock.call_args.kwargs["verbose"] is False

    def test_reports_results(self, isolated_env) -> None:
        """Should print one line per prebuilt package."""
        results = [PrebuildResult(package_name="expo-foo", duration_seconds=1.234)]
        with patch("xcprebuild.builds.service.run_prebuild", return_value=results):
            result = runner.invoke(app, ["prebuild", "expo-foo"])

        assert result.exit_code == 0
        assert "expo-foo" in result.stdout
        assert "1.23s" in result.stdout

    def test_alias(self, isolated_env) -> None:
        """prebuild-packages should behave like prebuild."""
        with patch("xcprebuild.builds.service.run_prebuild", return_value=[]) as mock:
            result = runner.invoke(app, ["prebuild-packages", "--clean-cache"])

        assert result.exit_code == 0
        assert mock.call_args.kwargs["clean_cache"] is True

    def test_build_failure_exits_non_zero(self, isolated_env) -> None:
        """A build failure should exit with code 1."""
        with patch(
            "xcprebuild.builds.service.run_prebuild",
            side_effect=BuildError("xcodebuild failed", exit_code=65),
        ):
            result = runner.invoke(app, ["prebuild", "expo-foo"])

        assert result.exit_code == 1

    def test_clean_cache_removes_derived_data(self, isolated_env) -> None:
        """--clean-cache should wipe the shared derived data."""
        derived = isolated_env / "tmp" / "Expo" / "DerivedData"
        (derived / "Build" / "Products").mkdir(parents=True)

        result = runner.invoke(app, ["prebuild", "--clean-cache"])

        assert result.exit_code == 0
        assert not derived.exists()


class TestCLIPackages:
    """Test CLI packages command."""

    def test_list(self, isolated_env) -> None:
        """Should list configured packages and whether they exist."""
        result = runner.invoke(app, ["packages", "list"])
        assert result.exit_code == 0
        assert "expo-foo" in result.stdout
        assert "not found" in result.stdout

    def test_list_json(self, isolated_env) -> None:
        """Should output JSON rows."""
        result = runner.invoke(app, ["packages", "list", "--json"])
        assert result.exit_code == 0
        rows = json.loads(result.stdout)
        assert [r["name"] for r in rows] == ["expo-foo", "expo-missing"]
        assert rows[0]["found"] is True
        assert rows[1]["found"] is False
