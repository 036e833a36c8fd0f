"""Tests for the sprockets command line."""

import json

import pytest
import yaml
from click.testing import CliRunner
from sprockets_js.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def project(isolated_home):
    """Project with application scripts under src/js."""
    js = isolated_home / "src" / "js"
    js.mkdir(parents=True)
    (js / "app.js").write_text('//= require "cookies"\n//= require "menu"\n\nvar app;\n')
    (js / "menu.js").write_text("var menu;\n")
    (js / "loop.js").write_text('//= require "loop"\n')
    return isolated_home


def test_resolve_paths_only(runner, project):
    result = runner.invoke(cli, ["resolve", "app.js", "--app-dir", "src/js", "--paths-only"])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        "data/lib/sprockets-utils/sprockets-utils.js",
        "data/lib/cookies/cookies.js",
        "menu.js",
        "app.js",
    ]


def test_resolve_table(runner, project):
    result = runner.invoke(cli, ["resolve", "app.js", "--app-dir", "src/js"])

    assert result.exit_code == 0, result.output
    assert "cookies.js" in result.output
    assert "application" in result.output


def test_resolve_with_shared_prepends_stylesheets_and_libraries(runner, project):
    result = runner.invoke(cli, ["resolve", "menu.js", "--app-dir", "src/js", "--with-shared", "--paths-only"])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        "data/lib/jquery-ui-1.13.2/themes/base/jquery-ui.min.css",
        "data/lib/jquery-3.6.1/jquery-3.6.1.min.js",
        "data/lib/jquery-ui-1.13.2/jquery-ui.min.js",
        "menu.js",
    ]


def test_resolve_cycle_exits_with_error(runner, project):
    result = runner.invoke(cli, ["resolve", "loop.js", "--app-dir", "src/js"])

    assert result.exit_code == 1
    assert "Circular dependency" in result.output


def test_resolve_missing_root(runner, project):
    result = runner.invoke(cli, ["resolve", "nothing.js", "--app-dir", "src/js"])

    assert result.exit_code == 1
    assert "Unable to resolve" in result.output


def test_resolve_uses_project_settings(runner, project):
    settings_dir = project / ".sprockets"
    settings_dir.mkdir()
    (settings_dir / "settings.yaml").write_text("application_paths:\n  - src/js\n")

    result = runner.invoke(cli, ["resolve", "menu.js", "--paths-only"])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["menu.js"]


def test_invalid_settings_file(runner, project):
    settings_dir = project / ".sprockets"
    settings_dir.mkdir()
    (settings_dir / "settings.yaml").write_text("mode: staging\n")

    result = runner.invoke(cli, ["paths"])

    assert result.exit_code == 1


def test_paths_lists_probe_order(runner, project):
    result = runner.invoke(cli, ["paths", "--app-dir", "src/js"])

    assert result.exit_code == 0, result.output
    assert result.output.index("application") < result.output.index("library")
    assert "disabled" in result.output


def test_manifest_command_writes_file(runner, project):
    result = runner.invoke(cli, ["manifest", "app.js", "menu.js", "--app-dir", "src/js", "-o", "build/m.yaml"])

    assert result.exit_code == 0, result.output
    data = yaml.safe_load((project / "build" / "m.yaml").read_text())
    assert [e["path"] for e in data["roots"]["app.js"]] == ["sprockets-utils.js", "cookies.js", "menu.js", "app.js"]
    assert [e["path"] for e in data["roots"]["menu.js"]] == ["menu.js"]


def test_log_file_option_writes_jsonl(runner, project, restore_root_logger):
    log_file = project / "logs" / "sprockets.jsonl"

    result = runner.invoke(
        cli, ["--log-file", str(log_file), "--log-level", "DEBUG", "resolve", "menu.js", "--app-dir", "src/js"]
    )

    assert result.exit_code == 0, result.output
    records = [json.loads(line) for line in log_file.read_text().splitlines()]
    assert any(r["logger"].startswith("sprockets_js") for r in records)
    assert all(r["schema"]["name"] == "sprockets.log" for r in records)


def test_no_subcommand_shows_help(runner):
    result = runner.invoke(cli, [])

    assert result.exit_code == 0
    assert "resolve" in result.output
