"""Shared fixtures for sprockets-js tests."""

import logging
from pathlib import Path

import pytest
from sprockets_js.locator.sources import MemorySource
from sprockets_js.settings import Application
from sprockets_js.settings import RuntimeMode
from sprockets_js.settings import SettingsBuilder


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def app_source() -> MemorySource:
    """Application scripts from the end-to-end example."""
    return MemorySource(
        {
            "app.js": '//= require "utils"\n\nvar app = {};\n',
            "widgets.js": '//= require "utils"\n//= require "app"\n\nvar widgets = {};\n',
        },
        name="app",
    )


@pytest.fixture
def lib_source() -> MemorySource:
    return MemorySource({"utils.js": "var utils = {};\n"}, name="lib")


@pytest.fixture
def builder(app_source: MemorySource, lib_source: MemorySource) -> SettingsBuilder:
    """Builder without bundled defaults: one library and one application location."""
    builder = SettingsBuilder()
    builder.add_library_path(lib_source)
    builder.add_application_path(app_source)
    return builder


@pytest.fixture
def dev_app() -> Application:
    return Application("test", RuntimeMode.DEVELOPMENT)


@pytest.fixture
def deploy_app() -> Application:
    return Application("test", RuntimeMode.DEPLOYMENT)


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Point Path.home() and the CWD at temp dirs so no real settings are read."""
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    monkeypatch.chdir(project)
    return project


@pytest.fixture
def restore_root_logger():
    """Root logger, with its handlers and level restored afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
