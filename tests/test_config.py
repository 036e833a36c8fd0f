"""Tests for scoped YAML settings files."""

from pathlib import Path

import pytest
from sprockets_js.config import ConfigLoader
from sprockets_js.config import ResolutionConfig
from sprockets_js.config import SettingsPaths
from sprockets_js.errors import InvalidConfigurationError
from sprockets_js.locator.cache import CacheDuration
from sprockets_js.locator.directives import ScanPolicy
from sprockets_js.locator.manifest import ManifestDependencyLocator
from sprockets_js.locator.resolver import NullDependencyLocator
from sprockets_js.settings import Application
from sprockets_js.settings import RuntimeMode


@pytest.fixture
def settings_paths(tmp_path: Path) -> SettingsPaths:
    return SettingsPaths(
        global_settings=tmp_path / "home" / "settings.yaml",
        project_settings=tmp_path / "project" / "settings.yaml",
        local_settings=tmp_path / "project" / "settings.local.yaml",
    )


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


def test_missing_files_give_defaults(settings_paths):
    config = ConfigLoader(settings_paths).load()

    assert config.mode is RuntimeMode.DEVELOPMENT
    assert config.cache is None
    assert config.locator == "default"
    assert config.scan is ScanPolicy.HEADER


def test_more_specific_scope_wins(settings_paths):
    _write(settings_paths.global_settings, "mode: deployment\ncache: 60\nwell_known:\n  dom_library: null\n")
    _write(settings_paths.project_settings, "cache: indefinite\n")
    _write(settings_paths.local_settings, "well_known:\n  widget_library: lib/ui.js\n")

    merged = ConfigLoader(settings_paths).get_merged_settings()

    assert merged == {
        "mode": "deployment",
        "cache": "indefinite",
        "well_known": {"dom_library": None, "widget_library": "lib/ui.js"},
    }


def test_invalid_yaml_fails_fast(settings_paths):
    _write(settings_paths.project_settings, "mode: [unclosed\n")

    with pytest.raises(InvalidConfigurationError):
        ConfigLoader(settings_paths).load()


def test_non_mapping_fails_fast(settings_paths):
    _write(settings_paths.project_settings, "- just\n- a list\n")

    with pytest.raises(InvalidConfigurationError):
        ConfigLoader(settings_paths).load()


def test_invalid_mode_fails_fast(settings_paths):
    _write(settings_paths.project_settings, "mode: staging\n")

    with pytest.raises(InvalidConfigurationError):
        ConfigLoader(settings_paths).load()


def test_paths_accept_strings_and_objects():
    config = ResolutionConfig.model_validate(
        {"application_paths": ["src/js", {"package": "sprockets_js", "path": "data", "name": "bundled"}]}
    )

    assert config.application_paths[0].path == "src/js"
    assert config.application_paths[1].package == "sprockets_js"


def test_to_builder_registers_application_paths(tmp_path):
    (tmp_path / "js").mkdir()
    (tmp_path / "js" / "app.js").write_text('//= require "cookies"\n')
    config = ResolutionConfig.model_validate({"application_paths": [{"path": "js", "name": "app"}]})

    settings = config.to_builder(tmp_path).build(Application())

    assert [s.path for s in settings.locate("app.js")] == ["sprockets-utils.js", "cookies.js", "app.js"]
    assert settings.search_path.origin("app") is not None


def test_to_builder_applies_cache_override():
    builder = ResolutionConfig.model_validate({"cache": "90"}).to_builder()
    assert builder.cache_duration == CacheDuration.of(90)


def test_to_builder_applies_scan_policy(tmp_path):
    (tmp_path / "app.js").write_text('var x;\n//= require "cookies"\n')
    config = ResolutionConfig.model_validate({"scan": "whole_file", "application_paths": ["."]})

    settings = config.to_builder(tmp_path).build(Application())

    assert [s.path for s in settings.locate("app.js")][-2:] == ["cookies.js", "app.js"]


def test_well_known_null_disables_and_missing_keeps_default():
    builder = ResolutionConfig.model_validate({"well_known": {"dom_library": None}}).to_builder()

    assert builder.dom_library is None
    assert builder.widget_library is not None


def test_well_known_origin_reference(tmp_path):
    config = ResolutionConfig.model_validate(
        {
            "application_paths": [{"path": ".", "name": "app"}],
            "well_known": {"dom_library": "app:vendor/jquery.js"},
        }
    )

    builder = config.to_builder(tmp_path)

    assert builder.dom_library.path == "vendor/jquery.js"
    assert builder.dom_library.library is False
    assert builder.dom_library.location.origin.name == "app"


def test_well_known_unknown_origin():
    config = ResolutionConfig.model_validate({"well_known": {"dom_library": "nowhere:jquery.js"}})

    with pytest.raises(InvalidConfigurationError):
        config.to_builder()


def test_null_locator():
    builder = ResolutionConfig.model_validate({"locator": "null"}).to_builder()
    assert isinstance(builder.locator, NullDependencyLocator)


def test_manifest_locator_requires_file():
    with pytest.raises(InvalidConfigurationError):
        ResolutionConfig.model_validate({"locator": "manifest"}).to_builder()


def test_manifest_locator_from_file(tmp_path):
    (tmp_path / "manifest.yaml").write_text("roots:\n  app.js:\n    - {path: app.js, library: false}\n")
    config = ResolutionConfig.model_validate({"locator": "manifest", "manifest": "manifest.yaml"})

    builder = config.to_builder(tmp_path)

    assert isinstance(builder.locator, ManifestDependencyLocator)
    assert [s.path for s in builder.build(Application()).locate("app.js")] == ["app.js"]
