"""Tests for settings loading and path resolution."""

from pathlib import Path

from expo_sourcemaps.config import find_project_root, load_settings, resolve_settings_file


def test_find_project_root_walks_upward(tmp_path):
    (tmp_path / "expo-sourcemaps.yaml").write_text("{}\n", encoding="utf-8")
    nested = tmp_path / "apps" / "mobile"
    nested.mkdir(parents=True)

    assert find_project_root(nested) == tmp_path.resolve()


def test_resolve_settings_file_prefers_env(tmp_path, monkeypatch):
    chosen = tmp_path / "ci.yaml"
    monkeypatch.setenv("EXPO_SOURCEMAPS_SETTINGS_FILE", str(chosen))

    assert resolve_settings_file() == chosen


def test_load_settings_resolves_paths_against_settings_file(tmp_path, monkeypatch):
    monkeypatch.delenv("EXPO_SOURCEMAPS_SETTINGS_FILE", raising=False)
    config_path = tmp_path / "expo-sourcemaps.yaml"
    config_path.write_text(
        "paths:\n  summaries_root: reports/uploads\nupload:\n  scratch_dir_name: .staging\n",
        encoding="utf-8",
    )

    settings = load_settings(config_file=config_path)

    assert settings.paths.summaries_root == (tmp_path / "reports" / "uploads").resolve()
    assert settings.paths.logs_root.is_absolute()
    assert settings.upload.scratch_dir_name == ".staging"


def test_absolute_paths_are_kept(tmp_path, monkeypatch):
    monkeypatch.delenv("EXPO_SOURCEMAPS_SETTINGS_FILE", raising=False)
    absolute = tmp_path / "elsewhere"
    monkeypatch.setenv("EXPO_SOURCEMAPS_PATHS__LOGS_ROOT", str(absolute))

    settings = load_settings(config_file=tmp_path / "missing.yaml")

    assert settings.paths.logs_root == Path(absolute)
