"""Shared fixtures: export directories, settings and a recording upload runner."""

import json
from pathlib import Path

import pytest

from expo_sourcemaps.config import AppSettings, PathsConfig
from expo_sourcemaps.upload.credentials import SentryCredentials


class RecordingRunner:
    """Stand-in for sentry-cli: records each command and returns queued exit codes."""

    def __init__(self, returncodes=None):
        self.calls = []
        self._returncodes = list(returncodes or [])

    def __call__(self, command, env):
        self.calls.append((list(command), dict(env)))
        return self._returncodes.pop(0) if self._returncodes else 0

    @property
    def commands(self):
        return [command for command, _ in self.calls]


def _write_file(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def write_file():
    return _write_file


@pytest.fixture
def write_manifest():
    def _write(root: Path, updates) -> Path:
        return _write_file(root / "eas-update-metadata.json", json.dumps({"updates": updates}))

    return _write


@pytest.fixture
def settings(tmp_path):
    return AppSettings(
        paths=PathsConfig(
            logs_root=tmp_path / "logs",
            summaries_root=tmp_path / "summaries",
        )
    )


@pytest.fixture
def credentials():
    return SentryCredentials(project="mobile-app", auth_token="sntrys_test_token")


@pytest.fixture
def runner():
    return RecordingRunner()


@pytest.fixture
def failing_runner():
    def _make(*returncodes):
        return RecordingRunner(returncodes=returncodes)

    return _make


@pytest.fixture
def export_dir(tmp_path):
    """A JS-only export: one web bundle and one Android bundle, each with a sourcemap."""
    root = tmp_path / "dist"
    _write_file(root / "app.js", "console.log('app');")
    _write_file(root / "app.js.map", '{"version":3}')
    _write_file(root / "index.android.bundle", "__d(function(){});")
    _write_file(root / "index.android.bundle.map", '{"version":3}')
    return root


@pytest.fixture
def hermes_export_dir(tmp_path):
    """Layout written by `expo export` with Hermes enabled on both platforms."""
    root = tmp_path / "dist"
    js_dir = root / "_expo" / "static" / "js"
    _write_file(js_dir / "android" / "entry-4f1e2d.hbc", "HBC-android")
    _write_file(js_dir / "android" / "entry-4f1e2d.hbc.map", '{"version":3}')
    _write_file(js_dir / "ios" / "entry-9a8b7c.hbc", "HBC-ios")
    _write_file(js_dir / "ios" / "entry-9a8b7c.hbc.map", '{"version":3}')
    _write_file(root / "assets" / "logo.png", "png")
    _write_file(root / "metadata.json", "{}")
    return root
