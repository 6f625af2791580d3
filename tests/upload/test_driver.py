"""Unit tests for per-group upload-tool invocation."""

import subprocess
import sys

import pytest

from expo_sourcemaps.errors import MissingRuntimeMappingError, UploadFailedError
from expo_sourcemaps.upload.driver import (
    DEBUG_ID_FLAG,
    build_upload_command,
    run_upload_command,
    upload_environment,
    upload_staged_groups,
)

CLI = "node_modules/@sentry/cli/bin/sentry-cli"


@pytest.fixture
def scratch(tmp_path, write_file):
    root = tmp_path / ".tmp"
    write_file(root / "android-update-id-u1.bundle", "bundle")
    write_file(root / "android-update-id-u1.bundle.map", "{}")
    write_file(root / "ios-update-id-u2.hbc", "hbc")
    write_file(root / "ios-update-id-u2.hbc.map", "{}")
    return root


class TestBuildUploadCommand:
    def test_plain_bundle(self, tmp_path):
        files = [tmp_path / "a.js", tmp_path / "a.js.map"]
        command = build_upload_command(CLI, "1.0.0", files, debug_id_reference=False)

        assert command == [CLI, "sourcemaps", "upload", "--release", "1.0.0", str(files[0]), str(files[1])]

    def test_debug_id_reference_flag_precedes_files(self, tmp_path):
        files = [tmp_path / "a.hbc", tmp_path / "a.hbc.map"]
        command = build_upload_command(CLI, "1.0.0", files, debug_id_reference=True)

        assert command[5] == DEBUG_ID_FLAG
        assert command[6:] == [str(files[0]), str(files[1])]

    def test_release_with_spaces_stays_one_argument(self, tmp_path):
        command = build_upload_command(CLI, "my app 1.0", [tmp_path / "a.js"], debug_id_reference=False)
        assert command[4] == "my app 1.0"


class TestUploadEnvironment:
    def test_sets_project_and_token(self, credentials, settings):
        env = upload_environment(credentials, settings.sentry, base_env={"PATH": "/usr/bin"})

        assert env == {
            "PATH": "/usr/bin",
            "SENTRY_PROJECT": "mobile-app",
            "SENTRY_AUTH_TOKEN": "sntrys_test_token",
        }


class TestUploadStagedGroups:
    def test_one_invocation_per_group(self, scratch, credentials, settings, runner):
        runtime_by_group = {"android-update-id-u1.bundle": "1.0.0", "ios-update-id-u2.hbc": "2.0.0"}

        results = upload_staged_groups(
            scratch, runtime_by_group, credentials=credentials, settings=settings, runner=runner
        )

        assert [result.group_name for result in results] == ["android-update-id-u1.bundle", "ios-update-id-u2.hbc"]
        assert runner.commands == [
            [
                CLI,
                "sourcemaps",
                "upload",
                "--release",
                "1.0.0",
                str(scratch / "android-update-id-u1.bundle"),
                str(scratch / "android-update-id-u1.bundle.map"),
            ],
            [
                CLI,
                "sourcemaps",
                "upload",
                "--release",
                "2.0.0",
                DEBUG_ID_FLAG,
                str(scratch / "ios-update-id-u2.hbc"),
                str(scratch / "ios-update-id-u2.hbc.map"),
            ],
        ]

    def test_credentials_passed_in_environment(self, scratch, credentials, settings, runner):
        runtime_by_group = {"android-update-id-u1.bundle": "1.0.0", "ios-update-id-u2.hbc": "2.0.0"}

        upload_staged_groups(scratch, runtime_by_group, credentials=credentials, settings=settings, runner=runner)

        for _, env in runner.calls:
            assert env["SENTRY_PROJECT"] == "mobile-app"
            assert env["SENTRY_AUTH_TOKEN"] == "sntrys_test_token"

    def test_debug_id_flag_only_for_bytecode(self, scratch, credentials, settings, runner):
        runtime_by_group = {"android-update-id-u1.bundle": "1.0.0", "ios-update-id-u2.hbc": "2.0.0"}

        results = upload_staged_groups(
            scratch, runtime_by_group, credentials=credentials, settings=settings, runner=runner
        )

        assert [result.debug_id_reference for result in results] == [False, True]

    def test_missing_runtime_mapping_raises(self, scratch, credentials, settings, runner):
        with pytest.raises(MissingRuntimeMappingError) as excinfo:
            upload_staged_groups(
                scratch,
                {"ios-update-id-u2.hbc": "2.0.0"},
                credentials=credentials,
                settings=settings,
                runner=runner,
            )

        assert excinfo.value.group_name == "android-update-id-u1.bundle"
        assert runner.calls == []

    def test_first_failure_stops_remaining_uploads(self, scratch, credentials, settings, failing_runner):
        runner = failing_runner(2)
        runtime_by_group = {"android-update-id-u1.bundle": "1.0.0", "ios-update-id-u2.hbc": "2.0.0"}

        with pytest.raises(UploadFailedError) as excinfo:
            upload_staged_groups(scratch, runtime_by_group, credentials=credentials, settings=settings, runner=runner)

        assert excinfo.value.group_name == "android-update-id-u1.bundle"
        assert excinfo.value.returncode == 2
        assert len(runner.calls) == 1

    def test_launch_failure_raises_upload_failed(self, scratch, credentials, settings):
        def _missing_tool(command, env):
            raise FileNotFoundError(command[0])

        runtime_by_group = {"android-update-id-u1.bundle": "1.0.0", "ios-update-id-u2.hbc": "2.0.0"}
        with pytest.raises(UploadFailedError) as excinfo:
            upload_staged_groups(
                scratch, runtime_by_group, credentials=credentials, settings=settings, runner=_missing_tool
            )

        assert excinfo.value.returncode is None

    def test_empty_scratch_uploads_nothing(self, tmp_path, credentials, settings, runner):
        scratch = tmp_path / ".tmp"
        scratch.mkdir()

        assert upload_staged_groups(scratch, {}, credentials=credentials, settings=settings, runner=runner) == []
        assert runner.calls == []


class TestRunUploadCommand:
    def test_returns_exit_code(self):
        assert run_upload_command([sys.executable, "-c", "raise SystemExit(3)"], {}) == 3

    def test_passes_environment(self, monkeypatch):
        captured = {}

        def _fake_run(command, env, check):
            captured.update(command=command, env=env, check=check)
            return subprocess.CompletedProcess(command, 0)

        monkeypatch.setattr(subprocess, "run", _fake_run)

        assert run_upload_command(["sentry-cli", "--version"], {"SENTRY_PROJECT": "p"}) == 0
        assert captured == {"command": ["sentry-cli", "--version"], "env": {"SENTRY_PROJECT": "p"}, "check": False}
