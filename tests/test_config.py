#!/usr/bin/env python3
"""Unit tests for environment-driven configuration and CLI overrides."""

import pytest

import main as cli
from shared.config import Config


def test_defaults(monkeypatch):
    for name in ("PLUGIN_DIFF_ADDITIONS_ONLY", "PLUGIN_DIFF_VERSIONS_ONLY", "PLUGIN_DIFF_GIT_TIMEOUT",
                 "PLUGIN_DIFF_REPORT_FILE", "PLUGIN_DIFF_BASELINE_BRANCH"):
        monkeypatch.delenv(name, raising=False)

    config = Config()

    assert config.additions_only is True
    assert config.versions_only is False
    assert config.include_diff_bodies is True
    assert config.git_timeout_seconds is None
    assert config.report_filename == "diff.txt"
    assert config.baseline_branch == "plugin-diff-empty-baseline"
    config.validate()


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PLUGIN_DIFF_VERSIONS_ONLY", "TRUE")
    monkeypatch.setenv("PLUGIN_DIFF_ADDITIONS_ONLY", "false")
    monkeypatch.setenv("PLUGIN_DIFF_GIT_TIMEOUT", "30")

    config = Config()

    assert config.versions_only is True
    assert config.include_diff_bodies is False
    assert config.additions_only is False
    assert config.git_timeout_seconds == 30.0


@pytest.mark.parametrize("field,value", [
    ("git_timeout_seconds", -1.0),
    ("baseline_branch", "-evil"),
    ("baseline_branch", "has space"),
    ("report_filename", ""),
])
def test_validate_rejects_bad_values(field, value):
    config = Config()
    setattr(config, field, value)

    with pytest.raises(ValueError):
        config.validate()


def test_cli_flags_override_environment(monkeypatch):
    monkeypatch.setenv("PLUGIN_DIFF_HIDE_UNCHANGED", "false")
    args = cli.build_parser().parse_args([
        "--jenkins-war", "new.war",
        "--keep-deletions",
        "--hide-unchanged",
        "--versions-only",
        "--git-timeout", "12.5",
        "--scratch-dir", "/tmp/scratch",
        "-v",
    ])

    config = cli.config_from_args(args)

    assert config.additions_only is False
    assert config.hide_unchanged is True
    assert config.versions_only is True
    assert config.git_timeout_seconds == 12.5
    assert config.scratch_dir == "/tmp/scratch"
    assert config.is_debug


def test_cli_requires_new_archive():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_debug_log_level_enables_verbose_logging(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(cli, "setup_logging", lambda level, verbose=False: calls.append((level, verbose)))

    cli.main(["--jenkins-war", str(tmp_path / "missing.war"), "--scratch-dir", str(tmp_path / "s"),
              "--log-level", "DEBUG"])

    assert calls == [("DEBUG", True)]
