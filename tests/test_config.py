# tests/test_config.py
"""
Tests for configuration loading and the workspace paths.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from docsync.config.schema import CollisionPolicy, SyncConfig
from docsync.core.config import (
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    load_config,
    load_yaml,
)
from docsync.core.exceptions import DocsyncError
from docsync.core.paths import WORKSPACE_ENV, DocsyncPaths


class TestSyncConfig:
    """Tests for the schema."""

    def test_defaults(self, tmp_path: Path):
        cfg = SyncConfig(source_dir=tmp_path / "s", output_dir=tmp_path / "o")

        assert cfg.target_ext == ".md"
        assert cfg.max_workers == 4
        assert cfg.watch_depth == 10
        assert cfg.ignore_hidden is True
        assert cfg.collision_policy == CollisionPolicy.WARN
        assert cfg.resolved_state_path() == DocsyncPaths.fingerprints()

    def test_extensions_normalized(self, tmp_path: Path):
        cfg = SyncConfig(source_dir=tmp_path, output_dir=tmp_path, extensions=["TXT", ".Csv"], target_ext="html")

        assert cfg.extensions == [".txt", ".csv"]
        assert cfg.target_ext == ".html"

    def test_rejects_unknown_keys(self, tmp_path: Path):
        with pytest.raises(ValueError):
            SyncConfig(source_dir=tmp_path, output_dir=tmp_path, colour="blue")

    def test_rejects_zero_workers(self, tmp_path: Path):
        with pytest.raises(ValueError):
            SyncConfig(source_dir=tmp_path, output_dir=tmp_path, max_workers=0)


class TestLoadConfig:
    """Tests for YAML loading."""

    def test_load(self, tmp_path: Path):
        path = tmp_path / "docsync.yaml"
        path.write_text(
            "source_dir: ./docs\noutput_dir: ./docs_md\ncollision_policy: error\n",
            encoding="utf-8",
        )

        cfg = load_config(path)

        assert cfg.source_dir == Path("./docs")
        assert cfg.collision_policy == CollisionPolicy.ERROR

    def test_overrides_win(self, tmp_path: Path):
        path = tmp_path / "docsync.yaml"
        path.write_text("source_dir: a\noutput_dir: b\nmax_workers: 2\n", encoding="utf-8")

        cfg = load_config(path, overrides={"max_workers": 8, "output_dir": None})

        assert cfg.max_workers == 8
        assert cfg.output_dir == Path("b")

    def test_default_path_is_workspace(self, isolated_workspace: Path):
        isolated_workspace.mkdir(parents=True)
        (isolated_workspace / "config.yaml").write_text("source_dir: a\noutput_dir: b\n", encoding="utf-8")

        assert load_config().source_dir == Path("a")

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("source_dir: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigParseError):
            load_yaml(path)

    def test_non_mapping_root(self, tmp_path: Path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigParseError):
            load_yaml(path)

    def test_validation_error_carries_path(self, tmp_path: Path):
        path = tmp_path / "invalid.yaml"
        path.write_text("source_dir: a\n", encoding="utf-8")

        with pytest.raises(ConfigValidationError) as exc_info:
            load_config(path)

        assert exc_info.value.path == path


class TestDocsyncPaths:
    """Tests for workspace resolution."""

    def test_env_override(self, tmp_path: Path, monkeypatch):
        DocsyncPaths.reset()
        monkeypatch.setenv(WORKSPACE_ENV, str(tmp_path / "env_ws"))

        assert DocsyncPaths.workspace() == tmp_path / "env_ws"
        assert DocsyncPaths.fingerprints() == tmp_path / "env_ws" / "fingerprints.json"

    def test_explicit_override_beats_env(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv(WORKSPACE_ENV, str(tmp_path / "env_ws"))
        DocsyncPaths.set_workspace(tmp_path / "explicit")

        assert DocsyncPaths.workspace() == tmp_path / "explicit"

    def test_default_under_cwd(self, tmp_path: Path, monkeypatch):
        DocsyncPaths.reset()
        monkeypatch.delenv(WORKSPACE_ENV, raising=False)
        monkeypatch.chdir(tmp_path)

        assert DocsyncPaths.workspace() == tmp_path / ".docsync"

    def test_ensure_workspace_creates(self, isolated_workspace: Path):
        assert DocsyncPaths.ensure_workspace().is_dir()


class TestSymlinkSetting:
    """Tests for the follow_symlinks option."""

    def test_off_by_default(self, tmp_path: Path):
        cfg = SyncConfig(source_dir=tmp_path, output_dir=tmp_path)

        assert cfg.follow_symlinks is False

    def test_loaded_from_yaml(self, tmp_path: Path):
        path = tmp_path / "docsync.yaml"
        path.write_text("source_dir: a\noutput_dir: b\nfollow_symlinks: true\n", encoding="utf-8")

        assert load_config(path).follow_symlinks is True


class TestConfigErrors:
    """Tests for the config error family."""

    def test_directory_is_parse_error(self, tmp_path: Path):
        with pytest.raises(ConfigParseError) as exc_info:
            load_yaml(tmp_path)

        assert exc_info.value.path == tmp_path

    def test_errors_share_base(self, tmp_path: Path):
        with pytest.raises(DocsyncError):
            load_config(tmp_path / "missing.yaml")

    def test_empty_file_is_empty_mapping(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_yaml(path) == {}
