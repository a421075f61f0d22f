from __future__ import annotations

from pathlib import Path

import pytest

from orchestrator.workspace import acquire_workspace, build_workspace, release_workspace


def _populate(root: Path) -> None:
    (root / "geo" / "deep").mkdir(parents=True)
    (root / "geo" / "ShapeImpl.java").write_text("class A {}", encoding="ascii")
    (root / "geo" / "ShapeImpl.class").write_bytes(b"\xca\xfe")
    (root / "geo" / "deep" / "x.txt").write_text("x", encoding="ascii")


def test_acquire_creates_parent_and_prefixed_directory(tmp_path):
    workspace = acquire_workspace(tmp_path / "nested" / "out.jar", prefix="temp")
    assert workspace.is_dir()
    assert workspace.parent == tmp_path / "nested"
    assert workspace.name.startswith("temp")


def test_each_acquire_is_fresh(tmp_path):
    first = acquire_workspace(tmp_path / "out.jar")
    second = acquire_workspace(tmp_path / "out.jar")
    assert first != second


def test_release_removes_whole_tree(tmp_path):
    workspace = acquire_workspace(tmp_path / "out.jar")
    _populate(workspace)

    assert release_workspace(workspace) == []
    assert not workspace.exists()


def test_release_of_missing_workspace_is_noop(tmp_path):
    assert release_workspace(tmp_path / "gone") == []


def test_release_collects_failures_and_keeps_going(tmp_path, monkeypatch):
    workspace = acquire_workspace(tmp_path / "out.jar")
    _populate(workspace)
    stuck = workspace / "geo" / "ShapeImpl.class"
    original_unlink = Path.unlink

    def _unlink(self, *args, **kwargs):
        if self == stuck:
            raise PermissionError(13, "Permission denied", str(self))
        return original_unlink(self, *args, **kwargs)

    monkeypatch.setattr(Path, "unlink", _unlink)
    issues = release_workspace(workspace)

    assert stuck in {issue.path for issue in issues}
    assert stuck.exists()
    assert not (workspace / "geo" / "ShapeImpl.java").exists()
    assert not (workspace / "geo" / "deep").exists()


def test_build_workspace_releases_on_error(tmp_path):
    seen = []
    with pytest.raises(RuntimeError, match="boom"):
        with build_workspace(tmp_path / "out.jar") as workspace:
            seen.append(workspace)
            _populate(workspace)
            raise RuntimeError("boom")
    assert not seen[0].exists()
    assert list(tmp_path.iterdir()) == []
