"""Invocation-scoped temporary build workspace."""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List

from contracts.errors import CleanupIssue, PathCreationError

_LOGGER = logging.getLogger(__name__)


def acquire_workspace(archive_path: Path, prefix: str = "temp") -> Path:
    """Create a fresh directory next to ``archive_path``.

    The archive's parent directory is created first when missing.
    """

    parent = Path(os.path.abspath(archive_path)).parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PathCreationError(f"Could not create path {parent}: {exc}") from exc
    try:
        return Path(tempfile.mkdtemp(prefix=prefix, dir=parent))
    except OSError as exc:
        raise PathCreationError(f"Could not create temp path in {parent}: {exc}") from exc


def release_workspace(workspace: Path) -> List[CleanupIssue]:
    """Delete ``workspace`` file by file and return whatever could not be removed."""

    issues: List[CleanupIssue] = []
    if not workspace.exists():
        return issues

    def _on_error(exc: OSError) -> None:
        issues.append(CleanupIssue(path=Path(exc.filename or workspace), msg=str(exc)))

    for dirpath, dirnames, filenames in os.walk(workspace, topdown=False, onerror=_on_error):
        current = Path(dirpath)
        for name in filenames:
            target = current / name
            try:
                target.unlink()
            except OSError as exc:
                issues.append(CleanupIssue(path=target, msg=str(exc)))
        for name in dirnames:
            target = current / name
            try:
                if target.is_symlink():
                    target.unlink()
                else:
                    target.rmdir()
            except OSError as exc:
                issues.append(CleanupIssue(path=target, msg=str(exc)))
    try:
        workspace.rmdir()
    except OSError as exc:
        issues.append(CleanupIssue(path=workspace, msg=str(exc)))
    return issues


@contextmanager
def build_workspace(archive_path: Path, prefix: str = "temp") -> Iterator[Path]:
    """Yield a workspace that is released on every exit path.

    Cleanup problems are logged and never replace an exception raised by the
    body.
    """

    workspace = acquire_workspace(archive_path, prefix)
    _LOGGER.debug("acquired workspace %s", workspace)
    try:
        yield workspace
    finally:
        for issue in release_workspace(workspace):
            _LOGGER.warning("Could not clear temp path %s: %s", issue.path, issue.msg)


__all__ = ["acquire_workspace", "build_workspace", "release_workspace"]
