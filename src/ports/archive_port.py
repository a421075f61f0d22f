"""Facade for writing single-purpose JAR archives."""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Optional

# Fixed entry timestamp so identical inputs produce identical archives.
_EPOCH = (1980, 1, 1, 0, 0, 0)
_ENTRY_MODE = 0o644 << 16


class ArchiveWriter:
    """Context-managed writer adding byte entries to a ZIP/JAR file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._archive: Optional[zipfile.ZipFile] = zipfile.ZipFile(
            self.path, "w", compression=zipfile.ZIP_DEFLATED
        )

    def add_entry(self, entry_name: str, data: bytes) -> None:
        if self._archive is None:
            raise ValueError("Archive is closed")
        info = zipfile.ZipInfo(entry_name.replace("\\", "/"), date_time=_EPOCH)
        info.compress_type = zipfile.ZIP_DEFLATED
        info.external_attr = _ENTRY_MODE
        self._archive.writestr(info, data)

    def add_file(self, entry_name: str, source: Path) -> None:
        self.add_entry(entry_name, Path(source).read_bytes())

    def close(self) -> None:
        if self._archive is not None:
            self._archive.close()
            self._archive = None

    def __enter__(self) -> "ArchiveWriter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def open_for_write(path: str | Path) -> ArchiveWriter:
    """Create (or truncate) the archive at ``path``."""

    return ArchiveWriter(Path(path))


__all__ = ["ArchiveWriter", "open_for_write"]
