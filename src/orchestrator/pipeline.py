"""Implementor pipeline (Describe → Generate → Compile → Package)."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, List, Optional

from codegen.synthesizer import impl_name, synthesize
from contracts.errors import (
    CompilationError,
    ImplerError,
    InvalidInputError,
    PackagingError,
    PathCreationError,
)
from contracts.model import InterfaceDescriptor
from ports.archive_port import open_for_write
from ports.compiler_port import Compiler, JavacCompiler, compile_source
from ports.introspection_port import Introspector, describe
from project_config import ImplementorSettings, load_settings

from .journal import OUTCOME_FAILED, OUTCOME_OK, OUTCOME_SOFT_FAILURE, BuildJournal
from .workspace import build_workspace

_LOGGER = logging.getLogger(__name__)


def _name_parts(descriptor: InterfaceDescriptor, suffix: str) -> List[str]:
    parts = descriptor.package.split(".") if descriptor.package else []
    parts.append(impl_name(descriptor, suffix))
    return parts


def relative_source_name(
    descriptor: InterfaceDescriptor,
    separator: str,
    extension: str,
    suffix: str = "Impl",
) -> str:
    """``geo.Shape`` -> ``geo<separator>ShapeImpl<extension>``."""

    return separator.join(_name_parts(descriptor, suffix)) + extension


class Implementor:
    """Generate, compile and package trivial implementations of interfaces.

    One instance may serve many invocations; each archive invocation owns its
    own temporary workspace. Concurrent invocations writing to the same
    destination are not coordinated.
    """

    def __init__(
        self,
        introspector: Introspector,
        compiler: Optional[Compiler] = None,
        *,
        settings: Optional[ImplementorSettings] = None,
        journal: Optional[BuildJournal] = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.introspector = introspector
        self.compiler = compiler or JavacCompiler(self.settings.javac, self.settings.javac_args)
        if journal is None and self.settings.journal_enabled:
            journal = BuildJournal(self.settings.journal_dir)
        self.journal = journal

    # -- paths ---------------------------------------------------------------

    def resolve_destination(self, descriptor: InterfaceDescriptor, root: Path) -> Path:
        """Return the source file path under ``root``, creating its parents."""

        parts = _name_parts(descriptor, self.settings.impl_suffix)
        path = Path(root).joinpath(*parts[:-1], parts[-1] + self.settings.source_extension)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PathCreationError(f"Could not create path {path.parent}: {exc}") from exc
        return path

    def entry_name(self, descriptor: InterfaceDescriptor) -> str:
        return relative_source_name(
            descriptor, "/", self.settings.class_extension, self.settings.impl_suffix
        )

    # -- stages --------------------------------------------------------------

    def _write_source(self, descriptor: InterfaceDescriptor, root: Path) -> Path:
        path = self.resolve_destination(descriptor, root)
        text = synthesize(
            descriptor,
            indent=self.settings.indent,
            suffix=self.settings.impl_suffix,
        )
        with path.open("w", encoding="ascii", newline="\n") as handle:
            handle.write(text)
        _LOGGER.debug("wrote %s", path)
        return path

    def _compile(self, descriptor: InterfaceDescriptor, workspace: Path, source: Path) -> Path:
        classpath = [workspace]
        if descriptor.code_source is not None:
            classpath.append(Path(descriptor.code_source))
        result = compile_source(self.compiler, classpath, source)
        if not result.ok:
            raise CompilationError(
                f"Could not compile {source.name} (exit code {result.exit_code})",
                result.diagnostics,
            )
        return source.with_suffix(self.settings.class_extension)

    def _package(self, entry: str, class_file: Path, archive_path: Path) -> None:
        try:
            with open_for_write(archive_path) as writer:
                writer.add_file(entry, class_file)
        except OSError as exc:
            self._discard_partial(archive_path)
            raise PackagingError(f"Could not create jar file {archive_path}: {exc}") from exc

    @staticmethod
    def _discard_partial(archive_path: Path) -> None:
        try:
            archive_path.unlink(missing_ok=True)
        except OSError as exc:
            _LOGGER.warning("Could not remove partial archive %s: %s", archive_path, exc)

    def _record(self, operation: str, identifier: str, outcome: str, **extra: Any) -> None:
        if self.journal is None:
            return
        event = {"operation": operation, "interface": identifier, "outcome": outcome}
        event.update({key: value for key, value in extra.items() if value is not None})
        self.journal.append(event)

    def _describe(self, operation: str, identifier: str) -> InterfaceDescriptor:
        try:
            return describe(self.introspector, identifier)
        except InvalidInputError as exc:
            self._record(operation, identifier, OUTCOME_FAILED, kind=exc.kind, message=exc.cause)
            raise

    # -- public operations ---------------------------------------------------

    def generate_source(self, identifier: str, output_root: str | Path) -> Optional[Path]:
        """Write the implementation source for ``identifier`` under ``output_root``.

        Raises :class:`InvalidInputError` for unimplementable types. I/O
        failures are logged and reported by returning ``None``.
        """

        descriptor = self._describe("source", identifier)
        try:
            path = self._write_source(descriptor, Path(output_root))
        except (OSError, PathCreationError) as exc:
            _LOGGER.warning("Could not create file for %s: %s", identifier, exc)
            self._record("source", identifier, OUTCOME_SOFT_FAILURE, message=str(exc))
            return None
        self._record("source", identifier, OUTCOME_OK, artifact=str(path))
        return path

    def generate_archive(self, identifier: str, archive_path: str | Path) -> Path:
        """Build a single-entry JAR with the compiled implementation of ``identifier``.

        Every stage failure raises a subclass of :class:`ImplerError`; the
        temporary workspace is removed on every path.
        """

        descriptor = self._describe("archive", identifier)
        archive_path = Path(os.path.abspath(archive_path))
        try:
            with build_workspace(archive_path, self.settings.temp_prefix) as workspace:
                try:
                    source = self._write_source(descriptor, workspace)
                except OSError as exc:
                    raise PathCreationError(f"Could not create file: {exc}") from exc
                class_file = self._compile(descriptor, workspace, source)
                self._package(self.entry_name(descriptor), class_file, archive_path)
        except ImplerError as exc:
            self._record("archive", identifier, OUTCOME_FAILED, kind=exc.kind, message=exc.cause)
            raise
        self._record("archive", identifier, OUTCOME_OK, artifact=str(archive_path))
        return archive_path


def generate_source(
    identifier: str,
    output_root: str | Path,
    *,
    introspector: Introspector,
    settings: Optional[ImplementorSettings] = None,
) -> Optional[Path]:
    return Implementor(introspector, settings=settings).generate_source(identifier, output_root)


def generate_archive(
    identifier: str,
    archive_path: str | Path,
    *,
    introspector: Introspector,
    compiler: Optional[Compiler] = None,
    settings: Optional[ImplementorSettings] = None,
) -> Path:
    return Implementor(introspector, compiler, settings=settings).generate_archive(
        identifier, archive_path
    )


__all__ = [
    "Implementor",
    "generate_archive",
    "generate_source",
    "relative_source_name",
]
