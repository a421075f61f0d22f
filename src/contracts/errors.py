"""Shared error types for the implementor pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

KIND_INVALID_INPUT = "InvalidInput"
KIND_PATH_CREATION = "PathCreationFailure"
KIND_COMPILATION = "CompilationFailure"
KIND_PACKAGING = "PackagingFailure"


class ImplerError(RuntimeError):
    """Fatal failure of a pipeline stage.

    ``kind`` names the failing stage category and ``cause`` carries the
    human-readable reason reported to the caller.
    """

    kind = "ImplerError"

    def __init__(self, cause: str) -> None:
        super().__init__(f"{self.kind}: {cause}")
        self.cause = cause


class InvalidInputError(ImplerError):
    """Target is not an interface, is private, or could not be described."""

    kind = KIND_INVALID_INPUT


class PathCreationError(ImplerError):
    """Output or temporary directories could not be created."""

    kind = KIND_PATH_CREATION


class CompilationError(ImplerError):
    """The external compiler rejected the generated source."""

    kind = KIND_COMPILATION

    def __init__(self, cause: str, diagnostics: str = "") -> None:
        message = cause if not diagnostics else f"{cause}\n{diagnostics.rstrip()}"
        super().__init__(message)
        self.diagnostics = diagnostics


class PackagingError(ImplerError):
    """The archive could not be written."""

    kind = KIND_PACKAGING


class DescriptorFormatError(ValueError):
    """A serialised interface descriptor does not match its schema."""


@dataclass(frozen=True)
class CleanupIssue:
    """Single leftover produced by best-effort workspace deletion."""

    path: Path
    msg: str


__all__ = [
    "KIND_COMPILATION",
    "KIND_INVALID_INPUT",
    "KIND_PACKAGING",
    "KIND_PATH_CREATION",
    "CleanupIssue",
    "CompilationError",
    "DescriptorFormatError",
    "ImplerError",
    "InvalidInputError",
    "PackagingError",
    "PathCreationError",
]
