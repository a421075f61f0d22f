"""Implementor pipeline, workspace handling and build journal."""

from .journal import BuildJournal
from .pipeline import Implementor, generate_archive, generate_source, relative_source_name
from .workspace import acquire_workspace, build_workspace, release_workspace

__all__ = [
    "BuildJournal",
    "Implementor",
    "acquire_workspace",
    "build_workspace",
    "generate_archive",
    "generate_source",
    "relative_source_name",
    "release_workspace",
]
