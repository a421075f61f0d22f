"""Facades over the external collaborators: introspector, compiler, archive."""

from __future__ import annotations

from ._javap import JavapIntrospector
from .archive_port import ArchiveWriter, open_for_write
from .compiler_port import CompileResult, Compiler, JavacCompiler, compile_source
from .introspection_port import (
    CatalogIntrospector,
    Introspector,
    describe,
    extract_abstract_methods,
)

__all__ = [
    "ArchiveWriter",
    "CatalogIntrospector",
    "CompileResult",
    "Compiler",
    "Introspector",
    "JavacCompiler",
    "JavapIntrospector",
    "compile_source",
    "describe",
    "extract_abstract_methods",
    "open_for_write",
]
