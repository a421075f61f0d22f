"""Facade for the external Java compiler."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

from ._process import run_tool

_LOGGER = logging.getLogger(__name__)

EXIT_TOOL_MISSING = 127


@dataclass(frozen=True)
class CompileResult:
    """Outcome of one compiler invocation."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def diagnostics(self) -> str:
        return "\n".join(part for part in (self.stderr.strip(), self.stdout.strip()) if part)


class Compiler(Protocol):
    """Blocking compiler backend."""

    def run(self, classpath: Sequence[Path], source: Path) -> CompileResult:
        """Compile ``source`` against ``classpath``; class files land beside it."""


class JavacCompiler:
    """Run ``javac`` as a subprocess."""

    def __init__(self, command: str = "javac", extra_args: Sequence[str] = ()) -> None:
        self.command = command
        self.extra_args = tuple(extra_args)

    def argv(self, classpath: Sequence[Path], source: Path) -> list:
        args = [self.command, *self.extra_args]
        if classpath:
            args.extend(["-cp", os.pathsep.join(str(entry) for entry in classpath)])
        args.append(str(source))
        return args

    def run(self, classpath: Sequence[Path], source: Path) -> CompileResult:
        argv = self.argv(classpath, source)
        _LOGGER.debug("running %s", " ".join(argv))
        try:
            completed = run_tool(argv)
        except OSError as exc:
            return CompileResult(exit_code=EXIT_TOOL_MISSING, stderr=f"{self.command}: {exc}")
        return CompileResult(
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


def compile_source(compiler: Compiler, classpath: Sequence[Path], source: Path) -> CompileResult:
    """Dispatch a compilation to ``compiler`` and log non-zero exits."""

    result = compiler.run(list(classpath), source)
    if not result.ok:
        _LOGGER.warning("compiler exited with %s for %s", result.exit_code, source)
    return result


__all__ = ["CompileResult", "Compiler", "JavacCompiler", "compile_source"]
