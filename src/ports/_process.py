"""Helpers for running external JDK tools."""

from __future__ import annotations

import os
import subprocess
from typing import Dict, Mapping, Sequence

# Tool diagnostics are parsed and surfaced verbatim; keep them unlocalised.
_TOOL_ENV = {"LC_ALL": "C", "LANG": "C"}


def build_env(overrides: Mapping[str, str] | None = None) -> Dict[str, str]:
    """Merge process environment with the tool defaults and optional overrides."""

    env: Dict[str, str] = {str(k): str(v) for k, v in os.environ.items()}
    env.update(_TOOL_ENV)
    if overrides:
        env.update({str(k): str(v) for k, v in overrides.items()})
    return env


def run_tool(
    argv: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
) -> subprocess.CompletedProcess:
    """Run ``argv`` to completion, capturing text output.

    :class:`FileNotFoundError` propagates when the executable is missing.
    """

    return subprocess.run(
        [str(arg) for arg in argv],
        capture_output=True,
        text=True,
        env=build_env(env),
        check=False,
    )


__all__ = ["build_env", "run_tool"]
