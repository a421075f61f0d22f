"""Utility helpers for loading project-wide configuration."""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import-untyped]


_CONFIG_FILENAME = "config.toml"

_DEFAULTS: Dict[str, Any] = {
    "implementor": {
        "impl_suffix": "Impl",
        "indent": "   ",
        "source_extension": ".java",
        "class_extension": ".class",
        "temp_prefix": "temp",
    },
    "compiler": {
        "command": "javac",
        "extra_args": [],
    },
    "introspector": {
        "command": "javap",
    },
    "journal": {
        "enabled": False,
        "dir": "logs/implementor",
    },
}


def _config_path() -> Path:
    return Path(__file__).resolve().parents[1] / _CONFIG_FILENAME


def _merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@lru_cache(maxsize=1)
def get_config() -> Dict[str, Any]:
    """Load and cache the project configuration layered over built-in defaults."""
    path = _config_path()
    if not path.exists():
        return copy.deepcopy(_DEFAULTS)
    with path.open("rb") as fh:
        return _merge(copy.deepcopy(_DEFAULTS), tomllib.load(fh))


def reload() -> None:
    """Clear the cached configuration."""

    get_config.cache_clear()


def get_section(path: str, default: Any = None) -> Any:
    """Retrieve a nested configuration value using dotted notation."""

    data: Any = get_config()
    for part in path.split("."):
        if isinstance(data, dict) and part in data:
            data = data[part]
        else:
            if default is not None:
                return default
            raise KeyError(f"Configuration path '{path}' not found")
    return data


@dataclass(frozen=True)
class ImplementorSettings:
    """Finalised settings after config, environment and caller precedence."""

    impl_suffix: str
    indent: str
    source_extension: str
    class_extension: str
    temp_prefix: str
    javac: str
    javac_args: Tuple[str, ...]
    javap: str
    journal_enabled: bool
    journal_dir: Path


def _coerce_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalised = value.strip().lower()
        if normalised in {"1", "true", "yes", "on"}:
            return True
        if normalised in {"0", "false", "no", "off"}:
            return False
    return None


_ENV_KEYS = {
    "javac": "IMPLEMENTOR_JAVAC",
    "javap": "IMPLEMENTOR_JAVAP",
    "impl_suffix": "IMPLEMENTOR_IMPL_SUFFIX",
    "journal_enabled": "IMPLEMENTOR_JOURNAL_ENABLED",
    "journal_dir": "IMPLEMENTOR_JOURNAL_DIR",
}


def _env_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for field, alias in _ENV_KEYS.items():
        value = env.get(alias)
        if value:
            payload[field] = value
    return payload


def load_settings(
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ImplementorSettings:
    """Resolve :class:`ImplementorSettings` from config, ``env`` and ``overrides``.

    Later sources win: the TOML file is overridden by ``IMPLEMENTOR_*``
    environment variables, which are overridden by explicit ``overrides``
    (typically coming from the command line). ``None`` values in
    ``overrides`` are ignored.
    """

    env_map = os.environ if env is None else env
    implementor = get_section("implementor")
    values: Dict[str, Any] = {
        "impl_suffix": implementor["impl_suffix"],
        "indent": implementor["indent"],
        "source_extension": implementor["source_extension"],
        "class_extension": implementor["class_extension"],
        "temp_prefix": implementor["temp_prefix"],
        "javac": get_section("compiler.command"),
        "javac_args": get_section("compiler.extra_args"),
        "javap": get_section("introspector.command"),
        "journal_enabled": get_section("journal.enabled"),
        "journal_dir": get_section("journal.dir"),
    }
    values.update(_env_overrides(env_map))
    if overrides:
        values.update({key: value for key, value in overrides.items() if value is not None})

    enabled = _coerce_bool(values["journal_enabled"])
    if enabled is None:
        raise ValueError(f"journal_enabled must be a boolean, got {values['journal_enabled']!r}")
    if not values["impl_suffix"]:
        raise ValueError("impl_suffix must be a non-empty string")

    return ImplementorSettings(
        impl_suffix=str(values["impl_suffix"]),
        indent=str(values["indent"]),
        source_extension=str(values["source_extension"]),
        class_extension=str(values["class_extension"]),
        temp_prefix=str(values["temp_prefix"]),
        javac=str(values["javac"]),
        javac_args=tuple(str(arg) for arg in values["javac_args"]),
        javap=str(values["javap"]),
        journal_enabled=enabled,
        journal_dir=Path(values["journal_dir"]),
    )


__all__ = ["ImplementorSettings", "get_config", "get_section", "load_settings", "reload"]
