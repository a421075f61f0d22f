"""Schema-validated loading of serialised interface descriptors."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Dict, List, Mapping

import jsonschema

from .errors import DescriptorFormatError
from .model import InterfaceDescriptor, MethodSignature, Parameter, TypeRef

_SCHEMA_ROOT = Path(__file__).resolve().parent / "schemas"
_DESCRIPTOR_SCHEMA = "interface.schema.json"

_schema_cache: Dict[str, Dict[str, Any]] = {}
_compiled_cache: Dict[str, Any] = {}


def load_schema(schema_path: str = _DESCRIPTOR_SCHEMA) -> Dict[str, Any]:
    """Load a JSON schema shipped with the contracts package."""

    resolved = (_SCHEMA_ROOT / schema_path).resolve()
    if not str(resolved).startswith(str(_SCHEMA_ROOT)):
        raise ValueError("Schema path escapes the schemas directory")

    cache_key = str(resolved)
    if cache_key not in _schema_cache:
        _schema_cache[cache_key] = json.loads(resolved.read_text("utf-8"))
    return copy.deepcopy(_schema_cache[cache_key])


def compile_schema(schema_dict: Dict[str, Any]) -> Any:
    """Return a cached ``jsonschema`` validator for *schema_dict*."""

    cache_key = schema_dict.get("$id", "")
    if cache_key in _compiled_cache:
        return _compiled_cache[cache_key]

    validator_cls = jsonschema.validators.validator_for(schema_dict)
    validator_cls.check_schema(schema_dict)
    validator = validator_cls(schema_dict)
    _compiled_cache[cache_key] = validator
    return validator


def _json_path(error: jsonschema.ValidationError) -> str:
    components: List[str] = ["$"]
    for part in error.absolute_path:
        if isinstance(part, int):
            components.append(f"[{part}]")
        else:
            components.append(f".{part}")
    return "".join(components)


def validate_payload(payload: Any) -> None:
    """Raise :class:`DescriptorFormatError` listing every schema violation."""

    validator = compile_schema(load_schema())
    errors = sorted(
        validator.iter_errors(payload),
        key=lambda err: [str(part) for part in err.absolute_path],
    )
    if errors:
        details = "; ".join(f"{_json_path(err)}: {err.message}" for err in errors[:5])
        raise DescriptorFormatError(f"Invalid interface descriptor: {details}")


def descriptor_from_mapping(payload: Mapping[str, Any], *, base_dir: Path | None = None) -> InterfaceDescriptor:
    """Build an :class:`InterfaceDescriptor` from a validated JSON object.

    A relative ``code_source`` is resolved against ``base_dir``.
    """

    validate_payload(payload)

    methods = []
    for entry in payload["methods"]:
        parameters = tuple(
            Parameter(type=TypeRef(param["type"]), name=param["name"])
            for param in entry.get("parameters", [])
        )
        methods.append(
            MethodSignature(
                name=entry["name"],
                return_type=TypeRef(entry["return_type"]),
                parameters=parameters,
                abstract=entry.get("abstract", True),
            )
        )

    code_source = None
    if payload.get("code_source"):
        code_source = Path(payload["code_source"])
        if base_dir is not None and not code_source.is_absolute():
            code_source = base_dir / code_source

    return InterfaceDescriptor(
        package=payload.get("package", ""),
        simple_name=payload["simple_name"],
        methods=tuple(methods),
        is_interface=payload.get("kind", "interface") == "interface",
        is_private=payload.get("private", False),
        code_source=code_source,
        canonical_name=payload.get("canonical_name", ""),
    )


def load_descriptor(path: str | Path) -> InterfaceDescriptor:
    """Read and validate a descriptor document from *path*."""

    path = Path(path)
    try:
        payload = json.loads(path.read_text("utf-8"))
    except json.JSONDecodeError as exc:
        raise DescriptorFormatError(f"{path}: invalid JSON: {exc}") from exc
    return descriptor_from_mapping(payload, base_dir=path.resolve().parent)


__all__ = [
    "compile_schema",
    "descriptor_from_mapping",
    "load_descriptor",
    "load_schema",
    "validate_payload",
]
