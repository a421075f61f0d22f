"""Immutable data model describing an interface and its method surface."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

BOOLEAN = "boolean"
VOID = "void"
NUMERIC_PRIMITIVES = ("byte", "char", "short", "int", "long", "float", "double")
PRIMITIVE_NAMES = (BOOLEAN, VOID) + NUMERIC_PRIMITIVES


@dataclass(frozen=True)
class TypeRef:
    """Reference to a type by its canonical source-level name."""

    canonical_name: str

    @property
    def is_primitive(self) -> bool:
        return self.canonical_name in PRIMITIVE_NAMES

    @property
    def is_void(self) -> bool:
        return self.canonical_name == VOID

    @property
    def is_boolean(self) -> bool:
        return self.canonical_name == BOOLEAN

    def __str__(self) -> str:
        return self.canonical_name


@dataclass(frozen=True)
class Parameter:
    type: TypeRef
    name: str


@dataclass(frozen=True)
class MethodSignature:
    """Declared method of an interface.

    ``abstract`` is false for default and static members; those are reported
    by introspectors but skipped during generation.
    """

    name: str
    return_type: TypeRef
    parameters: Tuple[Parameter, ...] = ()
    abstract: bool = True

    @property
    def parameter_types(self) -> Tuple[str, ...]:
        return tuple(param.type.canonical_name for param in self.parameters)


@dataclass(frozen=True)
class InterfaceDescriptor:
    """Read-only description of a type returned by an introspector.

    ``package`` is the empty string for the unnamed package. ``canonical_name``
    differs from ``package.simple_name`` for nested types and is derived when
    not supplied.
    """

    package: str
    simple_name: str
    methods: Tuple[MethodSignature, ...] = ()
    is_interface: bool = True
    is_private: bool = False
    code_source: Optional[Path] = None
    canonical_name: str = field(default="")

    def __post_init__(self) -> None:
        if not self.canonical_name:
            derived = f"{self.package}.{self.simple_name}" if self.package else self.simple_name
            object.__setattr__(self, "canonical_name", derived)


__all__ = [
    "BOOLEAN",
    "NUMERIC_PRIMITIVES",
    "PRIMITIVE_NAMES",
    "VOID",
    "InterfaceDescriptor",
    "MethodSignature",
    "Parameter",
    "TypeRef",
]
