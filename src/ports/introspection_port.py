"""Facade over type introspection oracles."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Protocol

from contracts.errors import DescriptorFormatError, InvalidInputError
from contracts.loader import descriptor_from_mapping, load_descriptor
from contracts.model import InterfaceDescriptor, MethodSignature


class Introspector(Protocol):
    """Oracle returning the descriptor of a type given its identifier."""

    def describe(self, identifier: str) -> InterfaceDescriptor:
        """Describe ``identifier`` or raise :class:`InvalidInputError`."""


class CatalogIntrospector:
    """Introspector backed by JSON descriptor documents.

    Descriptors are keyed by canonical name. Useful where no JVM is available,
    and for describing interfaces that exist only as generated scaffolding.
    """

    def __init__(self, descriptors: Iterable[InterfaceDescriptor] = ()) -> None:
        self._catalog: Dict[str, InterfaceDescriptor] = {}
        for descriptor in descriptors:
            self.register(descriptor)

    @classmethod
    def from_files(cls, paths: Iterable[str | Path]) -> "CatalogIntrospector":
        descriptors: List[InterfaceDescriptor] = []
        for path in paths:
            try:
                descriptors.append(load_descriptor(path))
            except (OSError, DescriptorFormatError) as exc:
                raise InvalidInputError(f"Could not load descriptor {path}: {exc}") from exc
        return cls(descriptors)

    @classmethod
    def from_mappings(cls, payloads: Iterable[dict]) -> "CatalogIntrospector":
        try:
            return cls(descriptor_from_mapping(payload) for payload in payloads)
        except DescriptorFormatError as exc:
            raise InvalidInputError(str(exc)) from exc

    def register(self, descriptor: InterfaceDescriptor) -> None:
        self._catalog[descriptor.canonical_name] = descriptor

    def describe(self, identifier: str) -> InterfaceDescriptor:
        try:
            return self._catalog[identifier]
        except KeyError:
            raise InvalidInputError(f"Unknown type '{identifier}'") from None


def require_implementable(descriptor: InterfaceDescriptor) -> InterfaceDescriptor:
    """Reject descriptors that cannot be implemented by a generated class."""

    if not descriptor.is_interface:
        raise InvalidInputError(f"Interface expected, got '{descriptor.canonical_name}'")
    if descriptor.is_private:
        raise InvalidInputError(
            f"Can not implement private interface '{descriptor.canonical_name}'"
        )
    return descriptor


def describe(introspector: Introspector, identifier: str) -> InterfaceDescriptor:
    """Describe ``identifier`` and check that it is a non-private interface."""

    return require_implementable(introspector.describe(identifier))


def extract_abstract_methods(descriptor: InterfaceDescriptor) -> List[MethodSignature]:
    """Return the abstract methods of ``descriptor`` in the oracle's order."""

    return [method for method in descriptor.methods if method.abstract]


__all__ = [
    "CatalogIntrospector",
    "Introspector",
    "describe",
    "extract_abstract_methods",
    "require_implementable",
]
