"""Interface descriptor model, error taxonomy and descriptor loading."""

from __future__ import annotations

from .errors import (
    CleanupIssue,
    CompilationError,
    DescriptorFormatError,
    ImplerError,
    InvalidInputError,
    PackagingError,
    PathCreationError,
)
from .loader import descriptor_from_mapping, load_descriptor
from .model import InterfaceDescriptor, MethodSignature, Parameter, TypeRef

__all__ = [
    "CleanupIssue",
    "CompilationError",
    "DescriptorFormatError",
    "ImplerError",
    "InterfaceDescriptor",
    "InvalidInputError",
    "MethodSignature",
    "PackagingError",
    "Parameter",
    "PathCreationError",
    "TypeRef",
    "descriptor_from_mapping",
    "load_descriptor",
]
