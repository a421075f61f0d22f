"""Java source synthesis for trivial interface implementations.

The generated class lives in the interface's package, is named after the
interface with a fixed suffix and implements every abstract method with a
body returning the default value of its return type.
"""

from __future__ import annotations

from typing import Iterable, List

from contracts.model import InterfaceDescriptor, MethodSignature, TypeRef
from ports.introspection_port import extract_abstract_methods

from .encoder import encode

DEFAULT_INDENT = "   "
DEFAULT_SUFFIX = "Impl"
_NEWLINE = "\n"


def impl_name(descriptor: InterfaceDescriptor, suffix: str = DEFAULT_SUFFIX) -> str:
    """Simple name of the implementing class."""

    return f"{descriptor.simple_name}{suffix}"


def default_value_for(type_ref: TypeRef) -> str:
    """Return the literal a method of ``type_ref`` returns.

    ``void`` maps to the empty string: such methods carry no return statement.
    """

    if type_ref.is_primitive:
        if type_ref.is_boolean:
            return "false"
        if type_ref.is_void:
            return ""
        return "0"
    return "null"


def render_parameter_list(signature: MethodSignature) -> str:
    return ", ".join(
        f"{param.type.canonical_name} {param.name}" for param in signature.parameters
    )


def render_method_body(signature: MethodSignature, indent: str = DEFAULT_INDENT) -> str:
    lines: List[str] = [
        f"{indent}public {signature.return_type.canonical_name} {signature.name} "
        f"({render_parameter_list(signature)}) {{",
    ]
    if not signature.return_type.is_void:
        lines.append(f"{indent * 2}return {default_value_for(signature.return_type)};")
    lines.append(f"{indent}}}")
    return _NEWLINE.join(lines) + _NEWLINE


def render_header(descriptor: InterfaceDescriptor, suffix: str = DEFAULT_SUFFIX) -> str:
    package = f"package {descriptor.package};{_NEWLINE}{_NEWLINE}" if descriptor.package else ""
    return (
        f"{package}public class {impl_name(descriptor, suffix)} "
        f"implements {descriptor.canonical_name} {{{_NEWLINE}"
    )


def render_methods(methods: Iterable[MethodSignature], indent: str = DEFAULT_INDENT) -> str:
    return _NEWLINE.join(render_method_body(method, indent) for method in methods)


def synthesize(
    descriptor: InterfaceDescriptor,
    *,
    indent: str = DEFAULT_INDENT,
    suffix: str = DEFAULT_SUFFIX,
) -> str:
    """Return the complete, ASCII-encoded compilation unit for ``descriptor``."""

    parts = (
        render_header(descriptor, suffix),
        render_methods(extract_abstract_methods(descriptor), indent),
        "}" + _NEWLINE,
    )
    return "".join(encode(part) for part in parts)


__all__ = [
    "DEFAULT_INDENT",
    "DEFAULT_SUFFIX",
    "default_value_for",
    "impl_name",
    "render_header",
    "render_method_body",
    "render_methods",
    "render_parameter_list",
    "synthesize",
]
