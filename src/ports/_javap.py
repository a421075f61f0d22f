"""Introspection of compiled Java types through ``javap -v``."""

from __future__ import annotations

import logging
import os
import re
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Tuple

from contracts.errors import InvalidInputError
from contracts.model import InterfaceDescriptor, MethodSignature, Parameter, TypeRef

from ._process import run_tool

_LOGGER = logging.getLogger(__name__)

_BASE_TYPES = {
    "B": "byte",
    "C": "char",
    "D": "double",
    "F": "float",
    "I": "int",
    "J": "long",
    "S": "short",
    "Z": "boolean",
    "V": "void",
}

_HEADER_RE = re.compile(r"^(?P<mods>(?:[a-z]+ )*)(?P<kind>class|interface|enum|record) (?P<rest>\S.*)$")
_FLAGS_RE = re.compile(r"ACC_[A-Z]+")
_INNER_RE = re.compile(r"^\s+(?P<mods>[a-z ]*?)\s*#\d+(?:= #\d+ of #\d+)?;\s*//\s*\S*=class (?P<inner>\S+)")


def binary_to_canonical(binary_name: str) -> str:
    """``geo/Outer$Inner`` or ``geo.Outer$Inner`` -> ``geo.Outer.Inner``."""

    return binary_name.replace("/", ".").replace("$", ".")


def _decode_field(descriptor: str, index: int) -> Tuple[str, int]:
    dimensions = 0
    while descriptor[index] == "[":
        dimensions += 1
        index += 1
    code = descriptor[index]
    if code == "L":
        end = descriptor.index(";", index)
        name = binary_to_canonical(descriptor[index + 1 : end])
        index = end + 1
    elif code in _BASE_TYPES:
        name = _BASE_TYPES[code]
        index += 1
    else:
        raise ValueError(f"Malformed type descriptor {descriptor!r} at {index}")
    return name + "[]" * dimensions, index


def decode_method_descriptor(descriptor: str) -> Tuple[List[TypeRef], TypeRef]:
    """Decode a JVM method descriptor into parameter and return types.

    >>> decode_method_descriptor("(I[Ljava/lang/String;)V")[0][1]
    TypeRef(canonical_name='java.lang.String[]')
    """

    if not descriptor.startswith("("):
        raise ValueError(f"Not a method descriptor: {descriptor!r}")
    params: List[TypeRef] = []
    index = 1
    try:
        while descriptor[index] != ")":
            name, index = _decode_field(descriptor, index)
            params.append(TypeRef(name))
        return_name, end = _decode_field(descriptor, index + 1)
    except IndexError:
        raise ValueError(f"Truncated method descriptor {descriptor!r}") from None
    if end != len(descriptor):
        raise ValueError(f"Trailing data in method descriptor {descriptor!r}")
    return params, TypeRef(return_name)


def _erase_generics(text: str) -> str:
    """Drop every balanced ``<...>`` group from ``text``."""

    kept: List[str] = []
    depth = 0
    for ch in text:
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth = max(depth - 1, 0)
        elif depth == 0:
            kept.append(ch)
    return "".join(kept)


def _member_name(declaration: str) -> str:
    head = declaration.split("(", 1)[0].split()
    return head[-1] if head else ""


@dataclass
class ClassListing:
    """Parsed subset of ``javap -v`` output for a single class."""

    name: str = ""
    header_kind: str = ""
    flags: Set[str] = field(default_factory=set)
    supertypes: List[str] = field(default_factory=list)
    methods: List[Tuple[str, str, Set[str]]] = field(default_factory=list)
    private_inner: Set[str] = field(default_factory=set)

    @property
    def is_interface(self) -> bool:
        if self.flags:
            return "ACC_INTERFACE" in self.flags
        return self.header_kind == "interface"


def parse_listing(text: str) -> ClassListing:
    """Parse verbose ``javap`` output into a :class:`ClassListing`."""

    listing = ClassListing()
    section = "preamble"
    pending: Optional[str] = None
    descriptor: Optional[str] = None

    for line in text.splitlines():
        if section == "preamble":
            match = _HEADER_RE.match(line)
            if match:
                listing.header_kind = match.group("kind")
                tokens = _erase_generics(match.group("rest")).replace(",", " ").split()
                listing.name = tokens[0]
                listing.supertypes = [
                    token for token in tokens[1:] if token not in {"extends", "implements"}
                ]
                section = "header"
            continue
        if section == "header":
            stripped = line.strip()
            if stripped.startswith("flags:") and not listing.flags:
                listing.flags = set(_FLAGS_RE.findall(stripped))
            elif line.startswith("{"):
                section = "members"
            continue
        if section == "members":
            if line.startswith("}"):
                section = "trailer"
            elif line.startswith("  ") and not line.startswith("   ") and line.rstrip().endswith(";"):
                pending, descriptor = line.strip().rstrip(";"), None
            elif pending is not None and line.strip().startswith("descriptor:"):
                descriptor = line.split(":", 1)[1].strip()
            elif pending is not None and descriptor is not None and line.strip().startswith("flags:"):
                if descriptor.startswith("("):
                    listing.methods.append(
                        (_member_name(pending), descriptor, set(_FLAGS_RE.findall(line)))
                    )
                pending, descriptor = None, None
            continue
        if section == "trailer":
            if line.startswith("InnerClasses:"):
                section = "inner"
            continue
        if section == "inner":
            if line and not line[0].isspace():
                section = "trailer"
                continue
            match = _INNER_RE.match(line)
            if match and "private" in match.group("mods").split():
                listing.private_inner.add(match.group("inner").replace("/", "."))
    return listing


class JavapIntrospector:
    """Describe compiled interfaces found on ``classpath`` using ``javap``.

    Types are taken from erased JVM descriptors. Parameter names are not kept
    in class files by default, so parameters are named ``arg0..argN``.
    Inherited abstract methods from superinterfaces are included; a method
    seen first in a more specific interface shadows inherited declarations
    with the same name and parameter types.
    """

    def __init__(self, classpath: Sequence[str | Path] = (), command: str = "javap") -> None:
        self.classpath = [Path(entry) for entry in classpath]
        self.command = command
        self._listings: Dict[str, ClassListing] = {}

    def _classpath_arg(self) -> List[str]:
        if not self.classpath:
            return []
        return ["-cp", os.pathsep.join(str(entry) for entry in self.classpath)]

    def _listing(self, identifier: str) -> ClassListing:
        cached = self._listings.get(identifier)
        if cached is not None:
            return cached
        argv = [self.command, "-v", *self._classpath_arg(), identifier]
        _LOGGER.debug("running %s", " ".join(argv))
        try:
            completed = run_tool(argv)
        except OSError as exc:
            raise InvalidInputError(f"Could not run {self.command}: {exc}") from exc
        if completed.returncode != 0:
            detail = (completed.stderr or completed.stdout).strip()
            raise InvalidInputError(f"Could not describe '{identifier}': {detail}")
        listing = parse_listing(completed.stdout)
        if not listing.name:
            raise InvalidInputError(f"Unrecognised javap output for '{identifier}'")
        self._listings[identifier] = listing
        return listing

    def locate(self, binary_name: str) -> Optional[Path]:
        """Return the classpath entry holding ``binary_name``, if any."""

        relative = binary_name.replace(".", "/") + ".class"
        for entry in self.classpath:
            if entry.is_dir():
                if (entry / relative).is_file():
                    return entry
            elif entry.is_file() and zipfile.is_zipfile(entry):
                with zipfile.ZipFile(entry) as archive:
                    if relative in archive.namelist():
                        return entry
        return None

    def _collect_methods(self, binary_name: str, seen: Set[str]) -> List[MethodSignature]:
        if binary_name in seen:
            return []
        seen.add(binary_name)
        listing = self._listing(binary_name)
        methods: List[MethodSignature] = []
        for name, descriptor, flags in listing.methods:
            if flags & {"ACC_STATIC", "ACC_SYNTHETIC", "ACC_BRIDGE", "ACC_PRIVATE"}:
                continue
            try:
                param_types, return_type = decode_method_descriptor(descriptor)
            except ValueError as exc:
                raise InvalidInputError(f"{binary_name}.{name}: {exc}") from exc
            methods.append(
                MethodSignature(
                    name=name,
                    return_type=return_type,
                    parameters=tuple(
                        Parameter(type=param, name=f"arg{index}")
                        for index, param in enumerate(param_types)
                    ),
                    abstract="ACC_ABSTRACT" in flags,
                )
            )
        if listing.is_interface:
            for supertype in listing.supertypes:
                methods.extend(self._collect_methods(supertype, seen))
        return methods

    def describe(self, identifier: str) -> InterfaceDescriptor:
        listing = self._listing(identifier)
        binary_name = listing.name
        package, _, local_name = binary_name.rpartition(".")
        simple_name = local_name.rsplit("$", 1)[-1]

        methods: List[MethodSignature] = []
        keys: Set[Tuple[str, Tuple[str, ...]]] = set()
        for method in self._collect_methods(binary_name, set()):
            key = (method.name, method.parameter_types)
            if key in keys:
                continue
            keys.add(key)
            methods.append(method)

        return InterfaceDescriptor(
            package=package,
            simple_name=simple_name,
            methods=tuple(methods),
            is_interface=listing.is_interface,
            is_private=binary_name in listing.private_inner,
            code_source=self.locate(binary_name),
            canonical_name=binary_to_canonical(binary_name),
        )


__all__ = [
    "ClassListing",
    "JavapIntrospector",
    "binary_to_canonical",
    "decode_method_descriptor",
    "parse_listing",
]
