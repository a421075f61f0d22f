from __future__ import annotations

from pathlib import Path
from typing import List, Sequence, Tuple

import pytest

from contracts.model import InterfaceDescriptor, MethodSignature, Parameter, TypeRef
from ports.compiler_port import CompileResult
from ports.introspection_port import CatalogIntrospector
from project_config import load_settings


class FakeCompiler:
    """Writes a deterministic pseudo class file next to the source."""

    def __init__(self, exit_code: int = 0, stderr: str = "") -> None:
        self.exit_code = exit_code
        self.stderr = stderr
        self.calls: List[Tuple[List[Path], Path]] = []

    def run(self, classpath: Sequence[Path], source: Path) -> CompileResult:
        self.calls.append((list(classpath), source))
        if self.exit_code == 0:
            source.with_suffix(".class").write_bytes(b"\xca\xfe\xba\xbe" + source.read_bytes())
        return CompileResult(exit_code=self.exit_code, stderr=self.stderr)


def shape_descriptor() -> InterfaceDescriptor:
    return InterfaceDescriptor(
        package="geo",
        simple_name="Shape",
        methods=(
            MethodSignature(name="area", return_type=TypeRef("double")),
            MethodSignature(name="reset", return_type=TypeRef("void")),
            MethodSignature(
                name="scale",
                return_type=TypeRef("geo.Shape"),
                parameters=(
                    Parameter(TypeRef("double"), "factor"),
                    Parameter(TypeRef("java.lang.String"), "unit"),
                ),
            ),
            MethodSignature(name="describe", return_type=TypeRef("java.lang.String"), abstract=False),
        ),
        code_source=Path("/opt/geo/classes"),
    )


@pytest.fixture
def shape() -> InterfaceDescriptor:
    return shape_descriptor()


@pytest.fixture
def settings():
    return load_settings(env={})


@pytest.fixture
def catalog() -> CatalogIntrospector:
    return CatalogIntrospector(
        [
            shape_descriptor(),
            InterfaceDescriptor(package="", simple_name="Marker"),
            InterfaceDescriptor(package="geo", simple_name="Point", is_interface=False),
            InterfaceDescriptor(
                package="geo",
                simple_name="Secret",
                canonical_name="geo.Outer.Secret",
                is_private=True,
            ),
        ]
    )


@pytest.fixture
def fake_compiler() -> FakeCompiler:
    return FakeCompiler()


@pytest.fixture
def compiler_factory():
    return FakeCompiler
