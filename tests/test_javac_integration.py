"""End-to-end runs against a real JDK; skipped when ``javac``/``javap`` are absent."""

from __future__ import annotations

import os
import shutil
import subprocess
import zipfile

import pytest

from orchestrator.pipeline import Implementor
from ports import JavacCompiler, JavapIntrospector

pytestmark = pytest.mark.skipif(
    shutil.which("javac") is None or shutil.which("javap") is None,
    reason="JDK tools not available",
)

_SHAPE = """\
package geo;

import java.util.List;

public interface Shape extends Runnable {
    double area();
    void reset();
    Shape scale(double factor, String unit);
    List<String> tags(int[] ids, char c);
    default String describe() { return "shape"; }
    static Shape unit() { return null; }
}
"""


@pytest.fixture
def compiled_interface(tmp_path):
    sources = tmp_path / "src" / "geo"
    sources.mkdir(parents=True)
    (sources / "Shape.java").write_text(_SHAPE, encoding="ascii")
    classes = tmp_path / "classes"
    subprocess.run(
        ["javac", "-d", str(classes), str(sources / "Shape.java")],
        check=True,
        capture_output=True,
    )
    return classes


def test_archive_contains_loadable_class(compiled_interface, settings, tmp_path):
    introspector = JavapIntrospector([compiled_interface], command="javap")
    implementor = Implementor(introspector, JavacCompiler("javac"), settings=settings)

    jar = implementor.generate_archive("geo.Shape", tmp_path / "out" / "shape.jar")

    with zipfile.ZipFile(jar) as archive:
        assert archive.namelist() == ["geo/ShapeImpl.class"]
    assert list((tmp_path / "out").iterdir()) == [jar]

    listing = subprocess.run(
        ["javap", "-cp", os.pathsep.join([str(jar), str(compiled_interface)]), "geo.ShapeImpl"],
        check=True,
        capture_output=True,
        text=True,
    ).stdout
    assert "implements geo.Shape" in listing
    assert "public void run()" in listing


def test_source_lists_inherited_abstract_methods(compiled_interface, settings, tmp_path):
    introspector = JavapIntrospector([compiled_interface], command="javap")
    path = Implementor(introspector, settings=settings).generate_source("geo.Shape", tmp_path)

    text = path.read_text(encoding="ascii")
    assert "public double area () {" in text
    assert "public void reset () {" in text
    assert "public java.util.List tags (int[] arg0, char arg1) {" in text
    assert "public void run () {" in text
    assert "describe" not in text
    assert "unit" not in text
