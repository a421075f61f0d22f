from __future__ import annotations

import json
import logging
import zipfile
from pathlib import Path

import pytest

from codegen.synthesizer import synthesize
from contracts.errors import (
    CleanupIssue,
    CompilationError,
    InvalidInputError,
    PackagingError,
    PathCreationError,
)
from orchestrator import workspace as workspace_module
from orchestrator.journal import BuildJournal
from orchestrator.pipeline import Implementor, generate_source, relative_source_name


def _entries(jar: Path) -> dict:
    with zipfile.ZipFile(jar) as archive:
        return {info.filename: archive.read(info) for info in archive.infolist()}


def test_relative_source_name(shape):
    assert relative_source_name(shape, "/", ".class") == "geo/ShapeImpl.class"


def test_generate_source_mirrors_package(catalog, settings, tmp_path):
    path = Implementor(catalog, settings=settings).generate_source("geo.Shape", tmp_path / "src")

    assert path == tmp_path / "src" / "geo" / "ShapeImpl.java"
    text = path.read_text(encoding="ascii")
    assert text == synthesize(catalog.describe("geo.Shape"))


def test_generate_source_in_unnamed_package(catalog, settings, tmp_path):
    path = generate_source("Marker", tmp_path, introspector=catalog, settings=settings)
    assert path == tmp_path / "MarkerImpl.java"


def test_generate_source_write_failure_is_soft(catalog, settings, tmp_path, caplog):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        result = Implementor(catalog, settings=settings).generate_source("geo.Shape", blocker)

    assert result is None
    assert "Could not create file for geo.Shape" in caplog.text


@pytest.mark.parametrize("identifier", ["geo.Point", "geo.Outer.Secret"])
def test_invalid_input_fails_before_any_io(catalog, settings, fake_compiler, tmp_path, identifier):
    implementor = Implementor(catalog, fake_compiler, settings=settings)
    with pytest.raises(InvalidInputError):
        implementor.generate_source(identifier, tmp_path / "src")
    with pytest.raises(InvalidInputError):
        implementor.generate_archive(identifier, tmp_path / "out" / "impl.jar")
    assert list(tmp_path.iterdir()) == []


def test_generate_archive_packages_single_entry(catalog, settings, fake_compiler, tmp_path):
    jar = tmp_path / "out" / "shape.jar"

    result = Implementor(catalog, fake_compiler, settings=settings).generate_archive("geo.Shape", jar)

    assert result == jar
    entries = _entries(jar)
    assert list(entries) == ["geo/ShapeImpl.class"]
    assert entries["geo/ShapeImpl.class"].startswith(b"\xca\xfe\xba\xbe")
    assert list((tmp_path / "out").iterdir()) == [jar]

    classpath, source = fake_compiler.calls[0]
    assert classpath[0] == source.parents[1]
    assert classpath[1] == Path("/opt/geo/classes")
    assert source.name == "ShapeImpl.java"


def test_generate_archive_is_reproducible(catalog, settings, fake_compiler, tmp_path):
    implementor = Implementor(catalog, fake_compiler, settings=settings)
    first = implementor.generate_archive("geo.Shape", tmp_path / "a" / "impl.jar")
    second = implementor.generate_archive("geo.Shape", tmp_path / "b" / "impl.jar")

    assert _entries(first) == _entries(second)
    assert first.read_bytes() == second.read_bytes()


def test_compilation_failure_is_fatal_and_cleans_up(catalog, settings, compiler_factory, tmp_path):
    compiler = compiler_factory(exit_code=1, stderr="ShapeImpl.java:3: error: cannot find symbol")
    jar = tmp_path / "out" / "shape.jar"

    with pytest.raises(CompilationError) as excinfo:
        Implementor(catalog, compiler, settings=settings).generate_archive("geo.Shape", jar)

    assert excinfo.value.kind == "CompilationFailure"
    assert "cannot find symbol" in str(excinfo.value)
    assert list((tmp_path / "out").iterdir()) == []


def test_packaging_failure_is_fatal_and_cleans_up(catalog, settings, fake_compiler, tmp_path):
    jar = tmp_path / "out" / "shape.jar"
    jar.mkdir(parents=True)

    with pytest.raises(PackagingError):
        Implementor(catalog, fake_compiler, settings=settings).generate_archive("geo.Shape", jar)

    assert list((tmp_path / "out").iterdir()) == [jar]


def test_unwritable_archive_parent_is_path_creation_failure(catalog, settings, fake_compiler, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(PathCreationError):
        Implementor(catalog, fake_compiler, settings=settings).generate_archive(
            "geo.Shape", blocker / "out" / "shape.jar"
        )


def test_cleanup_issues_never_mask_failures(
    catalog, settings, compiler_factory, tmp_path, monkeypatch, caplog
):
    def _stuck(path):
        return [CleanupIssue(path=path, msg="device busy")]

    monkeypatch.setattr(workspace_module, "release_workspace", _stuck)
    compiler = compiler_factory(exit_code=2)

    with caplog.at_level(logging.WARNING):
        with pytest.raises(CompilationError):
            Implementor(catalog, compiler, settings=settings).generate_archive(
                "geo.Shape", tmp_path / "shape.jar"
            )

    assert "device busy" in caplog.text


def test_journal_records_outcomes(catalog, settings, compiler_factory, tmp_path):
    journal = BuildJournal(tmp_path / "journal")
    implementor = Implementor(catalog, compiler_factory(exit_code=1), settings=settings, journal=journal)

    implementor.generate_source("geo.Shape", tmp_path / "src")
    with pytest.raises(CompilationError):
        implementor.generate_archive("geo.Shape", tmp_path / "out" / "shape.jar")

    lines = journal.current_path.read_text(encoding="utf-8").splitlines()
    events = [json.loads(line) for line in lines]
    assert [event["outcome"] for event in events] == ["ok", "failed"]
    assert events[1]["kind"] == "CompilationFailure"
    assert events[0]["artifact"].endswith("ShapeImpl.java")


@pytest.mark.parametrize("operation", ["source", "archive"])
def test_journal_records_rejected_interfaces(catalog, settings, fake_compiler, tmp_path, operation):
    journal = BuildJournal(tmp_path / "journal")
    implementor = Implementor(catalog, fake_compiler, settings=settings, journal=journal)

    with pytest.raises(InvalidInputError):
        if operation == "source":
            implementor.generate_source("geo.Point", tmp_path / "src")
        else:
            implementor.generate_archive("geo.Point", tmp_path / "out" / "point.jar")

    (event,) = list(journal.events())
    assert event["operation"] == operation
    assert event["interface"] == "geo.Point"
    assert event["outcome"] == "failed"
    assert event["kind"] == "InvalidInput"
    assert "Interface expected" in event["message"]
    assert not (tmp_path / "src").exists()
    assert not (tmp_path / "out").exists()
