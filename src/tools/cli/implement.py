"""Command line front end for the interface implementor."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Dict, List

from contracts.errors import ImplerError
from orchestrator.pipeline import Implementor
from ports import JavapIntrospector
from ports.introspection_port import CatalogIntrospector, Introspector
from project_config import ImplementorSettings, load_settings


def _settings(args: argparse.Namespace) -> ImplementorSettings:
    overrides: Dict[str, object] = {
        "javac": args.javac,
        "javap": args.javap,
        "impl_suffix": args.suffix,
    }
    if args.journal_dir is not None:
        overrides["journal_enabled"] = True
        overrides["journal_dir"] = args.journal_dir
    return load_settings(overrides=overrides)


def _split_classpath(values: List[str]) -> List[str]:
    entries: List[str] = []
    for value in values:
        entries.extend(part for part in value.split(os.pathsep) if part)
    return entries


def _introspector(args: argparse.Namespace, settings: ImplementorSettings) -> Introspector:
    if args.descriptor:
        return CatalogIntrospector.from_files(args.descriptor)
    return JavapIntrospector(_split_classpath(args.classpath), command=settings.javap)


def cmd_source(args: argparse.Namespace) -> int:
    settings = _settings(args)
    implementor = Implementor(_introspector(args, settings), settings=settings)
    path = implementor.generate_source(args.interface, Path(args.out))
    if path is None:
        print(f"Could not write source for {args.interface}", file=sys.stderr)
        return 1
    print(path)
    return 0


def cmd_jar(args: argparse.Namespace) -> int:
    settings = _settings(args)
    implementor = Implementor(_introspector(args, settings), settings=settings)
    print(implementor.generate_archive(args.interface, Path(args.jar)))
    return 0


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("interface", help="Binary name of the interface, e.g. geo.Shape")
    parser.add_argument(
        "--classpath",
        "-cp",
        action="append",
        default=[],
        help="Classpath used to locate the interface (repeatable)",
    )
    parser.add_argument(
        "--descriptor",
        action="append",
        default=[],
        help="JSON interface descriptor to use instead of javap (repeatable)",
    )
    parser.add_argument("--javac", default=None, help="Compiler executable")
    parser.add_argument("--javap", default=None, help="Class file disassembler executable")
    parser.add_argument("--suffix", default=None, help="Suffix of the generated class name")
    parser.add_argument("--journal-dir", default=None, help="Record invocations as JSONL under this directory")
    parser.add_argument("--verbose", "-v", action="store_true")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate default implementations of Java interfaces")
    sub = parser.add_subparsers(dest="command", required=True)

    source = sub.add_parser("source", help="Write the implementation source file")
    _add_common(source)
    source.add_argument("--out", default=".", help="Root directory for generated sources")
    source.set_defaults(func=cmd_source)

    jar = sub.add_parser("jar", help="Compile the implementation into a single-entry JAR")
    _add_common(jar)
    jar.add_argument("--jar", required=True, help="Destination archive")
    jar.set_defaults(func=cmd_jar)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except (ImplerError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
