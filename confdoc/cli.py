"""CLI entrypoints for confdoc commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .engine import BuildEngine, scan_project
from .errors import ConfDocError
from .extract import build_definition
from .logging import configure_logging
from .registry import Registry


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to .confdoc.yml (defaults to <path>/.confdoc.yml).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="confdoc",
        description="Generate markdown configuration tables from annotated classes.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Scan sources and patch every requested target document.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    _add_path_arguments(build_parser)
    build_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the changes that would be written without touching any file.",
    )
    build_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with an error when a root cannot be resolved.",
    )

    list_parser = subparsers.add_parser(
        "list",
        help="List annotated definitions and their generation requests.",
    )
    _add_verbose_option(list_parser, suppress_default=True)
    _add_path_arguments(list_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for confdoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    root = Path(args.path).expanduser().resolve()
    try:
        config = load_config(Path(args.config) if args.config else root)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    configure_logging(config, verbose=bool(args.verbose))

    if args.command == "build":
        dry_run = bool(getattr(args, "dry_run", False))
        strict = bool(getattr(args, "strict", False)) or config.strict
        engine = BuildEngine(Registry(), root=config.root, dry_run=dry_run)
        try:
            with engine.session():
                report = engine.build(scan_project(config))
        except ConfDocError as exc:
            parser.exit(1, f"confdoc build failed: {exc}\n")

        for outcome in report.outcomes:
            rel_path = _relativize(outcome.path)
            if not outcome.changed:
                print(f"{rel_path} already up to date")
            elif dry_run:
                print(f"{rel_path} changes (dry-run):")
                print(outcome.diff or "(no diff)")
            else:
                print(f"{rel_path} updated")
        if report.unresolved and strict:
            names = ", ".join(sorted(report.unresolved))
            parser.exit(1, f"Unresolved documentation roots: {names}\n")
    elif args.command == "list":
        try:
            definitions = [build_definition(raw) for raw in scan_project(config)]
        except ConfDocError as exc:
            parser.exit(1, f"confdoc list failed: {exc}\n")
        for definition in definitions:
            line = f"{definition.identifier} ({len(definition.fields)} fields)"
            if definition.flatten_refs:
                line += f" flattens {', '.join(definition.flatten_refs)}"
            if definition.request is not None:
                request = definition.request
                line += f" -> {request.target} [{request.format.value}]"
            print(line)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
