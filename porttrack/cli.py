"""CLI entrypoints for porttrack commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from .config import ConfigError
from .coverage import summarize
from .logging import configure_logging
from .models import AnalysisResult, CategorySummary
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_project_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project root holding .porttrack.yml and the sources (defaults to current directory).",
    )
    parser.add_argument(
        "--config",
        dest="config_file",
        default=None,
        help="Read settings from this YAML file instead of PATH/.porttrack.yml; paths in it stay relative to PATH.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="porttrack",
        description="Measure how much of a reference codebase's type surface a port implements.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Extract both codebases, score coverage and write JSON reports.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    _add_project_arguments(analyze_parser)
    analyze_parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for reference.json, target.json and analysis.json.",
    )
    analyze_parser.add_argument(
        "--no-write",
        action="store_true",
        help="Print the summary without writing report files.",
    )

    gaps_parser = subparsers.add_parser(
        "gaps",
        help="List tracked methods that have no reimplementation counterpart yet.",
    )
    _add_verbose_option(gaps_parser, suppress_default=True)
    _add_project_arguments(gaps_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for porttrack commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=args.command == "gaps",
        log_file=args.log_file,
    )
    orchestrator = Orchestrator()

    if args.command == "analyze":
        try:
            outcome = orchestrator.run(
                args.path,
                config_file=args.config_file,
                output_dir=args.output_dir,
                write=not bool(getattr(args, "no_write", False)),
            )
        except (ConfigError, FileNotFoundError, ValueError) as exc:
            parser.exit(1, f"porttrack analyze failed: {exc}\n")
        except Exception as exc:  # pragma: no cover - unexpected failure surface
            parser.exit(1, f"porttrack analyze failed: {exc}\nRun with --verbose for more details.\n")
        for written in outcome.written:
            print(f"Wrote {_relativize(written)}")
        print(format_summary(outcome.result, outcome.summaries))
    elif args.command == "gaps":
        try:
            config = orchestrator.load_config(args.path, args.config_file)
            tables = orchestrator.load_tables(config)
        except ConfigError as exc:
            parser.exit(1, f"porttrack gaps failed: {exc}\n")
        print(format_gaps(tables.known_gaps()))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def format_summary(
    result: AnalysisResult, summaries: Sequence[CategorySummary] | None = None
) -> str:
    """Render the per-category summary printed after an analysis run."""
    if summaries is None:
        summaries = summarize(result)
    lines = ["=== Summary by Type ==="]
    if not summaries:
        lines.append("(no tracked classes)")
    for summary in summaries:
        lines.append(
            f"{summary.category}: {summary.classes} classes, {summary.percentage:.1f}% implemented"
        )
    return "\n".join(lines)


def format_gaps(gaps: Sequence[tuple[str, str]]) -> str:
    lines = ["=== Methods still to implement ==="]
    if not gaps:
        lines.append("(none)")
    for table, method in gaps:
        lines.append(f"  {table}: {method}")
    return "\n".join(lines)


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
