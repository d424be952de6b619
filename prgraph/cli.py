"""
Command-line interface for the dependency graph builder.
"""

import argparse
import json
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from prgraph import __version__
from prgraph.config import ConfigManager, AnalysisOptions
from prgraph.engine import DependencyAnalyzer
from prgraph.exceptions import PrGraphError
from prgraph.impact import ImpactGraphBuilder
from prgraph.models.changes import ChangedFile, PullRequestInfo

console = Console(stderr=True)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="prgraph",
        description="Dependency impact graph for the files changed in a pull request",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"prgraph {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Build the impact graph")
    analyze_parser.add_argument(
        "repo",
        help="Repository root",
    )
    analyze_parser.add_argument(
        "-c", "--changed",
        action="append",
        default=[],
        metavar="PATH[:TYPE]",
        help="Changed file, optionally with change type (repeatable)",
    )
    analyze_parser.add_argument(
        "--changes-file",
        help="JSON file with a pull request record or a list of changed files",
    )
    analyze_parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum reverse-dependency depth",
    )
    analyze_parser.add_argument(
        "--no-reverse",
        action="store_true",
        help="Skip the reverse-dependency crawl",
    )
    analyze_parser.add_argument(
        "-o", "--output",
        help="Output file (default: stdout)",
    )
    analyze_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )

    # Init config command
    init_parser = subparsers.add_parser("init", help="Initialize configuration file")
    init_parser.add_argument(
        "-f", "--format",
        choices=["yaml", "json"],
        default="yaml",
        help="Config file format (default: yaml)",
    )

    return parser


def parse_changed_arg(value: str) -> ChangedFile:
    """Parse ``path`` or ``path:type``."""
    path, sep, change_type = value.rpartition(":")
    if not sep or not path or "/" in change_type:
        return ChangedFile.create(value)
    return ChangedFile.create(path, change_type)


def load_pull_request(args: argparse.Namespace) -> PullRequestInfo:
    """Collect the pull request record from --changes-file and --changed."""
    pull_request = PullRequestInfo()

    if args.changes_file:
        data = json.loads(Path(args.changes_file).read_text(encoding="utf-8"))
        if isinstance(data, list):
            pull_request.changed_files = [ChangedFile.from_dict(f) for f in data]
        else:
            pull_request = PullRequestInfo.from_dict(data)

    pull_request.changed_files.extend(parse_changed_arg(c) for c in args.changed)
    return pull_request


def cmd_analyze(args: argparse.Namespace) -> int:
    """Execute analyze command."""
    repo = Path(args.repo)

    if not repo.is_dir():
        console.print(f"[red]Error:[/red] Repository not found: {repo}")
        return 1

    manager = ConfigManager.auto_discover(repo)
    config = manager.config

    if args.verbose:
        config.logging.level = "DEBUG"

    pull_request = load_pull_request(args)
    if not pull_request.changed_files:
        console.print("[yellow]No changed files given.[/yellow]")
        return 1

    options = AnalysisOptions(
        include_reverse_deps=not args.no_reverse and config.dependencies.include_reverse_deps,
        max_depth=args.max_depth if args.max_depth is not None else config.dependencies.max_depth,
    )

    analyzer = DependencyAnalyzer(config)
    result = analyzer.analyze(pull_request.changed_files, repo, options)
    graph = ImpactGraphBuilder(config).build(result, pull_request=pull_request)

    print_summary(graph.meta["stats"], result.errors)

    if args.output:
        graph.save(args.output)
        console.print(f"[green]Impact graph written to:[/green] {args.output}")
    else:
        print(graph.to_json())

    return 0


def cmd_init(args: argparse.Namespace) -> int:
    """Execute init command."""
    filename = f".prgraph.{args.format}"

    if Path(filename).exists():
        console.print(f"Config file already exists: {filename}")
        return 1

    ConfigManager().save(filename, args.format)

    console.print(f"Created config file: {filename}")
    return 0


def print_summary(stats: dict, errors: list[str]) -> None:
    """Print graph statistics as a table."""
    table = Table(title="PR Impact", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Modified files", str(stats["modifiedFiles"]))
    table.add_row("Affected files", str(stats["affectedFiles"]))
    table.add_row("Dependencies", str(stats["dependencies"]))

    console.print(table)

    for error in errors:
        console.print(f"[yellow]Warning:[/yellow] {error}")


def main(argv=None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        if args.command == "analyze":
            return cmd_analyze(args)
        elif args.command == "init":
            return cmd_init(args)
        else:
            parser.print_help()
            return 0
    except KeyboardInterrupt:
        console.print("\nAborted.")
        return 130
    except (PrGraphError, OSError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
