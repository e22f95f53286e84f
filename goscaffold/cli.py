"""GoScaffold command-line front-end.

Usage::

    goscaffold --name my-go-app --module github.com/me/my-go-app
    goscaffold --architecture Clean --feature rest --feature sql -o ./my-go-app
    goscaffold --config goscaffold.json --show go.mod
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from goscaffold.config import Config
from goscaffold.generator import ProjectGenerator
from goscaffold.models import (
    ARCHITECTURE_CATALOG,
    FEATURE_CATALOG,
    Architecture,
    GenerationPhase,
    GenerationState,
)
from goscaffold.session import GenerationSession
from goscaffold.utils import (
    console,
    create_progress,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)
from goscaffold.writer import UnsafePathError, write_files

_LEXERS = {
    ".go": "go",
    ".mod": "go",
    ".md": "markdown",
    ".yml": "yaml",
    ".yaml": "yaml",
    ".json": "json",
    ".proto": "protobuf",
    ".sql": "sql",
    ".sh": "bash",
}


def _lexer_for(path: str) -> str:
    name = Path(path).name
    if name == "Dockerfile":
        return "docker"
    if name == "Makefile":
        return "make"
    return _LEXERS.get(Path(path).suffix, "text")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="goscaffold",
        description="GoScaffold -- generate a Go project skeleton with Gemini",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  goscaffold --name my-go-app --module github.com/me/my-go-app\n"
            "  goscaffold --architecture Clean --feature rest --feature sql -o ./out\n"
            "  goscaffold --list-options\n"
        ),
    )
    parser.add_argument("--config", "-c", default=None, help="Load settings from a JSON file")
    parser.add_argument("--name", default=None, help="Project name")
    parser.add_argument("--module", default=None, help="Go module path")
    parser.add_argument(
        "--architecture",
        "-a",
        choices=[a.value for a in Architecture],
        default=None,
        help="Project layout style",
    )
    parser.add_argument(
        "--feature",
        "-f",
        action="append",
        choices=sorted(FEATURE_CATALOG),
        default=None,
        help="Feature to include (repeatable; replaces the default selection)",
    )
    parser.add_argument("--show", default=None, help="Path of the generated file to display")
    parser.add_argument(
        "--output", "-o", default=None, help="Write the generated files to this directory"
    )
    parser.add_argument(
        "--list-options",
        action="store_true",
        help="List the available architectures and features, then exit",
    )
    return parser


def _print_options() -> None:
    table = Table(title="Architectures", show_header=True, header_style="bold cyan")
    table.add_column("Id", no_wrap=True)
    table.add_column("Name", no_wrap=True)
    table.add_column("Description", style="dim")
    for arch, (name, description) in ARCHITECTURE_CATALOG.items():
        table.add_row(arch.value, name, description)
    console.print(table)

    table = Table(title="Features", show_header=True, header_style="bold cyan")
    table.add_column("Id", no_wrap=True)
    table.add_column("Name")
    for feature_id, name in FEATURE_CATALOG.items():
        table.add_row(feature_id, name)
    console.print(table)


def _print_files(state: GenerationState) -> None:
    table = Table(title="Generated files", show_header=True, header_style="bold cyan")
    table.add_column("Path", no_wrap=True)
    table.add_column("Lines", justify="right")
    for record in state.files:
        table.add_row(record.path, str(len(record.content.splitlines())))
    console.print(table)


async def run(args: argparse.Namespace, config: Config) -> int:
    """Run one generation and render the outcome. Returns the exit code."""
    session = GenerationSession(ProjectGenerator(config.gemini), config.project)
    store = session.config_store
    if args.name is not None:
        store.set_project_name(args.name)
    if args.module is not None:
        store.set_module_name(args.module)
    if args.architecture is not None:
        store.set_architecture(args.architecture)
    if args.feature is not None:
        store.set_features(args.feature)

    project = store.config
    print_summary_table(
        {
            "Project": project.project_name,
            "Module": project.module_name,
            "Architecture": project.architecture.display_name,
            "Features": ", ".join(FEATURE_CATALOG.get(f, f) for f in project.sorted_features)
            or "none",
            "Model": config.gemini.model,
        },
        title="GoScaffold",
    )

    with create_progress() as progress:
        progress.add_task("Synthesizing project...", total=None)
        state = await session.generate()

    if state.phase is GenerationPhase.FAILED:
        print_error(state.error_message or "Generation failed.")
        return 1

    if not state.files:
        print_warning("The model returned no files.")
        return 0

    _print_files(state)
    if args.show is not None:
        try:
            session.select_file(args.show)
        except KeyError:
            print_error(escape(f"No generated file named {args.show!r}"))
            return 1

    selected = session.selected_file
    if selected is not None:
        console.rule(selected.path)
        console.print(Syntax(selected.content, _lexer_for(selected.path), line_numbers=True))

    if args.output is not None:
        try:
            written = await write_files(state.files, args.output)
        except UnsafePathError as exc:
            print_error(escape(str(exc)))
            return 1
        except OSError as exc:
            print_error(escape(f"Could not write files to {args.output}: {exc}"))
            return 1
        print_success(f"Wrote {len(written)} file(s) to {Path(args.output).resolve()}")

    return 0


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for ``goscaffold``."""
    args = build_parser().parse_args(argv)

    if args.list_options:
        _print_options()
        return

    try:
        config = Config.load(Path(args.config)) if args.config else Config.from_env()
    except FileNotFoundError:
        console.print(f"[bold red]Error:[/bold red] Config file not found: {args.config}")
        sys.exit(1)
    except (ValidationError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] Invalid configuration: {escape(str(exc))}")
        sys.exit(1)

    try:
        exit_code = asyncio.run(run(args, config))
    except ValidationError as exc:
        console.print(f"[bold red]Error:[/bold red] Invalid project settings: {escape(str(exc))}")
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
