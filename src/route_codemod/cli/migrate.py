import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from route_codemod.core.codemod import rewrite_source
from route_codemod.core.config import ConfigError, RewriteConfig, load_config
from route_codemod.core.languages import resolve_language
from route_codemod.core.migrate import FileOutcome, FileStatus, process_files
from route_codemod.core.routes import RouteManifestError, collect_route_files
from route_codemod.models import Rejected, Rewritten

console = Console()
err_console = Console(stderr=True)

_STATUS_STYLES = {
    FileStatus.REWRITTEN: "green",
    FileStatus.UNCHANGED: "dim",
    FileStatus.ALREADY_MIGRATED: "yellow",
    FileStatus.FAILED: "red",
}

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="TOML file with the export/hook registries (defaults to $ROUTE_CODEMOD_CONFIG)."),
]
DryRunOption = Annotated[bool, typer.Option("--dry-run", help="Report what would change without writing files.")]
FailFastOption = Annotated[bool, typer.Option("--fail-fast", help="Stop at the first file that fails.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(path: Path | None) -> RewriteConfig:
    try:
        return load_config(path)
    except ConfigError as exc:
        err_console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from None


def _print_outcome(outcome: FileOutcome) -> None:
    style = _STATUS_STYLES[outcome.status]
    line = f"[{style}]{outcome.status.value:>16}[/{style}] {outcome.path}"
    if outcome.message:
        line += f" ({outcome.message})"
    console.print(line)
    if isinstance(outcome.result, Rejected):
        for diagnostic in outcome.result.diagnostics:
            err_console.print(f"  [red]{diagnostic.display(str(outcome.path))}[/red]")


def _render_summary(outcomes: Sequence[FileOutcome]) -> None:
    table = Table(show_lines=False)
    table.add_column("status")
    table.add_column("files", justify="right")
    for status in FileStatus:
        count = sum(1 for o in outcomes if o.status is status)
        if count:
            table.add_row(status.value, str(count))
    console.print(table)


def _run(paths: Sequence[Path], config: RewriteConfig, dry_run: bool, fail_fast: bool) -> None:
    outcomes = process_files(
        paths,
        config,
        write=not dry_run,
        fail_fast=fail_fast,
        on_outcome=_print_outcome,
    )
    _render_summary(outcomes)
    if dry_run:
        console.print("[yellow]Dry run, no files were written.[/yellow]")
    if any(o.failed for o in outcomes):
        raise typer.Exit(1)


def migrate(
    project_dir: Annotated[Path, typer.Argument(help="Remix project directory.")] = Path("."),
    routes_json: Annotated[
        Path | None,
        typer.Option("--routes-json", help="Use a saved `remix routes --json` output instead of running npx."),
    ] = None,
    config: ConfigOption = None,
    dry_run: DryRunOption = False,
    fail_fast: FailFastOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Rewrite every route module listed in the project's route manifest."""
    _configure_logging(verbose)
    rewrite_config = _load_config(config)
    resolved_dir = project_dir.resolve()
    console.print(f"Working directory: {resolved_dir}")

    try:
        with console.status("Gathering route files..."):
            paths = collect_route_files(resolved_dir, routes_json)
    except RouteManifestError as exc:
        err_console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from None

    console.print(f"[green]Found[/green] {len(paths)} route files")
    _run(paths, rewrite_config, dry_run, fail_fast)


def rewrite(
    files: Annotated[list[Path], typer.Argument(help="Route module files to rewrite.")],
    config: ConfigOption = None,
    dry_run: DryRunOption = False,
    fail_fast: FailFastOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Rewrite the given route module files in order."""
    _configure_logging(verbose)
    rewrite_config = _load_config(config)
    _run(files, rewrite_config, dry_run, fail_fast)


def show(
    file: Annotated[Path, typer.Argument(help="Route module file to preview.")],
    language: Annotated[
        str | None,
        typer.Option("--language", "-l", help="Grammar to parse with: tsx, typescript or javascript."),
    ] = None,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Print the rewritten module to stdout without touching the file."""
    _configure_logging(verbose)
    rewrite_config = _load_config(config)
    try:
        resolved_language = resolve_language(language, file)
        text = file.read_bytes().decode("utf-8")
    except (ValueError, OSError) as exc:
        err_console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from None

    result = rewrite_source(text, resolved_language, rewrite_config)
    if isinstance(result, Rejected):
        err_console.print(f"[red]{result.message}[/red]")
        for diagnostic in result.diagnostics:
            err_console.print(f"  [red]{diagnostic.display(str(file))}[/red]")
        raise typer.Exit(1)
    if not isinstance(result, Rewritten):
        err_console.print("[dim]No route exports found, file is unchanged.[/dim]")
    typer.echo(result.text, nl=False)
