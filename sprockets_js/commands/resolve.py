"""Commands that resolve scripts and show the search path."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.table import Table

from ..console import console
from ..console import error_console
from ..errors import SprocketsError
from ..paths import create_settings
from ..settings import RuntimeMode
from ..utils.error_format import error_hint
from ..utils.error_format import escape_markup
from ..utils.error_format import format_error_message

MODE_CHOICE = click.Choice([m.value for m in RuntimeMode])


def report_error(e: SprocketsError) -> None:
    """Print a resolution or configuration failure and exit with status 1."""
    error_console.print(f"[red]Error:[/red] {escape_markup(format_error_message(e, include_type=False))}")
    if hint := error_hint(e):
        error_console.print(f"[dim]{escape_markup(hint)}[/dim]")
    sys.exit(1)


def _origin_name(sprocket) -> str:
    return sprocket.location.origin.name if sprocket.location else "-"


@click.command()
@click.argument("root")
@click.option(
    "--app-dir",
    "app_dirs",
    multiple=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Application script directory (repeatable, later wins)",
)
@click.option(
    "--library-dir",
    "library_dirs",
    multiple=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Additional library script directory (repeatable, later wins)",
)
@click.option("--mode", type=MODE_CHOICE, default=None, help="Runtime mode (default: from settings)")
@click.option("--with-shared", is_flag=True, help="Prepend the managed shared stylesheets and libraries")
@click.option("--paths-only", is_flag=True, help="Print one full path per line instead of a table")
def resolve(
    root: str,
    app_dirs: tuple[Path, ...],
    library_dirs: tuple[Path, ...],
    mode: str | None,
    with_shared: bool,
    paths_only: bool,
):
    """Resolve ROOT and print its scripts, dependencies first."""
    try:
        settings = create_settings(app_dirs, library_dirs, RuntimeMode(mode) if mode else None)
        sprockets = settings.locate(root)
    except SprocketsError as e:
        report_error(e)
        return

    if with_shared:
        shared = settings.shared_stylesheets() + settings.shared_scripts()
        sprockets = shared + [s for s in sprockets if s not in shared]

    if paths_only:
        for sprocket in sprockets:
            click.echo(sprocket.full_path)
        return

    table = Table(title=f"Dependencies of {escape_markup(root)}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Script", style="cyan")
    table.add_column("Kind", style="dim")
    table.add_column("Origin", style="green")
    table.add_column("Full path", style="dim")

    for index, sprocket in enumerate(sprockets, start=1):
        table.add_row(
            str(index),
            escape_markup(sprocket.path),
            "library" if sprocket.library else "application",
            escape_markup(_origin_name(sprocket)),
            escape_markup(sprocket.full_path),
        )

    console.print(table)


@click.command()
@click.option(
    "--app-dir",
    "app_dirs",
    multiple=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Application script directory (repeatable, later wins)",
)
def paths(app_dirs: tuple[Path, ...]):
    """Show search locations in the order they are probed."""
    try:
        settings = create_settings(app_dirs)
    except SprocketsError as e:
        report_error(e)
        return

    table = Table(title="Search Path")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Origin", style="cyan")
    table.add_column("Base path", style="green")
    table.add_column("Kind", style="dim")

    for index, location in enumerate(settings.search_path.probe_order(), start=1):
        table.add_row(
            str(index),
            escape_markup(location.origin.name),
            escape_markup(location.base_path or "/"),
            "library" if location.library else "application",
        )

    console.print(table)
    console.print(f"\n[bold]Traversal cache:[/bold] {settings.cache_duration()}")
