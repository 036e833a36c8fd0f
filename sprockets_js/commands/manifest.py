"""Precompute dependency orders into a manifest file."""

from __future__ import annotations

from pathlib import Path

import click

from ..console import console
from ..errors import SprocketsError
from ..locator.manifest import build_manifest
from ..locator.manifest import write_manifest
from ..paths import create_settings
from ..utils.error_format import escape_markup
from .resolve import report_error


@click.command()
@click.argument("roots", nargs=-1, required=True)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("sprockets-manifest.yaml"),
    show_default=True,
    help="Manifest file to write",
)
@click.option(
    "--app-dir",
    "app_dirs",
    multiple=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Application script directory (repeatable, later wins)",
)
def manifest(roots: tuple[str, ...], output: Path, app_dirs: tuple[Path, ...]):
    """Resolve ROOTS and write their orders for the manifest locator."""
    try:
        settings = create_settings(app_dirs)
        result = build_manifest(settings, roots)
    except SprocketsError as e:
        report_error(e)
        return

    write_manifest(result, output)
    total = sum(len(entries) for entries in result.roots.values())
    console.print(f"[green]Wrote {len(result.roots)} roots ({total} entries) to {escape_markup(output)}[/green]")
