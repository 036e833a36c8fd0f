"""sprockets - resolve //= require directives from the command line."""

import click

from .commands.manifest import manifest
from .commands.resolve import paths
from .commands.resolve import resolve
from .logging_setup import init_json_logging


@click.group(invoke_without_command=True)
@click.version_option(package_name="sprockets-js")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Write JSONL logs to this file")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level for the JSONL log",
)
@click.pass_context
def cli(ctx: click.Context, log_file: str | None, log_level: str | None):
    """Sprockets - JavaScript dependency resolution."""
    if log_file or log_level:
        init_json_logging(log_file, log_level)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()


cli.add_command(resolve)
cli.add_command(paths)
cli.add_command(manifest)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
