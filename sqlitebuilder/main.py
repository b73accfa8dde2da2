import click
from .commands import *


@click.group()
@click.option("--path", "-p", default=".", help="Path to the package root.")
@click.pass_context
def cli(ctx, path):
    """sqlitebuilder: build the sqlite3 native library for a package."""
    ctx.obj = {"path": path}

cli.add_command(build)
cli.add_command(show_defines)
cli.add_command(config)
cli.add_command(log)
cli.add_command(version)

if __name__ == '__main__':
    cli()
