import click
import importlib.metadata
from ..cli_logger import Logger


@click.command()
def version():
    """Print the version of sqlitebuilder."""
    try:
        ver = importlib.metadata.version("sqlitebuilder")
        click.echo(f"sqlitebuilder version {ver}")
    except importlib.metadata.PackageNotFoundError:
        Logger().error("Error: Could not determine the version of sqlitebuilder. Is it installed correctly?")
        raise click.exceptions.Exit(1)
