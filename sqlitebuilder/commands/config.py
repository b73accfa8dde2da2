import click
import os
from .. import config as config_module
from ..cli_logger import Logger
from ..decorators import handle_exceptions


def _load_or_fail(ctx):
    conf = config_module.load_config(path=ctx.obj["path"])
    if not conf:
        Logger().error(f"Error: No {config_module.CONFIG_FILE} found in {ctx.obj['path']}.")
        raise click.exceptions.Exit(1)
    return conf


@click.group()
@click.pass_context
def config(ctx):
    """View or edit the sqlitebuilder.toml configuration file."""
    pass


@config.command()
@click.pass_context
@handle_exceptions
def view(ctx):
    """Print the contents of sqlitebuilder.toml."""
    _load_or_fail(ctx)
    with open(os.path.join(ctx.obj["path"], config_module.CONFIG_FILE), "r") as f:
        click.echo(f.read())


@config.command()
@click.argument("key")
@click.pass_context
@handle_exceptions
def get(ctx, key):
    """Get an option value, e.g. 'sqlite3.source'."""
    options = config_module.flatten_options(_load_or_fail(ctx))
    if key not in options:
        Logger().error(f"Error: Key '{key}' not found in {config_module.CONFIG_FILE}")
        raise click.exceptions.Exit(1)
    click.echo(options[key])


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
@handle_exceptions
def set_value(ctx, key, value):
    """Set an option value, creating sqlitebuilder.toml if needed."""
    conf = config_module.load_config(path=ctx.obj["path"])

    keys = key.split(".")
    table = conf
    for k in keys[:-1]:
        table = table.setdefault(k, {})
    table[keys[-1]] = value

    config_module.save_config(conf, path=ctx.obj["path"])
    Logger().info(f"Set '{key}' to '{value}'")


@config.command()
@click.argument("key")
@click.pass_context
@handle_exceptions
def unset(ctx, key):
    """Remove an option from sqlitebuilder.toml."""
    conf = _load_or_fail(ctx)

    keys = key.split(".")
    table = conf
    try:
        for k in keys[:-1]:
            table = table[k]
        del table[keys[-1]]
    except (KeyError, TypeError):
        Logger().error(f"Error: Key '{key}' not found in {config_module.CONFIG_FILE}")
        raise click.exceptions.Exit(1)

    config_module.save_config(conf, path=ctx.obj["path"])
    Logger().info(f"Unset '{key}'")
