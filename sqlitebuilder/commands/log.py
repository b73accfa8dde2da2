import click
import os
from colorama import Fore, Style
from ..cli_logger import default_log_file, read_log_lines

LEVEL_COLORS = {
    "WARNING": Fore.YELLOW,
    "ERROR": Fore.RED,
    "TRACEBACK": Fore.RED,
    "DEBUG": Fore.WHITE + Style.DIM,
    "SUCCESS": Fore.GREEN,
}


@click.command()
@click.pass_context
@click.option("--level", default=None, help="Only show lines of this level (e.g. ERROR).")
def log(ctx, level):
    """Display the log of the last build."""
    log_file = default_log_file(ctx.obj["path"])
    if not os.path.exists(log_file):
        click.echo("No build log found.")
        return

    click.echo(f"Displaying log file: {log_file}")
    for line_level, line in read_log_lines(log_file):
        if level and line_level != level.upper():
            continue
        color = LEVEL_COLORS.get(line_level, Fore.CYAN)
        click.echo(f"{color}{line}{Style.RESET_ALL}")
