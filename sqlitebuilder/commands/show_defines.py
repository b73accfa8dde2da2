import json
import click
from ..config import OS, BuildMode
from ..defines import compute_defines, compute_flags, format_defines
from ..sources import SourceStrategy


@click.command("defines")
@click.option("--target-os", type=click.Choice([os_.value for os_ in OS]), default=OS.host().value,
              show_default=True, help="Operating system to compute defines for.")
@click.option("--build-mode", type=click.Choice([mode.value for mode in BuildMode]),
              default=BuildMode.RELEASE.value, show_default=True, help="Build mode.")
@click.option("--dry-run", is_flag=True, help="Compute defines for a dry run.")
@click.option("--source", type=click.Choice([s.value for s in SourceStrategy]),
              default=SourceStrategy.VENDORED.value, show_default=True, help="Source strategy.")
@click.option("--json", "as_json", is_flag=True, help="Print defines and flags as JSON.")
def show_defines(target_os, build_mode, dry_run, source, as_json):
    """Print the preprocessor defines and compiler flags for a build."""
    args = (OS(target_os), BuildMode(build_mode), dry_run, SourceStrategy(source))
    defines = compute_defines(*args)
    flags = compute_flags(*args)

    if as_json:
        click.echo(json.dumps({"defines": defines, "flags": flags}, indent=4))
        return

    style = "msvc" if args[0] is OS.WINDOWS else "gnu"
    for define in format_defines(defines, style=style):
        click.echo(define)
    for flag in flags:
        click.echo(flag)
