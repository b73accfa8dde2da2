import click
from .. import config as config_module
from ..cli_logger import Logger, default_log_file
from ..config import OS, BuildMode
from ..decorators import handle_exceptions
from ..orchestrator import SqliteBuildScript


@click.command()
@click.pass_context
@click.option("--target-os", type=click.Choice([os_.value for os_ in OS]), default=None,
              help="Operating system to build for. Defaults to the host.")
@click.option("--build-mode", type=click.Choice([mode.value for mode in BuildMode]), default=None,
              help="Build mode (debug or release).")
@click.option("--dry-run", is_flag=True, help="Plan the build without compiling.")
@click.option("--out-dir", default=None, help="Output directory, relative to the package root.")
@click.option("--define", "-D", "defines", multiple=True, metavar="KEY=VALUE",
              help="Override an option, e.g. -D sqlite3.source=system.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@handle_exceptions
def build(ctx, target_os, build_mode, dry_run, out_dir, defines, verbose):
    """Build the sqlite3 native library for the package."""
    package_root = ctx.obj["path"]
    conf = config_module.BuildConfig.from_options(
        package_root,
        conf=config_module.load_config(path=package_root),
        overrides=config_module.parse_defines(defines),
        target_os=target_os,
        build_mode=build_mode,
        dry_run=True if dry_run else None,
        out_dir=out_dir,
    )

    logger = Logger(default_log_file(package_root), verbose=verbose)
    # Validates the sqlite3.* options before anything is written.
    script = SqliteBuildScript(config=conf, logger=logger)

    with logger:
        logger.info("Starting sqlite3 build")
        logger.debug(f"Config: {conf}")
        script.build()
        logger.success(f"Build for {conf.target_os.value} ({conf.build_mode.value}) completed.")
