import functools
import click
from .cli_logger import Logger
from .errors import ConfigurationError, SqliteBuildError, ToolchainError


def handle_exceptions(func):
    """Report the first failure of a CLI command and exit with status 1."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = Logger()
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except click.Abort:
            logger.warning("Command aborted by user.")
            raise click.exceptions.Exit(1)
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
        except NotImplementedError as e:
            logger.error(f"Not supported: {e}")
        except ToolchainError as e:
            logger.error(f"Toolchain error: {e}")
            if e.stderr:
                logger.step_info(e.stderr.rstrip(), indent=2)
        except OSError as e:
            logger.error(f"I/O error: {e}")
        except SqliteBuildError as e:
            logger.error(f"Build error: {e}")
        raise click.exceptions.Exit(1)
    return wrapper
