from .build import build
from .config import config
from .log import log
from .show_defines import show_defines
from .version import version

__all__ = ["build", "config", "log", "show_defines", "version"]
