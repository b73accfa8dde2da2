import datetime
import os
import sys
import traceback
from colorama import Fore, Style, init

# Initialize Colorama
init(autoreset=True)

LOG_DIR_NAME = ".sqlitebuilder"
LOG_FILE_NAME = "build.log"


def default_log_file(package_root="."):
    """Return the build log path for a package root."""
    return os.path.join(os.path.abspath(package_root), LOG_DIR_NAME, LOG_FILE_NAME)


class Logger:
    """Console + file logger with an explicit open/close lifecycle.

    Nothing is written to disk until ``open()`` is called. Records logged
    while the file is closed only go to the console.
    """

    def __init__(self, log_file=None, verbose=False):
        self.log_file = log_file
        self.verbose = verbose
        self._handle = None

    def open(self):
        if self.log_file and self._handle is None:
            os.makedirs(os.path.dirname(os.path.abspath(self.log_file)), exist_ok=True)
            self._handle = open(self.log_file, "w", encoding="utf-8")
        return self

    def close(self):
        if self._handle is not None:
            self._handle.flush()
            self._handle.close()
            self._handle = None

    @property
    def is_open(self):
        return self._handle is not None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_value, exc_traceback):
        if exc_type is not None and not issubclass(exc_type, (KeyboardInterrupt, SystemExit)):
            self.exception(exc_type, exc_value, exc_traceback)
        self.close()
        return False

    def _get_timestamp(self):
        return datetime.datetime.now().strftime("%H:%M:%S")

    def _log(self, level, message, color, stream=None, prefix="", show_timestamp=True, echo=True):
        if show_timestamp:
            timestamp = self._get_timestamp()
            log_message = f"[{timestamp}] [{level}] {message}\n"
            console_message = f"{color}{Style.BRIGHT}[{timestamp}]{Style.RESET_ALL} {prefix}{message}{Style.RESET_ALL}"
        else:
            log_message = f"[{level}] {message}\n"
            console_message = f"{color}{prefix}{message}{Style.RESET_ALL}"

        if echo:
            print(console_message, file=stream or sys.stdout)

        if self._handle is not None:
            self._handle.write(log_message)

    def info(self, message):
        self._log("INFO", message, Fore.CYAN)

    def step_info(self, message, indent=0):
        prefix = " " * indent
        self._log("STEP", message, Fore.CYAN, prefix=prefix, show_timestamp=False)

    def success(self, message):
        self._log("SUCCESS", message, Fore.GREEN, prefix=f"{Style.BRIGHT}✓ {Style.RESET_ALL}{Fore.GREEN}")

    def warning(self, message):
        self._log("WARNING", message, Fore.YELLOW, stream=sys.stderr,
                  prefix=f"{Style.BRIGHT}⚠ {Style.RESET_ALL}{Fore.YELLOW}")

    def error(self, message):
        self._log("ERROR", message, Fore.RED, stream=sys.stderr,
                  prefix=f"{Style.BRIGHT}✖ {Style.RESET_ALL}{Fore.RED}")

    def debug(self, message):
        # Always recorded in the log file, echoed only in verbose mode
        self._log("DEBUG", message, Fore.WHITE + Style.DIM, echo=self.verbose)

    def exception(self, exc_type, exc_value, exc_traceback):
        formatted_lines = traceback.format_exception(exc_type, exc_value, exc_traceback)
        for line in formatted_lines:
            for sub_line in line.splitlines():
                if sub_line.strip():
                    self._log("TRACEBACK", f">> {sub_line}", Fore.RED, stream=sys.stderr, echo=self.verbose)


def read_log_lines(log_file):
    """Yield (level, line) pairs from a build log file."""
    with open(log_file, "r", encoding="utf-8") as f:
        for line in f:
            line = line.rstrip("\n")
            level = "INFO"
            for candidate in ("TRACEBACK", "WARNING", "ERROR", "DEBUG", "SUCCESS", "STEP", "INFO"):
                if f"[{candidate}]" in line:
                    level = candidate
                    break
            yield level, line
