import os
import sys
import types
from dataclasses import dataclass, field
from enum import Enum

import toml

from .errors import ConfigurationError

CONFIG_FILE = "sqlitebuilder.toml"
DEFAULT_OUT_DIR = os.path.join(".sqlitebuilder", "build")


class OS(Enum):
    ANDROID = "android"
    FUCHSIA = "fuchsia"
    IOS = "ios"
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"

    @classmethod
    def host(cls):
        if hasattr(sys, "getandroidapilevel"):
            return cls.ANDROID
        if sys.platform.startswith("win"):
            return cls.WINDOWS
        if sys.platform == "darwin":
            return cls.MACOS
        return cls.LINUX


class BuildMode(Enum):
    DEBUG = "debug"
    RELEASE = "release"


def _parse_enum(enum_cls, value, option_name):
    if isinstance(value, enum_cls):
        return value
    allowed = [member.value for member in enum_cls]
    if value not in allowed:
        raise ConfigurationError(
            f"Invalid value {value!r} for '{option_name}'. Allowed values: {', '.join(allowed)}"
        )
    return enum_cls(value)


def parse_bool(value, option_name):
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "1", "yes"):
        return True
    if isinstance(value, str) and value.lower() in ("false", "0", "no"):
        return False
    raise ConfigurationError(f"Invalid boolean {value!r} for '{option_name}'.")


def load_config(path="."):
    """Load sqlitebuilder.toml from a package root, or {} when it does not exist."""
    config_path = os.path.join(path, CONFIG_FILE)
    if not os.path.exists(config_path):
        return {}
    try:
        with open(config_path, "r") as f:
            return toml.load(f)
    except toml.TomlDecodeError as e:
        raise ConfigurationError(f"Error decoding TOML file at {config_path}: {e}") from e


def save_config(config, path="."):
    config_path = os.path.join(path, CONFIG_FILE)
    with open(config_path, "w") as f:
        toml.dump(config, f)
    return config_path


def flatten_options(conf, prefix=""):
    """Flatten nested TOML tables into dotted option keys."""
    options = {}
    for key, value in conf.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            options.update(flatten_options(value, prefix=f"{dotted}."))
        else:
            options[dotted] = value
    return options


def parse_defines(defines):
    """Turn ``KEY=VALUE`` strings from the command line into an option dict."""
    options = {}
    for item in defines:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ConfigurationError(f"Invalid option {item!r}, expected KEY=VALUE.")
        options[key.strip()] = value
    return options


def get_option(options, key):
    """Return the string value of an option, or None when it is not set."""
    value = options.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"Option '{key}' must be a string, got {value!r}.")
    return value


@dataclass(frozen=True)
class BuildConfig:
    target_os: OS
    build_mode: BuildMode
    dry_run: bool
    out_dir: str
    package_root: str
    options: types.MappingProxyType = field(default_factory=lambda: types.MappingProxyType({}))

    def __post_init__(self):
        # Callers may hand in a plain dict; keep our own read-only copy.
        object.__setattr__(self, "options", types.MappingProxyType(dict(self.options)))

    @classmethod
    def from_options(cls, package_root=".", conf=None, overrides=None,
                     target_os=None, build_mode=None, dry_run=None, out_dir=None):
        """Assemble a BuildConfig from the project file and command-line overrides.

        Explicit arguments win over ``[build]`` entries of the project file,
        which win over the defaults (host OS, release, no dry run).
        """
        package_root = os.path.abspath(package_root)
        options = flatten_options(conf or {})
        options.update(overrides or {})

        if target_os is None:
            target_os = options.get("build.target_os", OS.host())
        if build_mode is None:
            build_mode = options.get("build.build_mode", BuildMode.RELEASE)
        if dry_run is None:
            dry_run = options.get("build.dry_run", False)
        if out_dir is None:
            out_dir = options.get("build.out_dir", DEFAULT_OUT_DIR)

        return cls(
            target_os=_parse_enum(OS, target_os, "build.target_os"),
            build_mode=_parse_enum(BuildMode, build_mode, "build.build_mode"),
            dry_run=parse_bool(dry_run, "build.dry_run"),
            out_dir=os.path.join(package_root, out_dir),
            package_root=package_root,
            options=options,
        )
