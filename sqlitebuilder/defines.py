"""Preprocessor defines and compiler flags for building sqlite3.

The define matrix is computed by applying DEFINE_RULES in order. Each rule
is a predicate over the build context and a layer of defines; a layer may
only add new symbols, never change one set by an earlier layer.
"""
import types
from dataclasses import dataclass

from .config import OS, BuildMode
from .errors import DefineConflictError
from .sources import SourceStrategy

BASELINE_DEFINES = {
    # Disable deprecated features
    "SQLITE_DQS": "0",
    "SQLITE_OMIT_DEPRECATED": None,

    # Recommended options
    "SQLITE_MAX_EXPR_DEPTH": "0",
    "SQLITE_TEMP_STORE": "2",
    "SQLITE_DEFAULT_MEMSTATUS": "0",

    # Additional features
    "SQLITE_ENABLE_FTS5": None,
    "SQLITE_ENABLE_RTREE": None,

    # Omit things we don't use
    "SQLITE_OMIT_TRACE": None,
    "SQLITE_OMIT_TCL_VARIABLE": None,
    "SQLITE_OMIT_PROGRESS_CALLBACK": None,
    "SQLITE_LOAD_EXTENSION": None,
    "SQLITE_OMIT_GET_TABLE": None,
    "SQLITE_OMIT_DECLTYPE": None,
    "SQLITE_OMIT_AUTHORIZATION": None,
}

POSIX_DEFINES = {
    "SQLITE_USE_ALLOCA": None,
    "SQLITE_HAVE_ISNAN": None,
    "SQLITE_HAVE_LOCALTIME_R": None,
    "SQLITE_HAVE_LOCALTIME_S": None,
    "SQLITE_HAVE_MALLOC_USABLE_SIZE": None,
    "SQLITE_HAVE_STRCHRNUL": None,
}

# Actually export the functions meant to be exported.
WINDOWS_DEFINES = {
    "SQLITE_API": "__declspec(dllexport)",
}

DEBUG_DEFINES = {
    # SQLite internal checks
    "SQLITE_DEBUG": None,
    "SQLITE_MEMDEBUG": None,
    # API usage checks
    "SQLITE_ENABLE_API_ARMOR": None,
}

# No testing hooks
RELEASE_DEFINES = {
    "SQLITE_UNTESTABLE": None,
}

SYSTEM_LINK_FLAG = "-lsqlite3"


@dataclass(frozen=True)
class BuildContext:
    target_os: OS
    build_mode: BuildMode
    dry_run: bool
    strategy: SourceStrategy

    @property
    def instrumented(self):
        # A dry run never produces a binary worth instrumenting.
        return not self.dry_run and self.build_mode is BuildMode.DEBUG


def _always(context):
    return True


def _is_posix_like(context):
    return context.target_os in (OS.LINUX, OS.ANDROID)


def _is_windows(context):
    return context.target_os is OS.WINDOWS


def _is_instrumented(context):
    return context.instrumented


def _is_not_instrumented(context):
    return not context.instrumented


DEFINE_RULES = (
    ("baseline", _always, BASELINE_DEFINES),
    ("posix", _is_posix_like, POSIX_DEFINES),
    ("windows", _is_windows, WINDOWS_DEFINES),
    ("debug", _is_instrumented, DEBUG_DEFINES),
    ("release", _is_not_instrumented, RELEASE_DEFINES),
)


def _merge_layer(defines, layer, layer_name):
    for key, value in layer.items():
        if key in defines:
            raise DefineConflictError(
                f"Define {key} from layer '{layer_name}' was already set to {defines[key]!r}"
            )
        defines[key] = value
    return defines


def applicable_rules(context):
    """Names of the define layers that apply to a build context, in order."""
    return [name for name, predicate, _ in DEFINE_RULES if predicate(context)]


def compute_defines(target_os, build_mode, dry_run, strategy):
    """Return the ordered define matrix for a build.

    A value of None means the symbol is defined without a value.
    """
    context = BuildContext(target_os, build_mode, dry_run, strategy)
    defines = {}
    for name, predicate, layer in DEFINE_RULES:
        if predicate(context):
            _merge_layer(defines, layer, name)
    return defines


def compute_flags(target_os, build_mode, dry_run, strategy):
    flags = []
    if not dry_run and build_mode is BuildMode.RELEASE:
        flags.append("/O2" if target_os is OS.WINDOWS else "-O3")

    # Only understood by Unix-style linkers for now.
    if strategy is SourceStrategy.SYSTEM:
        flags.append(SYSTEM_LINK_FLAG)
    return flags


@dataclass(frozen=True)
class CompileSpec:
    sources: tuple
    defines: types.MappingProxyType
    flags: tuple


def build_compile_spec(config, strategy, sources):
    """Assemble the CompileSpec for a BuildConfig and the chosen source strategy."""
    args = (config.target_os, config.build_mode, config.dry_run, strategy)
    return CompileSpec(
        sources=tuple(sources),
        defines=types.MappingProxyType(compute_defines(*args)),
        flags=tuple(compute_flags(*args)),
    )


def format_defines(defines, style="gnu"):
    """Render defines as compiler arguments (``-DKEY=VALUE`` or ``/DKEY=VALUE``)."""
    prefix = "/D" if style == "msvc" else "-D"
    return [
        f"{prefix}{key}" if value is None else f"{prefix}{key}={value}"
        for key, value in defines.items()
    ]
