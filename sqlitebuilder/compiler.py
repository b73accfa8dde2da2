import os

from .command_executor import run_shell_command
from .config import OS
from .defines import format_defines
from .errors import ToolchainError


def library_file_name(name, target_os):
    if target_os is OS.WINDOWS:
        return f"{name}.dll"
    if target_os in (OS.MACOS, OS.IOS):
        return f"lib{name}.dylib"
    return f"lib{name}.so"


def default_compiler(target_os):
    return os.environ.get("CC") or ("cl" if target_os is OS.WINDOWS else "cc")


class CBuilder:
    """Compiles a list of C sources into a single shared library.

    Source paths are resolved relative to the package root.
    """

    def __init__(self, name, asset_id, sources, defines, flags, compiler=None):
        self.name = name
        self.asset_id = asset_id
        self.sources = list(sources)
        self.defines = dict(defines)
        self.flags = list(flags)
        self.compiler = compiler

    @classmethod
    def library(cls, name, asset_id, sources, defines, flags, compiler=None):
        return cls(name, asset_id, sources, defines, flags, compiler=compiler)

    def command_line(self, config, library_path):
        compiler = self.compiler or default_compiler(config.target_os)
        if os.path.basename(compiler).lower() in ("cl", "cl.exe"):
            return [compiler, "/nologo", "/LD", *format_defines(self.defines, style="msvc"),
                    *self.sources, *self.flags, f"/Fe:{library_path}"]
        return [compiler, "-shared", "-fPIC", *format_defines(self.defines),
                *self.sources, "-o", library_path, *self.flags]

    def run(self, config, output, logger):
        """Compile the library and record the produced asset in output."""
        library_path = os.path.join(config.out_dir, library_file_name(self.name, config.target_os))
        asset = {
            "id": self.asset_id,
            "name": self.name,
            "target_os": config.target_os.value,
            "link_mode": "dynamic",
            "file": None,
        }

        if config.dry_run:
            logger.info(f"Dry run, not compiling {self.name}")
        else:
            command = self.command_line(config, library_path)
            logger.debug(f"Running: {' '.join(command)}")
            stdout, stderr, returncode = run_shell_command(command, cwd=config.package_root)
            if stdout.strip():
                logger.debug(stdout.strip())
            if returncode != 0:
                raise ToolchainError(
                    f"Compiling {self.name} failed with exit code {returncode}",
                    returncode=returncode,
                    stderr=stderr,
                )
            asset["file"] = library_path

        output.add_asset(asset)
        return asset
