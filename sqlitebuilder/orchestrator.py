import os
import pathlib
from enum import Enum

from .build_output import BuildOutput
from .compiler import CBuilder
from .defines import build_compile_spec
from .materializer import materialize_source
from .sources import SourceOptions, source_for

LIBRARY_NAME = "sqlite3_native"
ASSET_ID = "sqlitebuilder/sqlite3"


class BuildState(Enum):
    INIT = "init"
    DIRECTORY_PREPARED = "directory_prepared"
    SOURCE_MATERIALIZED = "source_materialized"
    SPEC_BUILT = "spec_built"
    COMPILED = "compiled"
    OUTPUT_WRITTEN = "output_written"


def package_relative(path, package_root):
    """Express a path relative to the package root with forward slashes."""
    return pathlib.Path(os.path.relpath(path, package_root)).as_posix()


class SqliteBuildScript:
    """Runs one sqlite3 build: source, defines, compile, write output.

    Options are validated in the constructor, so a bad configuration
    fails before anything touches the disk.
    """

    def __init__(self, config, logger, builder_factory=CBuilder.library):
        self.config = config
        self.logger = logger
        self.builder_factory = builder_factory
        self.options = SourceOptions.from_config(config.options)
        self.output = BuildOutput()
        self.state = BuildState.INIT
        self.source_path = None
        self.compile_spec = None
        self.asset = None

    def build(self):
        config = self.config
        logger = self.logger

        logger.info(f"Creating output directory: {config.out_dir}")
        os.makedirs(config.out_dir, exist_ok=True)
        self.state = BuildState.DIRECTORY_PREPARED

        logger.info(
            f"Building sqlite3 with source={self.options.strategy.value}, "
            f"url={self.options.download_url}"
        )
        self.source_path = materialize_source(source_for(self.options), config, self.output, logger)
        self.state = BuildState.SOURCE_MATERIALIZED

        self.compile_spec = build_compile_spec(
            config,
            self.options.strategy,
            [package_relative(self.source_path, config.package_root)],
        )
        logger.debug(f"Defines: {dict(self.compile_spec.defines)}")
        logger.debug(f"Flags: {list(self.compile_spec.flags)}")
        self.state = BuildState.SPEC_BUILT

        logger.info("Running builder")
        builder = self.builder_factory(
            name=LIBRARY_NAME,
            asset_id=ASSET_ID,
            sources=self.compile_spec.sources,
            defines=self.compile_spec.defines,
            flags=self.compile_spec.flags,
        )
        self.asset = builder.run(config, self.output, logger)
        self.state = BuildState.COMPILED

        logger.info(f"Writing output: {self.output}")
        self.output.write_to_file(config.out_dir)
        self.state = BuildState.OUTPUT_WRITTEN
        return self.output
