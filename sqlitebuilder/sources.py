"""Where the sqlite3 amalgamation comes from.

Each value of the ``sqlite3.source`` option maps to one source class
that knows how to produce the bytes of ``sqlite3.c``.
"""
import gzip
import os
import pathlib
import zlib
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests

from .config import get_option
from .errors import ConfigurationError

SOURCE_OPTION = "sqlite3.source"
URL_OPTION = "sqlite3.url"

VENDORED_ARCHIVE = os.path.join("assets", "sqlite3.c.gz")
SYSTEM_STUB = b"#include <sqlite3.h>\n"
CHUNK_SIZE = 64 * 1024


class SourceStrategy(Enum):
    # Download an amalgamation from sqlite3.url.
    URL = "url"
    # Empty library that links against the system's libsqlite3.
    SYSTEM = "system"
    # The amalgamation bundled with the package.
    VENDORED = "vendored"


DEFAULT_STRATEGY = SourceStrategy.VENDORED


def resolve_source_strategy(options):
    """Return the SourceStrategy selected by the options, or the default."""
    value = get_option(options, SOURCE_OPTION)
    if value is None:
        return DEFAULT_STRATEGY

    allowed = [strategy.value for strategy in SourceStrategy]
    if value not in allowed:
        raise ConfigurationError(
            f"Invalid value {value!r} for '{SOURCE_OPTION}'. Allowed values: {', '.join(allowed)}"
        )
    return SourceStrategy(value)


def parse_download_url(value):
    """Validate a download URL, raising ConfigurationError when it is unusable."""
    try:
        request = requests.models.PreparedRequest()
        request.prepare_url(value, None)
    except requests.exceptions.RequestException as e:
        raise ConfigurationError(f"Invalid value {value!r} for '{URL_OPTION}': {e}") from e
    return request.url


@dataclass(frozen=True)
class SourceOptions:
    strategy: SourceStrategy
    download_url: Optional[str] = None

    def __post_init__(self):
        if self.strategy is SourceStrategy.URL and self.download_url is None:
            raise ConfigurationError(f"'{URL_OPTION}' is required when {SOURCE_OPTION}=url.")
        if self.strategy is not SourceStrategy.URL and self.download_url is not None:
            raise ConfigurationError(
                f"A download URL is only valid with {SOURCE_OPTION}=url, not {self.strategy.value}."
            )

    @classmethod
    def from_config(cls, options):
        strategy = resolve_source_strategy(options)
        download_url = None

        if strategy is SourceStrategy.URL:
            value = get_option(options, URL_OPTION)
            if not value:
                raise ConfigurationError(f"'{URL_OPTION}' is required when {SOURCE_OPTION}=url.")
            download_url = parse_download_url(value)

        return cls(strategy=strategy, download_url=download_url)


class VendoredSource:
    """Decompresses the amalgamation shipped in assets/sqlite3.c.gz."""

    strategy = SourceStrategy.VENDORED

    def archive_path(self, config):
        return os.path.join(config.package_root, VENDORED_ARCHIVE)

    def open(self, config, output):
        archive = self.archive_path(config)
        output.add_dependency(pathlib.Path(archive).resolve().as_uri())
        return self._read_chunks(archive)

    def _read_chunks(self, archive):
        with gzip.open(archive, "rb") as f:
            while True:
                try:
                    chunk = f.read(CHUNK_SIZE)
                except (EOFError, zlib.error, gzip.BadGzipFile) as e:
                    raise OSError(f"Could not decompress {archive}: {e}") from e
                if not chunk:
                    break
                yield chunk


class UrlSource:
    strategy = SourceStrategy.URL

    def __init__(self, download_url):
        self.download_url = download_url

    def open(self, config, output):
        # TODO: download and unpack the amalgamation zip from download_url.
        raise NotImplementedError(
            f"Building from {SOURCE_OPTION}=url is not supported yet ({self.download_url})."
        )


class SystemSource:
    strategy = SourceStrategy.SYSTEM

    def open(self, config, output):
        return iter([SYSTEM_STUB])


def source_for(options):
    """Return the source object for a SourceOptions instance."""
    if options.strategy is SourceStrategy.VENDORED:
        return VendoredSource()
    if options.strategy is SourceStrategy.URL:
        return UrlSource(options.download_url)
    return SystemSource()
