import contextlib
import os

INTERMEDIATE_SOURCE = "sqlite3.c"


def intermediate_source_path(config):
    return os.path.join(config.out_dir, INTERMEDIATE_SOURCE)


def materialize_source(source, config, output, logger):
    """Write the bytes of a source into out_dir/sqlite3.c and return its path.

    The bytes go to a .tmp file first which is renamed into place once it
    is complete, so a failed build never leaves a truncated sqlite3.c.
    """
    target_path = intermediate_source_path(config)
    temp_path = target_path + ".tmp"

    # Sources that can't produce bytes fail here, before anything is written.
    chunks = source.open(config, output)

    written = 0
    try:
        with open(temp_path, "wb") as f:
            for chunk in chunks:
                f.write(chunk)
                written += len(chunk)
            f.flush()
            os.fsync(f.fileno())
        # Atomic rename
        os.replace(temp_path, target_path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.remove(temp_path)
        raise

    logger.info(f"Wrote {written} bytes of {source.strategy.value} source to {target_path}")
    return target_path
