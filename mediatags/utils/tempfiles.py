"""Scratch file handling for mux outputs."""

import logging
import os
import tempfile
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)


@contextmanager
def scratch_file(
    suffix: str = "",
    directory: Path | None = None,
    prefix: str = "ffmpeg-temp-",
) -> Iterator[Path]:
    """Reserve a uniquely named file and remove it when the block exits.

    The name combines the prefix, a nanosecond timestamp and a random part,
    and ends with suffix so tools that pick a muxer by extension see the
    right one. OSError from creating the file propagates.

    Removal failures after a successful block are logged, not raised; if the
    block itself raised, that exception is what propagates.
    """
    fd, name = tempfile.mkstemp(
        suffix=suffix,
        prefix=f"{prefix}{time.time_ns()}-",
        dir=str(directory) if directory is not None else None,
    )
    os.close(fd)
    path = Path(name)
    try:
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove temporary file {path}: {e}")
