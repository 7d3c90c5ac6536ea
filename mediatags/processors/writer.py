"""Tag writing via ffmpeg stream copy."""

import logging
import os
import shutil
import subprocess
from pathlib import Path

from ..config import ToolConfig
from ..errors import IOFailure, MuxFailure
from ..models.tags import WriteRequest
from ..utils.process import run_tool
from ..utils.tempfiles import scratch_file

logger = logging.getLogger(__name__)


class MetadataWriter:
    """Rewrites a file's container tags without re-encoding its streams."""

    def __init__(self, config: ToolConfig) -> None:
        self._ffmpeg = config.ffmpeg_path
        self._timeout = config.mux_timeout
        self._scratch_dir = config.scratch_path
        self._temp_prefix = config.temp_prefix

    def write(self, request: WriteRequest) -> None:
        """Apply the request's tags to its file in place.

        ffmpeg remuxes the file into a scratch copy with every stream copied
        and the six editable tags set (empty values clear them). The copy's
        bytes then overwrite the original, which keeps its inode and
        permissions and works across volumes. The scratch copy is removed on
        every path out of this method.

        Raises MuxFailure if ffmpeg fails, IOFailure if the target is not
        writable or the scratch file cannot be created or copied back.
        """
        file_path = request.path
        self._check_target(file_path)

        # Everything inside the block converts OSError to a MediaTagsError,
        # so an OSError escaping it comes from creating the scratch file.
        try:
            with scratch_file(
                suffix=file_path.suffix,
                directory=self._scratch_dir,
                prefix=self._temp_prefix,
            ) as temp_path:
                self._remux(request, temp_path)
                self._replace(temp_path, file_path)
        except OSError as e:
            logger.error(f"Could not create temporary file in {self._scratch_dir}: {e}")
            raise IOFailure("Could not create temporary file", file_path, str(e)) from e

        logger.info(f"Updated tags in {file_path.name}")

    def _replace(self, temp_path: Path, file_path: Path) -> None:
        """Copy the remuxed bytes over the original file."""
        try:
            shutil.copyfile(temp_path, file_path)
        except OSError as e:
            logger.error(f"Could not replace {file_path.name}: {e}")
            raise IOFailure("Could not replace original file", file_path, str(e)) from e

    def _check_target(self, file_path: Path) -> None:
        if not file_path.is_file():
            raise IOFailure("File not found", file_path)
        if not os.access(file_path, os.W_OK):
            raise IOFailure("File is not writable", file_path)

    def build_command(self, request: WriteRequest, output_path: Path) -> list[str]:
        """Build the ffmpeg argument list for a stream-copy tag rewrite."""
        cmd = [
            self._ffmpeg,
            "-hide_banner",
            "-loglevel",
            "error",
            "-i",
            str(request.path),
            "-map",
            "0",  # Keep every stream, including cover art
            "-map",
            "-0:d?",  # Except data streams (tmcd, chapter bin_data); many muxers refuse to copy them
            "-c",
            "copy",  # No re-encoding
            "-map_metadata",
            "0",  # Preserve tags we don't edit
        ]
        # Always set every field; an empty value removes the tag
        for key, value in request.tags.metadata_pairs():
            cmd.extend(["-metadata", f"{key}={value}"])
        cmd.extend(["-y", str(output_path)])
        return cmd

    def _remux(self, request: WriteRequest, output_path: Path) -> None:
        file_path = request.path
        cmd = self.build_command(request, output_path)

        try:
            result = run_tool(cmd, timeout=self._timeout)
        except subprocess.TimeoutExpired:
            logger.warning(f"ffmpeg timed out for {file_path.name}")
            raise MuxFailure(
                "ffmpeg timed out", file_path, f"no result after {self._timeout:g}s"
            ) from None
        except OSError as e:
            logger.error(f"ffmpeg could not be started: {e}")
            raise MuxFailure("ffmpeg could not be started", file_path, str(e)) from e

        if not result.ok:
            logger.warning(f"ffmpeg failed for {file_path.name}: {result.diagnostic[:200]}")
            raise MuxFailure("ffmpeg failed", file_path, result.diagnostic)

        try:
            size = output_path.stat().st_size
        except FileNotFoundError:
            size = 0
        except OSError as e:
            raise IOFailure("Could not inspect temporary file", file_path, str(e)) from e
        if size == 0:
            raise MuxFailure("ffmpeg produced no output", file_path)
