"""Media metadata extraction using ffprobe."""

import json
import logging
import subprocess
from pathlib import Path

from ..config import ToolConfig
from ..errors import ProbeFailure
from ..models.descriptor import MediaDescriptor
from ..utils.process import run_tool

logger = logging.getLogger(__name__)


class MetadataReader:
    """Reads container and stream metadata from a media file with ffprobe."""

    def __init__(self, config: ToolConfig) -> None:
        self._ffprobe = config.ffprobe_path
        self._timeout = config.probe_timeout

    def read(self, file_path: Path | str) -> MediaDescriptor:
        """Probe a file and return its descriptor.

        Raises ProbeFailure if the file is missing, ffprobe cannot run or
        exits non-zero, or its output is not a JSON object with a format
        section. The file itself is never modified.
        """
        # Absolute so names like "-x.mp3" or "a:b.mp3" are not read as options or protocols
        file_path = Path(file_path).absolute()
        if not file_path.is_file():
            raise ProbeFailure("File not found", file_path)

        cmd = [
            self._ffprobe,
            "-v",
            "error",  # Errors only, no banner or stream dump on stderr
            "-print_format",
            "json",
            "-show_format",
            "-show_streams",
            str(file_path),
        ]

        try:
            result = run_tool(cmd, timeout=self._timeout)
        except subprocess.TimeoutExpired:
            logger.warning(f"ffprobe timed out for {file_path.name}")
            raise ProbeFailure(
                "ffprobe timed out", file_path, f"no result after {self._timeout:g}s"
            ) from None
        except OSError as e:
            logger.error(f"ffprobe could not be started: {e}")
            raise ProbeFailure("ffprobe could not be started", file_path, str(e)) from e

        if not result.ok:
            logger.warning(f"ffprobe failed for {file_path.name}: {result.diagnostic[:200]}")
            raise ProbeFailure("ffprobe failed", file_path, result.diagnostic)

        return self._parse(file_path, result.stdout)

    def _parse(self, file_path: Path, output: str) -> MediaDescriptor:
        """Parse ffprobe's JSON document into a MediaDescriptor."""
        try:
            data = json.loads(output)
        except json.JSONDecodeError as e:
            raise ProbeFailure("Unreadable ffprobe output", file_path, str(e)) from e

        if not isinstance(data, dict):
            raise ProbeFailure("Unexpected ffprobe output", file_path, "top level is not an object")
        if not isinstance(data.get("format"), dict):
            raise ProbeFailure("Unexpected ffprobe output", file_path, "missing format section")

        descriptor = MediaDescriptor.from_probe(file_path, data)
        logger.debug(
            f"Probed {file_path.name}: {descriptor.format.format_name}, "
            f"{len(descriptor.streams)} stream(s), {len(descriptor.tags)} tag(s)"
        )
        return descriptor
