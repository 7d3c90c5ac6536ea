"""Shared fixtures for the mediatags test suite."""

import json
import sys
from pathlib import Path

import pytest

# Add parent dir to path so mediatags is importable without installing
sys.path.insert(0, str(Path(__file__).parent.parent))

from mediatags.config import ToolConfig
from mediatags.utils.process import ProcessResult


SAMPLE_PROBE = {
    "streams": [
        {"index": 0, "codec_type": "audio", "codec_name": "flac", "sample_rate": "44100"},
        {"index": 1, "codec_type": "video", "codec_name": "mjpeg"},
    ],
    "format": {
        "filename": "song.flac",
        "format_name": "flac",
        "duration": "185.400000",
        "bit_rate": "912345",
        "tags": {
            "TITLE": "Old",
            "ARTIST": "Someone",
            "album": "First Album",
            "DATE": "1999",
            "ENCODER": "Lavf60.3.100",
        },
    },
}


@pytest.fixture
def scratch_dir(tmp_path):
    """Scratch directory so leftover temp files are easy to spot."""
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def tool_config(scratch_dir):
    """ToolConfig pointing at a private scratch directory."""
    return ToolConfig(
        ffprobe_path="ffprobe",
        ffmpeg_path="ffmpeg",
        scratch_dir=scratch_dir,
    )


@pytest.fixture
def media_file(tmp_path):
    """A small file standing in for a media file."""
    media_dir = tmp_path / "media"
    media_dir.mkdir()
    path = media_dir / "song.flac"
    path.write_bytes(b"original-bytes" * 64)
    return path


def make_result(args, returncode=0, stdout="", stderr=""):
    """Build a ProcessResult as run_tool would return it."""
    return ProcessResult(args=tuple(args), returncode=returncode, stdout=stdout, stderr=stderr)


def probe_output(data=None) -> str:
    """ffprobe-style JSON output."""
    return json.dumps(SAMPLE_PROBE if data is None else data)
