"""Configuration management for the media tag editor."""

import logging
import os
import shutil
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


DEFAULT_PROBE_TIMEOUT = 30.0  # seconds
DEFAULT_MUX_TIMEOUT = 600.0  # seconds
DEFAULT_TEMP_PREFIX = "ffmpeg-temp-"


def _executable_name(name: str) -> str:
    """Return the platform-specific executable file name for a tool."""
    return f"{name}.exe" if sys.platform == "win32" else name


@dataclass
class ToolConfig:
    """External tool and scratch-space configuration."""

    ffprobe_path: str | None = None
    ffmpeg_path: str | None = None
    bin_dir: Path | None = None  # Directory holding bundled ffprobe/ffmpeg binaries
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT
    mux_timeout: float = DEFAULT_MUX_TIMEOUT
    scratch_dir: Path | None = None
    temp_prefix: str = DEFAULT_TEMP_PREFIX

    def __post_init__(self) -> None:
        if self.ffprobe_path is None:
            self.ffprobe_path = self._resolve_tool("ffprobe")
        if self.ffmpeg_path is None:
            self.ffmpeg_path = self._resolve_tool("ffmpeg")

    def _resolve_tool(self, name: str) -> str:
        """Prefer a bundled binary in bin_dir, fall back to PATH lookup."""
        if self.bin_dir is not None:
            candidate = Path(self.bin_dir) / _executable_name(name)
            if candidate.exists():
                return str(candidate)
        return name

    @property
    def scratch_path(self) -> Path:
        """Directory used for temporary mux outputs."""
        if self.scratch_dir is not None:
            return Path(self.scratch_dir).absolute()
        return Path(tempfile.gettempdir())

    @classmethod
    def from_environment(cls, env_path: Path | None = None) -> "ToolConfig":
        """Load configuration from environment variables."""
        if env_path:
            load_dotenv(env_path)
        else:
            load_dotenv()

        bin_dir = os.getenv("MEDIATAGS_BIN_DIR")
        scratch_dir = os.getenv("MEDIATAGS_SCRATCH_DIR")

        return cls(
            ffprobe_path=os.getenv("MEDIATAGS_FFPROBE") or None,
            ffmpeg_path=os.getenv("MEDIATAGS_FFMPEG") or None,
            bin_dir=Path(bin_dir) if bin_dir else None,
            probe_timeout=_float_from_env("MEDIATAGS_PROBE_TIMEOUT", DEFAULT_PROBE_TIMEOUT),
            mux_timeout=_float_from_env("MEDIATAGS_MUX_TIMEOUT", DEFAULT_MUX_TIMEOUT),
            scratch_dir=Path(scratch_dir) if scratch_dir else None,
            temp_prefix=os.getenv("MEDIATAGS_TEMP_PREFIX", DEFAULT_TEMP_PREFIX),
        )

    def validate(self) -> None:
        """Validate the configuration."""
        if self.probe_timeout <= 0:
            raise ValueError("MEDIATAGS_PROBE_TIMEOUT must be positive")
        if self.mux_timeout <= 0:
            raise ValueError("MEDIATAGS_MUX_TIMEOUT must be positive")
        if not self.temp_prefix:
            raise ValueError("MEDIATAGS_TEMP_PREFIX must not be empty")

        for label, tool in (("ffprobe", self.ffprobe_path), ("ffmpeg", self.ffmpeg_path)):
            if shutil.which(tool) is None:
                raise ValueError(
                    f"{label} not found at '{tool}'. "
                    f"Install ffmpeg or set MEDIATAGS_{label.upper()} / MEDIATAGS_BIN_DIR"
                )

        if not self.scratch_path.is_dir():
            raise ValueError(f"Scratch directory not found: {self.scratch_path}")


def _float_from_env(name: str, default: float) -> float:
    """Read a float from the environment, raising ValueError on junk."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got '{raw}'") from None


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
