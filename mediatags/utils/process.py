"""Child process helpers for the external media tools."""

import logging
import shlex
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MAX_DIAGNOSTIC_CHARS = 500


@dataclass(frozen=True)
class ProcessResult:
    """Exit status and captured output of a finished tool invocation."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def diagnostic(self) -> str:
        """Trimmed stderr suitable for an error message."""
        text = self.stderr.strip()
        if not text:
            return f"exit status {self.returncode}"
        if len(text) > MAX_DIAGNOSTIC_CHARS:
            text = "..." + text[-MAX_DIAGNOSTIC_CHARS:]
        return text


def run_tool(args: list[str], timeout: float | None = None) -> ProcessResult:
    """Run a tool to completion and capture its output.

    The exit status is not interpreted here. OSError (tool missing or not
    executable) and subprocess.TimeoutExpired propagate to the caller; on
    timeout the child is killed before the exception is raised.
    """
    logger.debug(f"Running: {shlex.join(args)}")
    completed = subprocess.run(
        args,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout,
        stdin=subprocess.DEVNULL,
    )
    return ProcessResult(
        args=tuple(args),
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
