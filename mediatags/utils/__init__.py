"""Utility modules for child processes and scratch files."""

from .process import ProcessResult, run_tool
from .tempfiles import scratch_file

__all__ = [
    "ProcessResult",
    "run_tool",
    "scratch_file",
]
