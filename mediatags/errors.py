"""Errors raised by the metadata reader and writer."""

from pathlib import Path


class MediaTagsError(Exception):
    """Base exception for metadata read/write failures."""

    def __init__(self, message: str, path: Path | str | None = None, diagnostic: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None
        self.diagnostic = diagnostic

    def __str__(self) -> str:
        text = self.message
        if self.path is not None:
            text = f"{text} ({self.path.name})"
        if self.diagnostic:
            text = f"{text}: {self.diagnostic}"
        return text


class ProbeFailure(MediaTagsError):
    """The probing tool failed or produced output that could not be parsed."""

    pass


class MuxFailure(MediaTagsError):
    """The muxing tool rejected the stream-copy/metadata operation."""

    pass


class IOFailure(MediaTagsError):
    """Temp-file creation, copy, or cleanup failed."""

    pass
