"""Probe result data models."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any


class TagMap(Mapping[str, str]):
    """Read-only tag mapping with case-insensitive keys.

    ffprobe reports tags with whatever casing the container used, so the same
    file may carry both ``title`` and ``TITLE``. All keys are lower-cased once
    at construction; a value stored under an already lower-case key wins over
    other casings unless it is empty.
    """

    def __init__(self, source: Mapping[str, Any] | None = None) -> None:
        tags: dict[str, str] = {}
        items = list((source or {}).items())

        # Exact lower-case keys first, then fill gaps from other casings
        for key, value in items:
            if key == key.lower():
                tags[key] = _as_text(value)
        for key, value in items:
            lowered = key.lower()
            if key != lowered and not tags.get(lowered):
                tags[lowered] = _as_text(value)

        self._tags = tags

    def __getitem__(self, key: str) -> str:
        return self._tags[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._tags

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def first(self, *keys: str) -> str:
        """Return the first non-empty value among keys, or an empty string."""
        for key in keys:
            value = self.get(key)
            if value:
                return value
        return ""

    def to_dict(self) -> dict[str, str]:
        """Convert to a plain dictionary."""
        return dict(self._tags)

    def __repr__(self) -> str:
        return f"TagMap({self._tags!r})"


@dataclass(frozen=True)
class FormatInfo:
    """Container-level section of a probe result."""

    format_name: str = ""
    duration: float | None = None  # seconds
    bit_rate: int | None = None  # bits/s
    tags: TagMap = field(default_factory=TagMap)
    raw: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_probe(cls, data: Mapping[str, Any]) -> "FormatInfo":
        """Build from the ``format`` object of ffprobe's JSON output."""
        return cls(
            format_name=str(data.get("format_name") or ""),
            duration=_parse_float(data.get("duration")),
            bit_rate=_parse_int(data.get("bit_rate")),
            tags=TagMap(data.get("tags") or {}),
            raw=MappingProxyType(dict(data)),
        )

    @property
    def duration_display(self) -> str:
        """Duration as m:ss, or N/A when unknown."""
        if not self.duration:
            return "N/A"
        minutes, seconds = divmod(int(self.duration), 60)
        return f"{minutes}:{seconds:02d}"

    @property
    def bit_rate_display(self) -> str:
        """Bit rate in kbps, or N/A when unknown."""
        if not self.bit_rate:
            return "N/A"
        return f"{round(self.bit_rate / 1000)} kbps"


@dataclass(frozen=True)
class MediaDescriptor:
    """Structured description of a media file as reported by ffprobe."""

    path: Path
    format: FormatInfo
    streams: tuple[Mapping[str, Any], ...] = ()

    @classmethod
    def from_probe(cls, path: Path, data: Mapping[str, Any]) -> "MediaDescriptor":
        """Build from ffprobe's parsed JSON document."""
        streams = data.get("streams") or []
        return cls(
            path=path,
            format=FormatInfo.from_probe(data["format"]),
            streams=tuple(MappingProxyType(dict(s)) for s in streams if isinstance(s, Mapping)),
        )

    @property
    def tags(self) -> TagMap:
        return self.format.tags

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {
            "path": str(self.path),
            "format": dict(self.format.raw),
            "streams": [dict(stream) for stream in self.streams],
        }


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def _parse_float(value: Any) -> float | None:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _parse_int(value: Any) -> int | None:
    number = _parse_float(value)
    return int(number) if number is not None else None
