"""Editable tag models."""

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .descriptor import MediaDescriptor, TagMap

EDITABLE_FIELDS = ("title", "artist", "album", "year", "genre", "comment")

# Container tag keys written for each editable field. The year goes to
# ffmpeg's canonical "date" key and to "year" so a stale year tag cannot
# shadow it on reread.
FIELD_TAG_KEYS = {
    "title": ("title",),
    "artist": ("artist",),
    "album": ("album",),
    "year": ("date", "year"),
    "genre": ("genre",),
    "comment": ("comment",),
}


@dataclass(frozen=True)
class EditableTagSet:
    """The six tag fields a user can edit. Empty string means cleared."""

    title: str = ""
    artist: str = ""
    album: str = ""
    year: str = ""
    genre: str = ""
    comment: str = ""

    def __post_init__(self) -> None:
        for name in EDITABLE_FIELDS:
            if not isinstance(getattr(self, name), str):
                raise TypeError(f"Tag field '{name}' must be a string")

    @classmethod
    def from_tags(cls, tags: TagMap) -> "EditableTagSet":
        """Pick the editable fields out of a file's tags."""
        return cls(**{
            name: tags.first(*FIELD_TAG_KEYS[name])
            for name in EDITABLE_FIELDS
        })

    @classmethod
    def from_descriptor(cls, descriptor: MediaDescriptor) -> "EditableTagSet":
        return cls.from_tags(descriptor.tags)

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "EditableTagSet":
        """Build from a plain mapping; missing fields become empty strings."""
        _check_fields(values)
        return cls(**{name: values.get(name) or "" for name in EDITABLE_FIELDS})

    def replace(self, **changes: str) -> "EditableTagSet":
        """Return a copy with some fields changed."""
        _check_fields(changes)
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in EDITABLE_FIELDS}

    def metadata_pairs(self) -> list[tuple[str, str]]:
        """Container key/value pairs to write, covering every field."""
        return [
            (key, getattr(self, name))
            for name in EDITABLE_FIELDS
            for key in FIELD_TAG_KEYS[name]
        ]


@dataclass(frozen=True)
class WriteRequest:
    """A file path plus the full set of tag values to write to it."""

    path: Path
    tags: EditableTagSet

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path).absolute())


def _check_fields(values: Mapping[str, str]) -> None:
    unknown = sorted(set(values) - set(EDITABLE_FIELDS))
    if unknown:
        raise ValueError(
            f"Unknown tag field(s): {', '.join(unknown)}. "
            f"Editable fields: {', '.join(EDITABLE_FIELDS)}"
        )
