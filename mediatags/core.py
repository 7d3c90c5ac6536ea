"""Stateless entry points for reading and writing media tags."""

from collections.abc import Mapping
from pathlib import Path

from .config import ToolConfig
from .extractors.metadata import MetadataReader
from .models.descriptor import MediaDescriptor
from .models.tags import EditableTagSet, WriteRequest
from .processors.writer import MetadataWriter


def read_metadata(path: Path | str, config: ToolConfig | None = None) -> MediaDescriptor:
    """Probe a media file and return its format and stream description.

    Raises ProbeFailure on any probing error.
    """
    return MetadataReader(config or ToolConfig()).read(path)


def write_metadata(
    path: Path | str,
    tags: EditableTagSet | Mapping[str, str],
    config: ToolConfig | None = None,
) -> None:
    """Write the six editable tags to a media file in place.

    A mapping may leave fields out; they are written as empty strings,
    clearing the tag. Raises MuxFailure or IOFailure, in which case the
    original file is left as it was.
    """
    if not isinstance(tags, EditableTagSet):
        tags = EditableTagSet.from_mapping(tags)
    MetadataWriter(config or ToolConfig()).write(WriteRequest(Path(path), tags))
