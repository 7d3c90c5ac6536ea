"""Read and rewrite media container tags using ffprobe and ffmpeg."""

from .config import ToolConfig
from .core import read_metadata, write_metadata
from .errors import IOFailure, MediaTagsError, MuxFailure, ProbeFailure
from .models import EDITABLE_FIELDS, EditableTagSet, FormatInfo, MediaDescriptor, TagMap, WriteRequest

__all__ = [
    "EDITABLE_FIELDS",
    "EditableTagSet",
    "FormatInfo",
    "IOFailure",
    "MediaDescriptor",
    "MediaTagsError",
    "MuxFailure",
    "ProbeFailure",
    "TagMap",
    "ToolConfig",
    "WriteRequest",
    "read_metadata",
    "write_metadata",
]
