"""Data models for probe results and editable tags."""

from .descriptor import FormatInfo, MediaDescriptor, TagMap
from .tags import EDITABLE_FIELDS, EditableTagSet, WriteRequest

__all__ = [
    "EDITABLE_FIELDS",
    "EditableTagSet",
    "FormatInfo",
    "MediaDescriptor",
    "TagMap",
    "WriteRequest",
]
