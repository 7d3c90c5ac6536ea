"""Processor modules for writing tags."""

from .writer import MetadataWriter

__all__ = ["MetadataWriter"]
