"""Extractor modules for media metadata."""

from .metadata import MetadataReader

__all__ = ["MetadataReader"]
