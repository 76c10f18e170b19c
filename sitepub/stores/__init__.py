"""Flat-file stores used by the pipeline."""

from .metadata_store import (
    CorruptMetadataError,
    METADATA_FILENAME,
    MetadataStore,
    dump_metadata,
    parse_metadata,
    render_summary,
)

__all__ = [
    "CorruptMetadataError",
    "METADATA_FILENAME",
    "MetadataStore",
    "dump_metadata",
    "parse_metadata",
    "render_summary",
]
