"""Metadata extraction and naming engine."""

from .extractor import clean_title, extract
from .merger import default_description, merge_metadata
from .normalizer import EmptyTitleError, derive_identity, slugify, title_from_filename

__all__ = [
    "EmptyTitleError",
    "clean_title",
    "default_description",
    "derive_identity",
    "extract",
    "merge_metadata",
    "slugify",
    "title_from_filename",
]
