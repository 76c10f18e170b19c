"""Slug and display-title derivation."""

from __future__ import annotations

import re
import unicodedata
from pathlib import PurePath
from typing import Optional, Tuple

from ..models import ExtractedFields, ProjectIdentity, SourceDocument
from .extractor import extract

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


class EmptyTitleError(ValueError):
    """Raised when neither extraction nor the filename produce a usable name."""


def slugify(title: str) -> str:
    """Return a lowercase, hyphen separated, ASCII-only slug for ``title``."""
    folded = unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode("ascii")
    slug = folded.lower()
    slug = re.sub(r"[^\w\s-]", "", slug, flags=re.ASCII)
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("- \t\n")


def title_from_filename(stem: str) -> str:
    """Fallback display title built from a slug-like filename stem."""
    segments = [segment for segment in stem.split("-") if segment]
    return " ".join(segment[:1].upper() + segment[1:] for segment in segments)


def is_slug(value: str) -> bool:
    return bool(SLUG_PATTERN.match(value))


def derive_identity(
    document: SourceDocument,
    *,
    title_override: Optional[str] = None,
) -> Tuple[ProjectIdentity, ExtractedFields]:
    """Resolve the slug and display title for a source document.

    A manual ``title_override`` replaces title extraction entirely and is used
    verbatim; the description is still extracted from the content. Without a
    title from either source the filename stem is used.
    """
    fields = extract(document.content, document.kind)

    override = title_override.strip() if title_override else ""
    if override:
        display_title = override
        slug = slugify(override)
    elif fields.title:
        display_title = fields.title
        slug = slugify(fields.title)
    else:
        stem = PurePath(document.filename).stem
        display_title = title_from_filename(stem).strip()
        slug = slugify(stem)

    if not display_title:
        raise EmptyTitleError(f"No title could be derived for {document.filename!r}")
    if not slug:
        raise EmptyTitleError(
            f"Title {display_title!r} of {document.filename!r} does not produce a usable slug"
        )

    return ProjectIdentity(slug=slug, display_title=display_title), fields


__all__ = [
    "EmptyTitleError",
    "SLUG_PATTERN",
    "derive_identity",
    "is_slug",
    "slugify",
    "title_from_filename",
]
