"""Reconcile freshly derived metadata with a previously persisted record."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from ..models import ProjectMetadata, SourceKind

DEFAULT_DESCRIPTION_PREFIX = "Interactive "


def default_description(title: str) -> str:
    return f"{DEFAULT_DESCRIPTION_PREFIX}{title}"


def merge_metadata(
    existing: Optional[ProjectMetadata],
    name: str,
    title: str,
    description: Optional[str],
    kind: SourceKind,
) -> ProjectMetadata:
    """Return the record to persist for a (re-)imported project.

    Only ``name`` and ``kind`` are forced onto an existing record so that a
    re-import never clobbers a hand edited title or description. Fields missing
    from the record are filled in; empty strings are kept.
    """
    if existing is None:
        return ProjectMetadata(
            name=name,
            title=title,
            description=description or default_description(title),
            kind=kind,
        )

    kept_title = title if existing.title is None else existing.title
    kept_description = existing.description
    if kept_description is None:
        kept_description = description or default_description(kept_title or title)
    return replace(
        existing,
        name=name,
        kind=kind,
        title=kept_title,
        description=kept_description,
        extra=dict(existing.extra),
    )


__all__ = ["default_description", "merge_metadata"]
