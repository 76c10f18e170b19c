"""Persistence of ``project.json`` records inside project directories."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

from ..models import ProjectMetadata, SourceKind

METADATA_FILENAME = "project.json"
_KNOWN_KEYS = ("name", "title", "description", "type")


class CorruptMetadataError(RuntimeError):
    """Raised when a persisted metadata record cannot be interpreted."""


def parse_metadata(text: str, *, source: str = METADATA_FILENAME) -> ProjectMetadata:
    """Parse the JSON form of a metadata record."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CorruptMetadataError(f"{source} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise CorruptMetadataError(f"{source} must contain a JSON object")

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise CorruptMetadataError(f"{source} is missing a string 'name'")

    raw_kind = data.get("type")
    kind = SourceKind.from_extension(raw_kind) if isinstance(raw_kind, str) else None
    if kind is None:
        raise CorruptMetadataError(f"{source} has an unsupported 'type': {raw_kind!r}")

    title = data.get("title")
    description = data.get("description")
    extra: Dict[str, object] = {
        key: value for key, value in data.items() if key not in _KNOWN_KEYS
    }
    return ProjectMetadata(
        name=name,
        title=title if isinstance(title, str) else None,
        description=description if isinstance(description, str) else None,
        kind=kind,
        extra=extra,
    )


def dump_metadata(metadata: ProjectMetadata) -> str:
    """Serialise a record the way existing ``project.json`` files are laid out."""
    return json.dumps(metadata.to_dict(), indent=2, ensure_ascii=False)


def render_summary(metadata: ProjectMetadata) -> str:
    """Two-line plain text summary shipped as ``README.txt`` with each build."""
    return f"{metadata.title or ''}\n{metadata.description or ''}"


class MetadataStore:
    """Reads and writes project metadata under a projects root directory."""

    def __init__(self, projects_dir: Path) -> None:
        self.projects_dir = projects_dir

    def project_dir(self, name: str) -> Path:
        return self.projects_dir / name

    def path_for(self, name: str) -> Path:
        return self.project_dir(name) / METADATA_FILENAME

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def load(self, name: str) -> Optional[ProjectMetadata]:
        """Return the record stored in ``projects/<name>``; None when absent."""
        path = self.path_for(name)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        return parse_metadata(text, source=f"{name}/{METADATA_FILENAME}")

    def save(self, metadata: ProjectMetadata, *, directory: str | None = None) -> Path:
        path = self.path_for(directory or metadata.name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_metadata(metadata), encoding="utf-8")
        return path

    def project_names(self) -> List[str]:
        """Sorted directory names under the projects root."""
        if not self.projects_dir.is_dir():
            return []
        return sorted(entry.name for entry in self.projects_dir.iterdir() if entry.is_dir())


__all__ = [
    "CorruptMetadataError",
    "METADATA_FILENAME",
    "MetadataStore",
    "dump_metadata",
    "parse_metadata",
    "render_summary",
]
