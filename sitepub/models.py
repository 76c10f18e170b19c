"""Core data models shared across sitepub components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class SourceKind(str, Enum):
    """Kind of source document, fixed by the file extension at import time."""

    TSX = "tsx"
    HTML = "html"

    @property
    def extension(self) -> str:
        return f".{self.value}"

    @classmethod
    def from_extension(cls, suffix: str) -> Optional["SourceKind"]:
        """Return the kind for a file suffix such as ``.tsx``; None if unsupported."""
        normalised = suffix.lower().lstrip(".")
        for kind in cls:
            if kind.value == normalised:
                return kind
        return None


@dataclass(frozen=True)
class SourceDocument:
    """A dropped source file as read from the import directory."""

    content: str
    kind: SourceKind
    filename: str


@dataclass(frozen=True)
class ExtractedFields:
    """Title and description found in a source document, if any."""

    title: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class ProjectIdentity:
    """Directory-safe slug plus the human readable title of a project."""

    slug: str
    display_title: str


@dataclass
class ProjectMetadata:
    """Persisted ``project.json`` record. ``kind`` is serialised as ``type``.

    ``title`` and ``description`` are None only when the key is missing from
    the persisted file; an empty string is a deliberate value.
    """

    name: str
    title: Optional[str]
    description: Optional[str]
    kind: SourceKind
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "type": self.kind.value,
        }
        for key, value in self.extra.items():
            if key not in payload:
                payload[key] = value
        return payload
