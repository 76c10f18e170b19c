"""Import step: turn files dropped into ``import/`` into project directories."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from .config import SitePubConfig
from .logging import get_logger
from .models import ProjectIdentity, ProjectMetadata, SourceDocument, SourceKind
from .naming import derive_identity, merge_metadata
from .scaffold import ScaffoldRenderer
from .stores import CorruptMetadataError, MetadataStore


class ImporterError(RuntimeError):
    """Raised when the import step cannot run or a file fails to import."""


class DuplicateSlugError(ImporterError):
    """Raised when two files of one batch normalise to the same project name."""


@dataclass
class ImportedProject:
    """Outcome of importing a single source file."""

    source: Path
    project_dir: Path
    metadata: ProjectMetadata
    display_title: str
    created: bool


@dataclass
class ImportFailure:
    source: Path
    reason: str


@dataclass
class ImportReport:
    """Summary of an import batch."""

    imported: List[ImportedProject] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    failures: List[ImportFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class Importer:
    """Moves dropped sources into ``projects/<slug>/`` with scaffold and metadata."""

    def __init__(
        self,
        config: SitePubConfig,
        *,
        renderer: ScaffoldRenderer | None = None,
        store: MetadataStore | None = None,
    ) -> None:
        self.config = config
        self.renderer = renderer or ScaffoldRenderer()
        self.store = store or MetadataStore(config.projects_dir)
        self.logger = get_logger("importer")

    def pending_files(self) -> List[Path]:
        """Files directly under the import directory, sorted by name."""
        import_dir = self.config.import_dir
        if not import_dir.is_dir():
            return []
        return sorted(
            (entry for entry in import_dir.iterdir() if entry.is_file() and not entry.name.startswith(".")),
            key=lambda entry: entry.name,
        )

    def has_pending_imports(self) -> bool:
        return any(SourceKind.from_extension(path.suffix) for path in self.pending_files())

    def run(
        self,
        only: str | Path | None = None,
        *,
        title_override: str | None = None,
    ) -> ImportReport:
        """Import every pending file, or just ``only`` when given."""
        if not self.config.import_dir.is_dir():
            raise ImporterError(f"Import directory not found: {self.config.import_dir}")
        if title_override and only is None:
            raise ImporterError("A title override can only be applied to a single file")

        self.config.projects_dir.mkdir(parents=True, exist_ok=True)
        files = [self._resolve_single(only)] if only is not None else self.pending_files()

        report = ImportReport()
        claimed: Dict[str, Path] = {}
        for source in files:
            kind = SourceKind.from_extension(source.suffix)
            if kind is None:
                self.logger.info("Skipping %s (unsupported file type)", source.name)
                report.skipped.append(source)
                continue
            try:
                imported = self._import_file(source, kind, claimed, title_override=title_override)
            except (ImporterError, CorruptMetadataError, OSError, ValueError) as exc:
                if not self.config.importing.continue_on_error:
                    raise
                self.logger.error("Failed to import %s: %s", source.name, exc)
                report.failures.append(ImportFailure(source=source, reason=str(exc)))
                continue
            report.imported.append(imported)

        if not files:
            self.logger.info("No files to import in %s", self.config.import_dir)
        return report

    # ------------------------------------------------------------------
    # Helpers

    def _resolve_single(self, only: str | Path) -> Path:
        candidate = Path(only)
        if not candidate.is_absolute():
            candidate = self.config.import_dir / candidate
        if not candidate.is_file():
            raise ImporterError(f"Import file not found: {candidate}")
        return candidate

    def _import_file(
        self,
        source: Path,
        kind: SourceKind,
        claimed: Dict[str, Path],
        *,
        title_override: str | None,
    ) -> ImportedProject:
        content = source.read_text(encoding="utf-8")
        document = SourceDocument(content=content, kind=kind, filename=source.name)
        identity, fields = derive_identity(document, title_override=title_override)
        slug = self._claim_slug(identity, source, claimed)

        self.logger.info("Processing %s", source.name)
        if fields.title and not title_override:
            self.logger.info("  Detected title: %r", identity.display_title)
        self.logger.info("  Project name: %s (%s)", slug, kind.value)

        # Load before touching the filesystem so a corrupt record aborts cleanly.
        existing = self.store.load(slug)
        if existing is not None and existing.kind is not kind:
            raise ImporterError(
                f"{source.name} would change project {slug!r} from {existing.kind.value} "
                f"to {kind.value}; a project keeps the type it was created with"
            )
        metadata = merge_metadata(existing, slug, identity.display_title, fields.description, kind)

        project_dir = self.store.project_dir(slug)
        created = not project_dir.exists()
        project_dir.mkdir(parents=True, exist_ok=True)
        target = project_dir / f"index{kind.extension}"
        shutil.move(str(source), str(target))
        self.logger.debug("  Moved %s -> %s", source, target)

        try:
            written = self.renderer.write_project_files(project_dir, metadata, title=identity.display_title)
            self.store.save(metadata)
        except Exception:
            self._restore_source(source, target, project_dir, created=created)
            raise
        if written:
            self.logger.debug("  Generated %s", ", ".join(path.name for path in written))

        self.logger.info(
            "  %s project.json (title: %s)",
            "Created" if existing is None else "Updated",
            metadata.title,
        )
        return ImportedProject(
            source=source,
            project_dir=project_dir,
            metadata=metadata,
            display_title=identity.display_title,
            created=created,
        )

    def _claim_slug(self, identity: ProjectIdentity, source: Path, claimed: Dict[str, Path]) -> str:
        slug = identity.slug
        if slug not in claimed:
            claimed[slug] = source
            return slug

        if self.config.importing.on_duplicate != "suffix":
            raise DuplicateSlugError(
                f"{source.name} and {claimed[slug].name} both map to project {slug!r}"
            )
        counter = 2
        resolved = f"{slug}-{counter}"
        # Existing projects on disk are never taken over by a suffixed name.
        while resolved in claimed or self.store.project_dir(resolved).exists():
            counter += 1
            resolved = f"{slug}-{counter}"
        self.logger.warning("  %s collides with %s; using %s", source.name, claimed[slug].name, resolved)
        claimed[resolved] = source
        return resolved

    def _restore_source(self, source: Path, target: Path, project_dir: Path, *, created: bool) -> None:
        """Put a moved source back after the project files could not be written."""
        shutil.move(str(target), str(source))
        if created:
            shutil.rmtree(project_dir, ignore_errors=True)
        self.logger.debug("  Restored %s", source)


__all__ = [
    "DuplicateSlugError",
    "ImportFailure",
    "ImportReport",
    "ImportedProject",
    "Importer",
    "ImporterError",
]
