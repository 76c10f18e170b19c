"""Build step: bundle or copy every project into ``builds/<name>/``."""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .config import SitePubConfig
from .logging import get_logger
from .models import ProjectMetadata, SourceKind
from .naming.normalizer import is_slug
from .process import CommandRunner, describe_failure, run_command
from .scaffold import ScaffoldRenderer
from .stores import METADATA_FILENAME, MetadataStore, render_summary

SUMMARY_FILENAME = "README.txt"


class BuildError(RuntimeError):
    """Raised when a project cannot be built."""


class RenameConflictError(BuildError):
    """Raised when a pending rename would overwrite another project."""


@dataclass(frozen=True)
class RenamePlan:
    """Directory move implied by a ``project.json`` whose name was edited."""

    old_name: str
    new_name: str
    source_dir: Path
    target_dir: Path
    stale_build_dir: Path


@dataclass
class BuildResult:
    name: str
    kind: SourceKind
    build_dir: Path
    renamed_from: Optional[str] = None


def plan_rename(
    projects_dir: Path,
    builds_dir: Path,
    directory: str,
    metadata: ProjectMetadata,
) -> Optional[RenamePlan]:
    """Return the move needed to bring ``directory`` in line with its metadata."""
    if metadata.name == directory:
        return None
    if not is_slug(metadata.name):
        raise BuildError(
            f"{directory}/{METADATA_FILENAME} names the project {metadata.name!r}, "
            "which is not a valid project name"
        )
    return RenamePlan(
        old_name=directory,
        new_name=metadata.name,
        source_dir=projects_dir / directory,
        target_dir=projects_dir / metadata.name,
        stale_build_dir=builds_dir / directory,
    )


def apply_rename(plan: RenamePlan) -> None:
    """Move the project directory and drop the build output of the old name."""
    if plan.target_dir.exists():
        raise RenameConflictError(
            f"Cannot rename project {plan.old_name!r} to {plan.new_name!r}: "
            f"{plan.target_dir} already exists"
        )
    plan.source_dir.rename(plan.target_dir)
    if plan.stale_build_dir.exists():
        shutil.rmtree(plan.stale_build_dir)


class ProjectBuilder:
    """Builds projects from the projects directory into the builds directory."""

    def __init__(
        self,
        config: SitePubConfig,
        *,
        runner: CommandRunner | None = None,
        renderer: ScaffoldRenderer | None = None,
        store: MetadataStore | None = None,
    ) -> None:
        self.config = config
        self._runner = runner or run_command
        self.renderer = renderer or ScaffoldRenderer()
        self.store = store or MetadataStore(config.projects_dir)
        self.logger = get_logger("builder")

    def ensure_parent_summary(self) -> bool:
        """Write the top-level summary file once; True when it was created."""
        path = self.config.parent_summary
        if path.exists():
            return False
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.renderer.parent_summary(), encoding="utf-8")
        self.logger.info("Created %s", path.name)
        return True

    def build_all(self) -> List[BuildResult]:
        if not self.config.projects_dir.is_dir():
            raise BuildError(f"Projects directory not found: {self.config.projects_dir}")
        self.ensure_parent_summary()

        names = self.store.project_names()
        if not names:
            self.logger.info("No projects found in %s", self.config.projects_dir)
            return []
        self.logger.info("Found %d project(s) to build", len(names))

        results: List[BuildResult] = []
        for name in names:
            result = self.build(name)
            if result is not None:
                results.append(result)
        return results

    def build(self, name: str) -> Optional[BuildResult]:
        """Build one project; None when the directory holds no metadata."""
        project_dir = self.store.project_dir(name)
        if not project_dir.is_dir():
            raise BuildError(f"Project not found: {name}")

        self.logger.info("Building %s", name)
        metadata = self.store.load(name)
        if metadata is None:
            self.logger.warning("  Skipping %s (no %s found)", name, METADATA_FILENAME)
            return None

        renamed_from: Optional[str] = None
        plan = plan_rename(self.config.projects_dir, self.config.builds_dir, name, metadata)
        if plan is not None:
            self.logger.info("  Directory name mismatch: %s -> %s", plan.old_name, plan.new_name)
            apply_rename(plan)
            renamed_from = name
            name = plan.new_name
            project_dir = plan.target_dir

        build_dir = self.config.builds_dir / name
        build_dir.mkdir(parents=True, exist_ok=True)

        if metadata.kind is SourceKind.TSX:
            self._bundle(name, project_dir, build_dir)
        else:
            self._copy(project_dir, build_dir)

        (build_dir / SUMMARY_FILENAME).write_text(render_summary(metadata), encoding="utf-8")
        self.logger.info("  Built %s into %s", name, build_dir)
        return BuildResult(name=name, kind=metadata.kind, build_dir=build_dir, renamed_from=renamed_from)

    # ------------------------------------------------------------------
    # Helpers

    def _bundle(self, name: str, project_dir: Path, build_dir: Path) -> None:
        config_path = self.config.root / f".vite.config.{name}.ts"
        config_path.write_text(
            self.renderer.vite_config(
                base=f"{self.config.build.base_path}{name}/",
                root=project_dir,
                out_dir=build_dir,
            ),
            encoding="utf-8",
        )
        args = [*self.config.build.vite_command, "--config", str(config_path)]
        self.logger.debug("  Running %s", " ".join(args))
        try:
            self._runner(args, cwd=self.config.root)
        except (subprocess.CalledProcessError, FileNotFoundError) as exc:
            raise BuildError(f"Bundling {name} failed: {describe_failure(args, exc)}") from exc
        finally:
            config_path.unlink(missing_ok=True)

    def _copy(self, project_dir: Path, build_dir: Path) -> None:
        def _ignore_metadata(directory: str, names: List[str]) -> List[str]:
            if Path(directory) == project_dir:
                return [entry for entry in names if entry == METADATA_FILENAME]
            return []

        shutil.copytree(project_dir, build_dir, ignore=_ignore_metadata, dirs_exist_ok=True)


__all__ = [
    "BuildError",
    "BuildResult",
    "ProjectBuilder",
    "RenameConflictError",
    "RenamePlan",
    "SUMMARY_FILENAME",
    "apply_rename",
    "plan_rename",
]
