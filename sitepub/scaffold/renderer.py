"""Jinja2 rendering of generated project files."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence

from jinja2 import Environment, FileSystemLoader

from ..models import ProjectMetadata, SourceKind

PARENT_HEADING = "Generated Documents"
PARENT_BLURB = "Interactive documentation and visualizations generated from code."


class ScaffoldRenderer:
    """Renders the entry point files that wrap an imported component."""

    TSX_FILES = ("index.html", "main.tsx", "index.css")

    def __init__(self, templates_dir: Path | None = None) -> None:
        self._env = self._create_env(templates_dir)

    def render(self, template_name: str, **context: object) -> str:
        return self._env.get_template(template_name).render(**context)

    def project_files(self, metadata: ProjectMetadata, *, title: str | None = None) -> Dict[str, str]:
        """Return ``filename -> content`` for the scaffold a project kind needs.

        ``html`` projects are served as-is and get no scaffold.
        """
        if metadata.kind is not SourceKind.TSX:
            return {}
        entry = f"index{metadata.kind.extension}"
        return {
            "index.html": self.render("index.html.j2", title=title or metadata.title or ""),
            "main.tsx": self.render("main.tsx.j2", entry=entry),
            "index.css": self.render("index.css.j2"),
        }

    def write_project_files(
        self,
        project_dir: Path,
        metadata: ProjectMetadata,
        *,
        title: str | None = None,
    ) -> List[Path]:
        written: List[Path] = []
        for filename, content in self.project_files(metadata, title=title).items():
            path = project_dir / filename
            path.write_text(content, encoding="utf-8")
            written.append(path)
        return written

    def vite_config(self, *, base: str, root: Path, out_dir: Path) -> str:
        return self.render(
            "vite.config.ts.j2",
            base=base,
            root=root.as_posix(),
            out_dir=out_dir.as_posix(),
        )

    def parent_summary(self) -> str:
        return self.render("parent-summary.txt.j2", heading=PARENT_HEADING, blurb=PARENT_BLURB)

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories: Sequence[str]
        default_dir = Path(__file__).with_name("templates")
        if templates_dir and templates_dir != default_dir:
            # User templates shadow the packaged ones file by file.
            directories = [str(templates_dir), str(default_dir)]
        else:
            directories = [str(default_dir)]
        loader = FileSystemLoader(list(directories))
        return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


__all__ = ["PARENT_BLURB", "PARENT_HEADING", "ScaffoldRenderer"]
