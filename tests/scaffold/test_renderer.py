"""Tests for the scaffold renderer."""

from __future__ import annotations

from pathlib import Path

from sitepub.models import ProjectMetadata, SourceKind
from sitepub.scaffold import ScaffoldRenderer


def _metadata(kind: SourceKind, title: str = "Cool Viz") -> ProjectMetadata:
    return ProjectMetadata(name="cool-viz", title=title, description="D", kind=kind)


def test_tsx_projects_get_entry_point_files() -> None:
    files = ScaffoldRenderer().project_files(_metadata(SourceKind.TSX))

    assert sorted(files) == ["index.css", "index.html", "main.tsx"]
    assert "<title>Cool Viz</title>" in files["index.html"]
    assert '<script type="module" src="/main.tsx"></script>' in files["index.html"]
    assert "import App from './index.tsx'" in files["main.tsx"]
    assert files["index.css"].startswith("@tailwind base;")


def test_html_title_is_escaped() -> None:
    files = ScaffoldRenderer().project_files(_metadata(SourceKind.TSX), title="Tom & Jerry <3")
    assert "<title>Tom &amp; Jerry &lt;3</title>" in files["index.html"]


def test_html_projects_get_no_scaffold(tmp_path: Path) -> None:
    written = ScaffoldRenderer().write_project_files(tmp_path, _metadata(SourceKind.HTML))
    assert written == []
    assert list(tmp_path.iterdir()) == []


def test_vite_config_quotes_paths() -> None:
    config = ScaffoldRenderer().vite_config(
        base="/generated-docs/cool-viz/",
        root=Path("/work/projects/cool-viz"),
        out_dir=Path("/work/builds/cool-viz"),
    )
    assert 'base: "/generated-docs/cool-viz/"' in config
    assert 'root: "/work/projects/cool-viz"' in config
    assert 'outDir: "/work/builds/cool-viz"' in config
    assert "emptyOutDir: true" in config


def test_parent_summary_text() -> None:
    assert ScaffoldRenderer().parent_summary() == (
        "Generated Documents\nInteractive documentation and visualizations generated from code."
    )


def test_custom_templates_shadow_packaged_ones(tmp_path: Path) -> None:
    (tmp_path / "index.css.j2").write_text("body { color: red; }", encoding="utf-8")
    files = ScaffoldRenderer(tmp_path).project_files(_metadata(SourceKind.TSX))
    assert files["index.css"] == "body { color: red; }"
    assert "<title>Cool Viz</title>" in files["index.html"]
