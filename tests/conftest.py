from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Mapping

import pytest

from sitepub.config import SitePubConfig


class Workspace:
    """Throwaway sitepub workspace with import/, projects/ and builds/."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = (tmp_path / "site").resolve()
        self.root.mkdir()
        self.config = SitePubConfig.defaults(self.root)
        self.config.import_dir.mkdir()

    def drop(self, filename: str, content: str) -> Path:
        """Place a file into the import directory."""
        path = self.config.import_dir / filename
        path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return path

    def project(self, directory: str, metadata: Mapping[str, object], files: Mapping[str, str] | None = None) -> Path:
        """Create ``projects/<directory>`` holding ``project.json`` and ``files``."""
        project_dir = self.config.projects_dir / directory
        project_dir.mkdir(parents=True, exist_ok=True)
        (project_dir / "project.json").write_text(json.dumps(metadata, indent=2), encoding="utf-8")
        for relative, content in (files or {}).items():
            path = project_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return project_dir

    def build(self, name: str, files: Mapping[str, str]) -> Path:
        build_dir = self.config.builds_dir / name
        build_dir.mkdir(parents=True, exist_ok=True)
        for relative, content in files.items():
            (build_dir / relative).write_text(content, encoding="utf-8")
        return build_dir

    def read_metadata(self, directory: str) -> dict:
        path = self.config.projects_dir / directory / "project.json"
        return json.loads(path.read_text(encoding="utf-8"))


class RecordingRunner:
    """Command runner double that records every invocation."""

    def __init__(self, outputs: Mapping[tuple, str] | None = None) -> None:
        self.calls: list[dict[str, object]] = []
        self._outputs = dict(outputs or {})

    def __call__(self, args, *, cwd, env=None, capture_output=False, input=None):  # type: ignore[no-untyped-def]
        argv = list(args)
        self.calls.append(
            {"args": argv, "cwd": Path(cwd), "env": env, "capture_output": capture_output, "input": input}
        )
        for prefix, output in self._outputs.items():
            if tuple(argv[: len(prefix)]) == prefix:
                return output
        return ""

    @property
    def commands(self) -> list[list[str]]:
        return [call["args"] for call in self.calls]  # type: ignore[misc]


@pytest.fixture
def workspace(tmp_path: Path) -> Workspace:
    """Provide a fresh workspace rooted at the pytest tmp_path."""
    return Workspace(tmp_path)


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def make_runner():
    """Factory for runners that answer captured commands with canned output."""
    return RecordingRunner
