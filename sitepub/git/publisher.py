"""Git publishing utilities."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from ..logging import get_logger
from ..process import CommandRunner, describe_failure, run_command


class PublishError(RuntimeError):
    """Raised when staging, committing or pushing fails."""


class Publisher:
    """Commits the working tree after a publish run and pushes it upstream."""

    def __init__(self, runner: CommandRunner | None = None) -> None:
        self._runner = runner or run_command
        self.logger = get_logger("git")

    def publish(
        self,
        repo_path: Path | str,
        *,
        projects_dir: Path | str = "projects",
        push: bool = True,
    ) -> Optional[str]:
        """Stage everything, commit and optionally push.

        Returns the commit message, or None when the path is not a repository
        or there is nothing to commit.
        """
        repo = Path(repo_path)
        if not (repo / ".git").exists():
            self.logger.info("%s is not a git repository; skipping commit", repo)
            return None

        status = self._run(["git", "status", "--porcelain"], cwd=repo, capture_output=True)
        if not status.strip():
            self.logger.info("No git changes to commit")
            return None

        self._run(["git", "add", "-A"], cwd=repo)
        staged = self._run(["git", "diff", "--cached", "--name-only"], cwd=repo, capture_output=True)
        prefix = self._to_relative(repo, Path(projects_dir))
        message = self.commit_message(self.changed_projects(staged.splitlines(), prefix))

        self._run(["git", "commit", "-m", message], cwd=repo, env=self._commit_env())
        self.logger.info("Committed: %s", message)
        if push:
            self._run(["git", "push"], cwd=repo)
            self.logger.info("Pushed to upstream")
        return message

    @staticmethod
    def changed_projects(paths: Iterable[str], projects_prefix: str = "projects") -> List[str]:
        """Project directory names touched by the staged ``paths``."""
        prefix = projects_prefix.strip("/") + "/"
        names = set()
        for path in paths:
            normalised = path.strip().replace("\\", "/")
            if not normalised.startswith(prefix):
                continue
            name = normalised[len(prefix):].split("/", 1)[0]
            if name:
                names.add(name)
        return sorted(names)

    @staticmethod
    def commit_message(projects: Sequence[str]) -> str:
        if projects:
            return f"Update projects: {', '.join(projects)}"
        return "Update generated docs"

    # ------------------------------------------------------------------
    # Helpers

    @staticmethod
    def _commit_env() -> dict[str, str]:
        env = os.environ.copy()
        env.setdefault("GIT_AUTHOR_NAME", "sitepub")
        env.setdefault("GIT_AUTHOR_EMAIL", "sitepub@example.com")
        env.setdefault("GIT_COMMITTER_NAME", env["GIT_AUTHOR_NAME"])
        env.setdefault("GIT_COMMITTER_EMAIL", env["GIT_AUTHOR_EMAIL"])
        return env

    @staticmethod
    def _to_relative(repo: Path, path: Path) -> str:
        if not path.is_absolute():
            return path.as_posix()
        try:
            return path.resolve().relative_to(repo.resolve()).as_posix()
        except ValueError:
            return path.as_posix()

    def _run(
        self,
        args: List[str],
        *,
        cwd: Path,
        env: dict[str, str] | None = None,
        capture_output: bool = False,
    ) -> str:
        try:
            return self._runner(args, cwd=cwd, env=env, capture_output=capture_output)
        except (subprocess.CalledProcessError, FileNotFoundError) as exc:
            raise PublishError(describe_failure(args, exc)) from exc


__all__ = ["PublishError", "Publisher"]
