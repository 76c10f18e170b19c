"""Upload built projects to the web server with sftp/scp."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from ..builder import SUMMARY_FILENAME
from ..config import SitePubConfig
from ..logging import get_logger
from ..process import CommandRunner, describe_failure, run_command


class DeployError(RuntimeError):
    """Raised when a build cannot be uploaded."""


@dataclass
class DeployResult:
    name: str
    remote_path: str
    public_url: Optional[str]
    files: int


class Deployer:
    """Mirrors ``builds/<name>/`` to ``<remote_parent>/<name>/`` on the server."""

    def __init__(self, config: SitePubConfig, *, runner: CommandRunner | None = None) -> None:
        self.config = config
        self._runner = runner or run_command
        self.logger = get_logger("deploy")

    @property
    def target(self) -> str:
        target = self.config.deploy.target
        if not target:
            raise DeployError("No deploy host configured (set deploy.host or DEPLOY_SSH_HOST)")
        return target

    def built_projects(self) -> List[str]:
        builds_dir = self.config.builds_dir
        if not builds_dir.is_dir():
            return []
        return sorted(entry.name for entry in builds_dir.iterdir() if entry.is_dir())

    def deploy_all(self) -> List[DeployResult]:
        if not self.config.builds_dir.is_dir():
            raise DeployError(f"Builds directory not found: {self.config.builds_dir}")
        names = self.built_projects()
        if not names:
            raise DeployError(f"No built projects found in {self.config.builds_dir}")

        self.prepare_remote()
        self.logger.info("Found %d project(s) to deploy", len(names))
        return [self.deploy(name, prepared=True) for name in names]

    def prepare_remote(self) -> None:
        """Create the remote parent directory and upload the parent summary."""
        self._mkdirs([self.config.deploy.remote_parent])
        summary = self.config.parent_summary
        if summary.is_file():
            self.logger.info("Uploading parent summary")
            self._scp([summary], f"{self.config.deploy.remote_parent}/{SUMMARY_FILENAME}")

    def deploy(self, name: str, *, prepared: bool = False) -> DeployResult:
        build_path = self.config.builds_dir / name
        if not build_path.is_dir():
            raise DeployError(f"Build not found at {build_path}")
        if not (build_path / SUMMARY_FILENAME).is_file():
            raise DeployError(f"{SUMMARY_FILENAME} not found in build {build_path}")
        if not prepared:
            self.prepare_remote()

        remote_parent = self.config.deploy.remote_parent
        remote_path = f"{remote_parent}/{name}"
        public_url = self.config.deploy.public_url(name)
        self.logger.info("Deploying %s to %s", name, remote_path)

        self._mkdirs([remote_parent, remote_path])
        entries = sorted(build_path.iterdir(), key=lambda entry: entry.name)
        self._scp(entries, f"{remote_path}/")

        if public_url:
            self.logger.info("  Live at %s", public_url)
        return DeployResult(name=name, remote_path=remote_path, public_url=public_url, files=len(entries))

    # ------------------------------------------------------------------
    # Helpers

    def _mkdirs(self, remote_dirs: Sequence[str]) -> None:
        # "-" prefixed batch commands tolerate directories that already exist.
        batch = "".join(f"-mkdir {directory}\n" for directory in remote_dirs) + "bye\n"
        self._run(["sftp", "-b", "-", self.target], input=batch)

    def _scp(self, sources: Sequence[Path], remote: str) -> None:
        args = ["scp", "-r", *(str(source) for source in sources), f"{self.target}:{remote}"]
        self._run(args)

    def _run(self, args: List[str], *, input: str | None = None) -> None:
        try:
            self._runner(args, cwd=self.config.root, capture_output=True, input=input)
        except (subprocess.CalledProcessError, FileNotFoundError) as exc:
            raise DeployError(describe_failure(args, exc)) from exc


__all__ = ["DeployError", "DeployResult", "Deployer"]
