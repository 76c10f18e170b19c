"""Subprocess execution shared by the build, deploy and git steps."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Iterable, Protocol


class CommandRunner(Protocol):
    def __call__(
        self,
        args: Iterable[str],
        *,
        cwd: Path,
        env: dict[str, str] | None = None,
        capture_output: bool = False,
        input: str | None = None,
    ) -> str: ...


def run_command(
    args: Iterable[str],
    *,
    cwd: Path,
    env: dict[str, str] | None = None,
    capture_output: bool = False,
    input: str | None = None,
) -> str:
    """Run ``args`` and return stdout when captured.

    Raises ``subprocess.CalledProcessError`` on a non-zero exit and
    ``FileNotFoundError`` when the executable is missing.
    """
    completed = subprocess.run(
        list(args),
        cwd=str(cwd),
        env=env,
        check=True,
        text=True,
        capture_output=capture_output,
        input=input,
    )
    if capture_output:
        return completed.stdout
    return ""


def describe_failure(args: Iterable[str], exc: Exception) -> str:
    """One-line message for a failed command, including captured stderr."""
    command = " ".join(args)
    if isinstance(exc, subprocess.CalledProcessError):
        detail = (exc.stderr or "").strip() if isinstance(exc.stderr, str) else ""
        message = f"`{command}` exited with code {exc.returncode}"
        return f"{message}: {detail}" if detail else message
    if isinstance(exc, FileNotFoundError):
        return f"`{command}` could not be started: {exc.filename or exc}"
    return f"`{command}` failed: {exc}"


__all__ = ["CommandRunner", "describe_failure", "run_command"]
