"""Tests for the one-command publish pipeline."""

from __future__ import annotations

import pytest

from sitepub.builder import BuildError
from sitepub.deploy import PurgeResult
from sitepub.importer import ImportReport
from sitepub.pipeline import Pipeline


class FakeImporter:
    def __init__(self, pending: bool) -> None:
        self.pending = pending
        self.runs = 0

    def has_pending_imports(self) -> bool:
        return self.pending

    def run(self) -> ImportReport:
        self.runs += 1
        return ImportReport()


class FakeStage:
    def __init__(self, events: list, name: str, result=None, error: Exception | None = None) -> None:
        self.events = events
        self.name = name
        self.result = result
        self.error = error
        self.kwargs = None

    def _record(self, **kwargs):
        self.events.append(self.name)
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        return self.result


class FakeBuilder(FakeStage):
    def build_all(self):
        return self._record()


class FakeDeployer(FakeStage):
    def deploy_all(self):
        return self._record()


class FakePurger(FakeStage):
    def purge(self):
        return self._record()


class FakePublisher(FakeStage):
    def publish(self, repo, **kwargs):
        return self._record(repo=repo, **kwargs)


def _pipeline(workspace, events, *, pending=False, build_error=None):
    stages = {
        "importer": FakeImporter(pending),
        "builder": FakeBuilder(events, "build", result=[], error=build_error),
        "deployer": FakeDeployer(events, "deploy", result=[]),
        "purger": FakePurger(events, "purge", result=PurgeResult(attempted=True, success=True)),
        "publisher": FakePublisher(events, "commit", result="Update generated docs"),
    }
    return Pipeline(workspace.config, **stages), stages


def test_publish_runs_every_stage_in_order(workspace) -> None:
    events: list = []
    pipeline, stages = _pipeline(workspace, events, pending=True)

    outcome = pipeline.publish()

    assert events == ["build", "deploy", "purge", "commit"]
    assert stages["importer"].runs == 1
    assert outcome.imported is not None
    assert outcome.purge.success is True
    assert outcome.commit_message == "Update generated docs"
    assert stages["publisher"].kwargs == {
        "repo": workspace.root,
        "projects_dir": workspace.config.projects_dir,
        "push": True,
    }


def test_import_is_skipped_without_pending_files(workspace) -> None:
    pipeline, stages = _pipeline(workspace, [])

    outcome = pipeline.publish()

    assert stages["importer"].runs == 0
    assert outcome.imported is None


def test_commit_and_push_follow_configuration_and_overrides(workspace) -> None:
    events: list = []
    workspace.config.publish.push = False
    pipeline, stages = _pipeline(workspace, events)

    pipeline.publish()
    assert stages["publisher"].kwargs["push"] is False

    pipeline.publish(push=True)
    assert stages["publisher"].kwargs["push"] is True

    events.clear()
    outcome = pipeline.publish(commit=False)
    assert "commit" not in events
    assert outcome.commit_message is None


def test_failing_stage_stops_the_run(workspace) -> None:
    events: list = []
    pipeline, _ = _pipeline(workspace, events, build_error=BuildError("vite exploded"))

    with pytest.raises(BuildError, match="vite exploded"):
        pipeline.publish()
    assert events == ["build"]
