"""One-command publish: import, build, deploy, purge, commit."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .builder import BuildResult, ProjectBuilder
from .config import SitePubConfig
from .deploy import CachePurger, DeployResult, Deployer, PurgeResult
from .git import Publisher
from .importer import ImportReport, Importer
from .logging import get_logger


@dataclass
class PublishOutcome:
    """What each pipeline stage did during a publish run."""

    imported: Optional[ImportReport] = None
    built: List[BuildResult] = field(default_factory=list)
    deployed: List[DeployResult] = field(default_factory=list)
    purge: Optional[PurgeResult] = None
    commit_message: Optional[str] = None


class Pipeline:
    """Coordinates the publish stages against one workspace configuration."""

    def __init__(
        self,
        config: SitePubConfig,
        *,
        importer: Importer | None = None,
        builder: ProjectBuilder | None = None,
        deployer: Deployer | None = None,
        purger: CachePurger | None = None,
        publisher: Publisher | None = None,
    ) -> None:
        self.config = config
        self.importer = importer or Importer(config)
        self.builder = builder or ProjectBuilder(config)
        self.deployer = deployer or Deployer(config)
        self.purger = purger or CachePurger(config.cloudflare.zone_id, config.cloudflare.api_token)
        self.publisher = publisher or Publisher()
        self.logger = get_logger("pipeline")

    def publish(self, *, commit: bool | None = None, push: bool | None = None) -> PublishOutcome:
        """Run every stage; a failing stage aborts the run by raising."""
        outcome = PublishOutcome()
        do_commit = self.config.publish.commit if commit is None else commit
        do_push = self.config.publish.push if push is None else push

        if self.importer.has_pending_imports():
            self.logger.info("Step 1: importing new projects")
            outcome.imported = self.importer.run()
        else:
            self.logger.info("Step 1: no new files to import (skipping)")

        self.logger.info("Step 2: building all projects")
        outcome.built = self.builder.build_all()

        self.logger.info("Step 3: deploying to %s", self.config.deploy.target or "(unconfigured host)")
        outcome.deployed = self.deployer.deploy_all()
        outcome.purge = self.purger.purge()

        if do_commit:
            self.logger.info("Step 4: committing changes")
            outcome.commit_message = self.publisher.publish(
                self.config.root,
                projects_dir=self.config.projects_dir,
                push=do_push,
            )
        else:
            self.logger.info("Step 4: commit disabled (skipping)")
        return outcome


__all__ = ["Pipeline", "PublishOutcome"]
