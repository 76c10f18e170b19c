"""CLI entrypoints for sitepub commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .builder import BuildError, ProjectBuilder
from .config import ConfigError, SitePubConfig, load_config
from .deploy import CachePurger, DeployError, Deployer
from .git import PublishError
from .importer import Importer, ImporterError
from .logging import configure_logging
from .naming import EmptyTitleError
from .pipeline import Pipeline
from .stores import CorruptMetadataError

_KNOWN_ERRORS = (
    BuildError,
    ConfigError,
    CorruptMetadataError,
    DeployError,
    EmptyTitleError,
    ImporterError,
    PublishError,
)


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitepub",
        description="Import, build and publish single-file web projects.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only report warnings and errors.",
    )
    parser.add_argument(
        "--config",
        default=".",
        help="Workspace directory or path to .sitepub.yml (defaults to current directory).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write debug logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser(
        "import",
        help="Turn files dropped into import/ into projects.",
    )
    _add_verbose_option(import_parser, suppress_default=True)
    import_parser.add_argument(
        "file",
        nargs="?",
        default=None,
        help="Import only this file (name inside import/ or a path).",
    )
    import_parser.add_argument(
        "--title",
        default=None,
        help="Use this title instead of the one detected in the file (requires FILE).",
    )

    build_parser = subparsers.add_parser(
        "build",
        help="Build all projects, or a single one, into builds/.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    build_parser.add_argument("project", nargs="?", default=None, help="Project name to build.")

    deploy_parser = subparsers.add_parser(
        "deploy",
        help="Upload built projects to the web server.",
    )
    _add_verbose_option(deploy_parser, suppress_default=True)
    deploy_parser.add_argument("project", nargs="?", default=None, help="Project name to deploy.")
    deploy_parser.add_argument(
        "--skip-purge",
        action="store_true",
        help="Do not purge the CDN cache after uploading.",
    )

    publish_parser = subparsers.add_parser(
        "publish",
        help="Import, build, deploy and commit in one go.",
    )
    _add_verbose_option(publish_parser, suppress_default=True)
    publish_parser.add_argument(
        "--no-commit",
        dest="commit",
        action="store_false",
        default=None,
        help="Skip the git commit step.",
    )
    publish_parser.add_argument(
        "--no-push",
        dest="push",
        action="store_false",
        default=None,
        help="Commit locally without pushing.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for sitepub commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=args.quiet,
        log_file=Path(args.log_file) if args.log_file else None,
    )

    try:
        config = load_config(Path(args.config))
        _dispatch(args, config)
    except _KNOWN_ERRORS as exc:
        parser.exit(1, f"sitepub {args.command} failed: {exc}\n")
    except Exception as exc:  # pragma: no cover - unexpected failure
        parser.exit(
            1,
            f"sitepub {args.command} failed: {exc}\nRun with --verbose for more details.\n",
        )


def _dispatch(args: argparse.Namespace, config: SitePubConfig) -> None:
    if args.command == "import":
        report = Importer(config).run(args.file, title_override=args.title)
        if not report.imported and not report.failures:
            print("No files to import. Drop .tsx or .html files into the import/ directory.")
        for project in report.imported:
            action = "Created" if project.created else "Updated"
            print(f"{action} {_relativize(project.project_dir)} ({project.metadata.title})")
        for failure in report.failures:
            print(f"Failed {failure.source.name}: {failure.reason}")
        if report.failures:
            raise ImporterError(f"{len(report.failures)} file(s) failed to import")
    elif args.command == "build":
        builder = ProjectBuilder(config)
        if args.project:
            builder.ensure_parent_summary()
            result = builder.build(args.project)
            results = [result] if result is not None else []
        else:
            results = builder.build_all()
        for result in results:
            print(f"Built {result.name} -> {_relativize(result.build_dir)}")
    elif args.command == "deploy":
        deployer = Deployer(config)
        if args.project:
            results = [deployer.deploy(args.project)]
        else:
            results = deployer.deploy_all()
        for result in results:
            print(f"Deployed {result.name} -> {result.public_url or result.remote_path}")
        if not args.skip_purge:
            CachePurger(config.cloudflare.zone_id, config.cloudflare.api_token).purge()
    elif args.command == "publish":
        outcome = Pipeline(config).publish(commit=args.commit, push=args.push)
        print(f"Built {len(outcome.built)} project(s), deployed {len(outcome.deployed)}")
        if outcome.commit_message:
            print(f"Committed: {outcome.commit_message}")
        if config.deploy.base_url:
            print(f"Projects are live at {config.deploy.base_url.rstrip('/')}/")
    else:  # pragma: no cover - argparse enforces choices
        raise ConfigError(f"Unknown command {args.command!r}")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
