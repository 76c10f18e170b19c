"""Configuration loading for sitepub (.sitepub.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

CONFIG_FILENAME = ".sitepub.yml"
DUPLICATE_POLICIES = ("error", "suffix")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ImportConfig:
    """How the import step treats collisions and failures."""

    on_duplicate: str = "error"
    continue_on_error: bool = False


@dataclass
class BuildConfig:
    """Bundler invocation for tsx projects."""

    base_path: str = "/generated-docs/"
    vite_command: List[str] = field(default_factory=lambda: ["npx", "vite", "build"])


@dataclass
class DeployConfig:
    """Remote web server reached through sftp/scp."""

    host: Optional[str] = None
    user: Optional[str] = None
    remote_parent: str = "/public_html/generated-docs"
    base_url: Optional[str] = None

    @property
    def target(self) -> Optional[str]:
        if not self.host:
            return None
        return f"{self.user}@{self.host}" if self.user else self.host

    def public_url(self, project: str) -> Optional[str]:
        if not self.base_url:
            return None
        return f"{self.base_url.rstrip('/')}/{project}/"


@dataclass
class CloudflareConfig:
    """Credentials for the CDN cache purge after deploys."""

    zone_id: Optional[str] = None
    api_token: Optional[str] = None

    @property
    def enabled(self) -> bool:
        return bool(self.zone_id and self.api_token)


@dataclass
class PublishConfig:
    """Version control step of the publish pipeline."""

    commit: bool = True
    push: bool = True


@dataclass
class SitePubConfig:
    """Represents the settings defined in .sitepub.yml."""

    root: Path
    import_dir: Path
    projects_dir: Path
    builds_dir: Path
    parent_summary: Path
    importing: ImportConfig = field(default_factory=ImportConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    deploy: DeployConfig = field(default_factory=DeployConfig)
    cloudflare: CloudflareConfig = field(default_factory=CloudflareConfig)
    publish: PublishConfig = field(default_factory=PublishConfig)

    @classmethod
    def defaults(cls, root: Path) -> "SitePubConfig":
        root = root.resolve()
        return cls(
            root=root,
            import_dir=root / "import",
            projects_dir=root / "projects",
            builds_dir=root / "builds",
            parent_summary=root / "parent-README.txt",
        )


def load_config(
    config_path: Path,
    *,
    environ: Mapping[str, str] | None = None,
) -> SitePubConfig:
    """Load configuration from disk and apply environment overrides."""
    env = os.environ if environ is None else environ
    config_file = _resolve_config_path(config_path)
    config = SitePubConfig.defaults(config_file.parent)

    if config_file.exists():
        data = _read_config(config_file)
        if not isinstance(data, dict):
            raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")
        _apply_paths(config, _as_dict(data.get("paths")))
        _apply_import(config, _as_dict(data.get("import")))
        _apply_build(config, _as_dict(data.get("build")))
        _apply_deploy(config, _as_dict(data.get("deploy")))
        _apply_cloudflare(config, _as_dict(data.get("cloudflare")))
        _apply_publish(config, _as_dict(data.get("publish")))

    host = env.get("DEPLOY_SSH_HOST")
    if host:
        config.deploy.host = host
    zone_id = env.get("CF_ZONE_ID")
    if zone_id:
        config.cloudflare.zone_id = zone_id
    api_token = env.get("CF_API_TOKEN")
    if api_token:
        config.cloudflare.api_token = api_token

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _apply_paths(config: SitePubConfig, data: Dict[str, Any]) -> None:
    for key, attribute in (
        ("import_dir", "import_dir"),
        ("projects_dir", "projects_dir"),
        ("builds_dir", "builds_dir"),
        ("parent_summary", "parent_summary"),
    ):
        value = _as_str(data.get(key))
        if value:
            setattr(config, attribute, (config.root / value).resolve())


def _apply_import(config: SitePubConfig, data: Dict[str, Any]) -> None:
    policy = _as_str(data.get("on_duplicate"))
    if policy is not None:
        if policy not in DUPLICATE_POLICIES:
            raise ConfigError(
                f"import.on_duplicate must be one of {', '.join(DUPLICATE_POLICIES)}; got {policy!r}"
            )
        config.importing.on_duplicate = policy
    continue_on_error = _as_bool(data.get("continue_on_error"))
    if continue_on_error is not None:
        config.importing.continue_on_error = continue_on_error


def _apply_build(config: SitePubConfig, data: Dict[str, Any]) -> None:
    base_path = _as_str(data.get("base_path"))
    if base_path:
        config.build.base_path = "/" + base_path.strip("/") + "/"
    command = _as_str_list(data.get("vite_command"))
    if command:
        config.build.vite_command = command


def _apply_deploy(config: SitePubConfig, data: Dict[str, Any]) -> None:
    config.deploy.host = _as_str(data.get("host")) or config.deploy.host
    config.deploy.user = _as_str(data.get("user")) or config.deploy.user
    remote_parent = _as_str(data.get("remote_parent"))
    if remote_parent:
        config.deploy.remote_parent = remote_parent.rstrip("/")
    config.deploy.base_url = _as_str(data.get("base_url")) or config.deploy.base_url


def _apply_cloudflare(config: SitePubConfig, data: Dict[str, Any]) -> None:
    config.cloudflare.zone_id = _as_str(data.get("zone_id"))
    config.cloudflare.api_token = _as_str(data.get("api_token"))


def _apply_publish(config: SitePubConfig, data: Dict[str, Any]) -> None:
    commit = _as_bool(data.get("commit"))
    if commit is not None:
        config.publish.commit = commit
    push = _as_bool(data.get("push"))
    if push is not None:
        config.publish.push = push


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool) or value is None:
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "BuildConfig",
    "CONFIG_FILENAME",
    "CloudflareConfig",
    "ConfigError",
    "DeployConfig",
    "ImportConfig",
    "PublishConfig",
    "SitePubConfig",
    "load_config",
]
