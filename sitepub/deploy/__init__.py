"""Remote upload and CDN cache handling."""

from .cache import CachePurger, PurgeResult
from .transfer import DeployError, DeployResult, Deployer

__all__ = ["CachePurger", "DeployError", "DeployResult", "Deployer", "PurgeResult"]
