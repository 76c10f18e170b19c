"""Version control integration."""

from .publisher import PublishError, Publisher

__all__ = ["PublishError", "Publisher"]
