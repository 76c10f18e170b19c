"""sitepub: import, build and publish single-file web projects."""

__all__ = ["__version__"]

__version__ = "0.1.0"
