"""Generated project scaffolding."""

from .renderer import PARENT_BLURB, PARENT_HEADING, ScaffoldRenderer

__all__ = ["PARENT_BLURB", "PARENT_HEADING", "ScaffoldRenderer"]
