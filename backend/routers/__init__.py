"""Routers module - FastAPI route handlers"""

from . import config, diff, icon, merge

__all__ = ["config", "diff", "icon", "merge"]
