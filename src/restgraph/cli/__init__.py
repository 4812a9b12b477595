"""
restgraph CLI - command line tools for generating REST API descriptions.
"""

from __future__ import annotations

from .main import main, app

__all__ = ["main", "app"]
