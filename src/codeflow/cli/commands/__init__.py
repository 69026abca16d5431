"""
CLI Commands Package.

Each command is implemented in its own module for maintainability.
"""

from . import chains, html, initialize, render, stats

__all__ = [
    "chains",
    "html",
    "initialize",
    "render",
    "stats",
]
