"""Command line interface."""

from .app import main, serve

__all__ = ["main", "serve"]
