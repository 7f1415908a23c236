"""Kabyar assignment worker: decompose an assignment and complete its tasks in parallel."""

__version__ = "0.1.0"
