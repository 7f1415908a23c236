"""HTTP boundary."""

from .app import create_app
from .schemas import AssignmentWorkerRequest

__all__ = ["create_app", "AssignmentWorkerRequest"]
