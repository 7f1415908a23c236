"""High-level services."""

from .llm_service import LLMOrchestrator
from .assignment_service import AssignmentOrchestrator
from .credits_service import CreditsService, CreditsLedger

__all__ = [
    "LLMOrchestrator",
    "AssignmentOrchestrator",
    "CreditsService",
    "CreditsLedger",
]
