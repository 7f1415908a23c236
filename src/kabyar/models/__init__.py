"""Models package for the assignment worker."""

from .llm_models import (
    ModelProvider,
    ModelTier,
    ModelConfig,
    LLMRequest,
    LLMResponse,
    resolve_tier,
)
from .assignment_models import (
    TASK_FAILURE_MESSAGE,
    TaskType,
    TaskPriority,
    OutputFormat,
    Assignment,
    Task,
    CodeBlock,
    CompletedTaskResult,
    FailedTaskResult,
    TaskResult,
    DecompositionResult,
    TaskReport,
    AssignmentReport,
)
from .credit_models import (
    PlanType,
    CreditAccount,
    CreditCheck,
    CreditDeduction,
)

__all__ = [
    # LLM models
    "ModelProvider",
    "ModelTier",
    "ModelConfig",
    "LLMRequest",
    "LLMResponse",
    "resolve_tier",
    # Assignment models
    "TASK_FAILURE_MESSAGE",
    "TaskType",
    "TaskPriority",
    "OutputFormat",
    "Assignment",
    "Task",
    "CodeBlock",
    "CompletedTaskResult",
    "FailedTaskResult",
    "TaskResult",
    "DecompositionResult",
    "TaskReport",
    "AssignmentReport",
    # Credit models
    "PlanType",
    "CreditAccount",
    "CreditCheck",
    "CreditDeduction",
]
