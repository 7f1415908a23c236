"""Task execution: prompt dispatch, parallel runs, structured extraction."""

from .task_executor import TaskExecutor
from .prompts import (
    TYPE_INSTRUCTIONS,
    FORMAT_INSTRUCTIONS,
    build_task_prompts,
)
from .extraction import (
    extract_code_blocks,
    extract_math_expressions,
    build_completed_result,
)

__all__ = [
    "TaskExecutor",
    "TYPE_INSTRUCTIONS",
    "FORMAT_INSTRUCTIONS",
    "build_task_prompts",
    "extract_code_blocks",
    "extract_math_expressions",
    "build_completed_result",
]
