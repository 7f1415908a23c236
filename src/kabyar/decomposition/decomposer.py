"""Assignment decomposition into independent, typed tasks."""

import logging
from typing import Any, List, Optional

from .json_extraction import parse_json_object
from ..execution.prompts import get_language_instructions
from ..models.assignment_models import (
    DecompositionResult,
    Task,
    TaskPriority,
    TaskType,
)
from ..models.llm_models import ModelTier
from ..llm.base import ChatClient

logger = logging.getLogger(__name__)


DEFAULT_TITLE = "Assignment"
FALLBACK_TASK_TITLE = "Complete Assignment"

_TASK_TYPES = [t.value for t in TaskType]
_PRIORITIES = [p.value for p in TaskPriority]


def build_decomposition_prompt(language: str = "en") -> str:
    """
    Build the system prompt for decomposition.

    Args:
        language: Output language code

    Returns:
        System prompt text
    """
    type_list = ", ".join(f'"{t}"' for t in _TASK_TYPES)
    type_union = "|".join(_TASK_TYPES)
    language_instructions = get_language_instructions(language)
    language_line = f"\n{language_instructions}\n" if language_instructions else ""

    return f"""You are an expert assignment analyzer. Decompose any assignment into clear, actionable tasks.
{language_line}
Analyze the assignment and break it into individual tasks. Each task should be independently completable.

Task types: {type_list}

Return ONLY valid JSON:
{{
  "title": "Short assignment title",
  "tasks": [
    {{
      "id": 1,
      "type": "{type_union}",
      "title": "Task title",
      "description": "Detailed description of what to do",
      "priority": "high|medium|low"
    }}
  ]
}}

RULES:
- Break complex assignments into 2-8 smaller tasks
- Simple assignments can be 1-2 tasks
- Each task must be clear and self-contained; never refer to another task
- Order tasks logically (prerequisites first)
- Identify the correct task type for best results"""


def build_decomposition_user_prompt(assignment_text: str, instructions: str = "") -> str:
    """Build the user prompt carrying the assignment and instructions."""
    prompt = f"Assignment: {assignment_text}"
    if instructions:
        prompt += f"\n\nAdditional instructions: {instructions}"
    return prompt


def fallback_decomposition(assignment_text: str) -> DecompositionResult:
    """
    Single-task decomposition wrapping the whole assignment verbatim.

    Args:
        assignment_text: Original assignment text

    Returns:
        DecompositionResult with one ``other`` task
    """
    return DecompositionResult(
        title=DEFAULT_TITLE,
        tasks=[
            Task(
                id=1,
                type=TaskType.OTHER,
                title=FALLBACK_TASK_TITLE,
                description=assignment_text,
                priority=TaskPriority.HIGH,
            )
        ],
    )


def _coerce_id(value: Any, position: int) -> int:
    if isinstance(value, bool):
        return position
    if isinstance(value, int) and value > 0:
        return value
    if isinstance(value, str) and value.strip().isdecimal() and int(value) > 0:
        return int(value)
    return position


def _coerce_choice(value: Any, choices: List[str], default: str) -> str:
    if isinstance(value, str) and value.strip().lower() in choices:
        return value.strip().lower()
    return default


def normalize_tasks(raw_tasks: List[Any]) -> List[Task]:
    """
    Normalize model-produced task dicts into Task objects.

    Missing ids take their 1-based position, unknown types become ``other``
    and unknown priorities become ``medium``. Non-object entries are dropped.
    Duplicate ids are renumbered positionally.

    Args:
        raw_tasks: The ``tasks`` array from the model

    Returns:
        List of Task objects (possibly empty)
    """
    tasks: List[Task] = []
    for raw in raw_tasks:
        if not isinstance(raw, dict):
            logger.warning(f"Dropping non-object task entry: {raw!r:.80}")
            continue

        position = len(tasks) + 1
        tasks.append(
            Task(
                id=_coerce_id(raw.get("id"), position),
                type=_coerce_choice(raw.get("type"), _TASK_TYPES, TaskType.OTHER.value),
                title=str(raw.get("title") or f"Task {position}"),
                description=str(raw.get("description") or ""),
                priority=_coerce_choice(
                    raw.get("priority"), _PRIORITIES, TaskPriority.MEDIUM.value
                ),
            )
        )

    ids = [task.id for task in tasks]
    if len(set(ids)) != len(ids):
        logger.warning(f"Duplicate task ids {ids}, renumbering by position")
        for position, task in enumerate(tasks, start=1):
            task.id = position

    return tasks


class AssignmentDecomposer:
    """
    Turns a free-text assignment into a title and independent tasks.

    PATTERN: One LLM call -> tolerant JSON extraction -> normalization
    CRITICAL: Never raises; every failure degrades to a single wrapping task
    GOTCHA: Task ordering is advisory, the executor runs everything at once
    """

    def __init__(self, llm_service: ChatClient):
        """
        Initialize decomposer.

        Args:
            llm_service: Chat collaborator
        """
        self.llm_service = llm_service
        self.logger = logging.getLogger(__name__)

    async def decompose(
        self,
        assignment_text: str,
        instructions: str = "",
        language: str = "en",
        tier: ModelTier = ModelTier.FAST,
    ) -> DecompositionResult:
        """
        Decompose an assignment into tasks.

        Args:
            assignment_text: Assignment description
            instructions: Optional extra instructions
            language: Output language code
            tier: Model tier for the decomposition call

        Returns:
            DecompositionResult (fallback single task on any failure)
        """
        try:
            raw = await self.llm_service.chat(
                tier,
                build_decomposition_prompt(language),
                build_decomposition_user_prompt(assignment_text, instructions),
            )
        except Exception as e:
            self.logger.error(f"Decomposition call failed, using single task: {e}")
            return fallback_decomposition(assignment_text)

        try:
            result = self.parse_decomposition(raw) if isinstance(raw, str) else None
        except Exception as e:
            self.logger.error(f"Decomposition parsing failed, using single task: {e}")
            return fallback_decomposition(assignment_text)

        if result is None:
            self.logger.warning("Unusable decomposition output, using single task")
            self.logger.debug(f"Decomposition response: {str(raw)[:500]}")
            return fallback_decomposition(assignment_text)

        self.logger.info(
            f"Decomposed '{result.title}' into {len(result.tasks)} tasks: "
            f"{[task.type for task in result.tasks]}"
        )
        return result

    def parse_decomposition(self, raw: str) -> Optional[DecompositionResult]:
        """
        Parse the model's decomposition output.

        Args:
            raw: Raw LLM response

        Returns:
            DecompositionResult, or None if the output is unusable
        """
        try:
            parsed = parse_json_object(raw)
        except ValueError as e:
            self.logger.debug(str(e))
            return None

        if not isinstance(parsed, dict) or not isinstance(parsed.get("tasks"), list):
            return None

        tasks = normalize_tasks(parsed["tasks"])
        if not tasks:
            return None

        return DecompositionResult(
            title=str(parsed.get("title") or DEFAULT_TITLE),
            tasks=tasks,
        )
