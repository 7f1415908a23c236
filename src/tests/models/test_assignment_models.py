"""Tests for assignment data models and report serialization."""

import pytest
from pydantic import TypeAdapter, ValidationError

from kabyar.models.assignment_models import (
    Assignment,
    AssignmentReport,
    CodeBlock,
    CompletedTaskResult,
    DecompositionResult,
    FailedTaskResult,
    Task,
    TaskReport,
    TaskResult,
    TaskType,
    TASK_FAILURE_MESSAGE,
)
from kabyar.models.llm_models import ModelTier, resolve_tier


class TestTaskModels:
    """Test suite for task and result models."""

    def test_task_defaults(self):
        """Test that type and priority default to other/medium."""
        task = Task(id=1, title="Intro", description="Write the intro")

        assert task.type == "other"
        assert task.priority == "medium"

    def test_failed_result_has_fixed_message(self):
        """Test that failed results carry the generic message."""
        result = FailedTaskResult(id=2, title="Calc", type=TaskType.MATH)

        assert result.status == "error"
        assert result.content == TASK_FAILURE_MESSAGE
        assert result.type == "math"

    def test_task_result_union_discriminates_on_status(self):
        """Test that the union picks the model from the status field."""
        adapter = TypeAdapter(TaskResult)

        completed = adapter.validate_python(
            {"id": 1, "title": "A", "type": "essay", "status": "completed", "content": "x"}
        )
        failed = adapter.validate_python(
            {"id": 2, "title": "B", "type": "essay", "status": "error"}
        )

        assert isinstance(completed, CompletedTaskResult)
        assert isinstance(failed, FailedTaskResult)

    def test_decomposition_requires_a_task(self):
        """Test that an empty task list is rejected."""
        with pytest.raises(ValidationError):
            DecompositionResult(title="Empty", tasks=[])

    def test_assignment_is_immutable(self):
        """Test that assignments are frozen after creation."""
        assignment = Assignment(text="Explain gravity")

        with pytest.raises(ValidationError):
            assignment.text = "changed"


class TestAssignmentReportPayload:
    """Test suite for report serialization."""

    def _report(self):
        completed = CompletedTaskResult(
            id=1,
            title="Code",
            type=TaskType.CODE,
            content="```python\nprint(1)\n```",
            code_blocks=[CodeBlock(language="python", code="print(1)")],
        )
        failed = FailedTaskResult(id=2, title="Essay", type=TaskType.ESSAY)
        return AssignmentReport(
            title="Homework",
            total_tasks=2,
            completed_tasks=1,
            tasks=[
                TaskReport(id=1, type="code", title="Code", description="d1", result=completed),
                TaskReport(id=2, type="essay", title="Essay", description="d2", result=failed),
            ],
        )

    def test_payload_uses_camel_case_keys(self):
        """Test that report counters use camelCase keys."""
        payload = self._report().to_payload()

        assert payload["title"] == "Homework"
        assert payload["totalTasks"] == 2
        assert payload["completedTasks"] == 1
        assert "total_tasks" not in payload

    def test_payload_omits_absent_annotations(self):
        """Test that empty extraction lists are left out entirely."""
        payload = self._report().to_payload()
        first, second = payload["tasks"]

        assert first["result"]["codeBlocks"] == [{"language": "python", "code": "print(1)"}]
        assert "mathExpressions" not in first["result"]
        assert second["result"] == {
            "id": 2,
            "title": "Essay",
            "type": "essay",
            "status": "error",
            "content": TASK_FAILURE_MESSAGE,
        }

    def test_payload_keeps_task_fields_beside_result(self):
        """Test that each task entry carries its own fields plus result."""
        entry = self._report().to_payload()["tasks"][0]

        assert entry["id"] == 1
        assert entry["type"] == "code"
        assert entry["priority"] == "medium"
        assert entry["description"] == "d1"


class TestResolveTier:
    """Test suite for model name to tier mapping."""

    @pytest.mark.parametrize(
        "model,expected",
        [
            ("smart", ModelTier.NORMAL),
            ("pro", ModelTier.PRO_SMART),
            ("fast", ModelTier.FAST),
            ("super-smart", ModelTier.SUPER_SMART),
            ("something-else", ModelTier.FAST),
            (None, ModelTier.FAST),
            ("", ModelTier.FAST),
        ],
    )
    def test_resolve_tier(self, model, expected):
        """Test tier resolution for aliases, tier names and unknowns."""
        assert resolve_tier(model) == expected
