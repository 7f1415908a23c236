"""Data models for assignment decomposition and task execution."""

from pydantic import BaseModel, Field
from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from enum import Enum

from .llm_models import ModelTier


TASK_FAILURE_MESSAGE = "Failed to complete this task. Please try again."


class TaskType(str, Enum):
    """Task categories; each one selects its own prompt template."""

    ESSAY = "essay"
    MATH = "math"
    CODE = "code"
    RESEARCH = "research"
    ANALYSIS = "analysis"
    CREATIVE = "creative"
    SUMMARY = "summary"
    QA = "qa"
    DIAGRAM = "diagram"
    TRANSLATION = "translation"
    OTHER = "other"


class TaskPriority(str, Enum):
    """Advisory priority. Does not affect scheduling."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class OutputFormat(str, Enum):
    """Tone of the generated answers."""

    DETAILED = "detailed"
    CONCISE = "concise"
    ACADEMIC = "academic"


class Assignment(BaseModel):
    """A submitted assignment. Lives for one request only."""

    text: str = Field(description="Free-text assignment description")
    instructions: str = Field(default="", description="Extra instructions")
    output_format: OutputFormat = Field(default=OutputFormat.DETAILED)
    language: str = Field(default="en", description="Language code")
    tier: ModelTier = Field(default=ModelTier.FAST)

    class Config:
        """Pydantic configuration."""

        frozen = True
        use_enum_values = True


class Task(BaseModel):
    """One self-contained unit of work produced by decomposition."""

    id: int = Field(description="Position-derived identifier, unique per assignment")
    type: TaskType = Field(default=TaskType.OTHER)
    title: str = Field(description="Short label")
    description: str = Field(description="The actual unit of work")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)

    class Config:
        """Pydantic configuration."""

        use_enum_values = True


class CodeBlock(BaseModel):
    """A fenced code block pulled out of an answer."""

    language: str = Field(default="text")
    code: str


class CompletedTaskResult(BaseModel):
    """Successful task outcome with optional structured annotations."""

    id: int
    title: str
    type: TaskType
    status: Literal["completed"] = "completed"
    content: str = Field(description="Full markdown answer, unmodified")
    code_blocks: Optional[List[CodeBlock]] = Field(
        default=None, serialization_alias="codeBlocks"
    )
    math_expressions: Optional[List[str]] = Field(
        default=None, serialization_alias="mathExpressions"
    )

    class Config:
        """Pydantic configuration."""

        use_enum_values = True


class FailedTaskResult(BaseModel):
    """Failed task outcome. Carries a fixed message and no partial content."""

    id: int
    title: str
    type: TaskType
    status: Literal["error"] = "error"
    content: str = Field(default=TASK_FAILURE_MESSAGE)

    class Config:
        """Pydantic configuration."""

        use_enum_values = True


TaskResult = Annotated[
    Union[CompletedTaskResult, FailedTaskResult],
    Field(discriminator="status"),
]


class DecompositionResult(BaseModel):
    """Title plus the ordered task list."""

    title: str = Field(default="Assignment")
    tasks: List[Task] = Field(min_length=1)


class TaskReport(Task):
    """A task merged with its result."""

    result: Optional[TaskResult] = Field(default=None)


class AssignmentReport(BaseModel):
    """Final report returned to callers."""

    title: str
    total_tasks: int = Field(serialization_alias="totalTasks")
    completed_tasks: int = Field(serialization_alias="completedTasks")
    tasks: List[TaskReport] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        """
        Serialize for the HTTP response.

        Empty extraction lists were never set, so ``exclude_none`` keeps
        them out of the payload entirely.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
