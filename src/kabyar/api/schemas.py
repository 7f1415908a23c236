"""Request schema for the assignment worker endpoint."""

from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from ..models.assignment_models import Assignment, OutputFormat
from ..models.llm_models import resolve_tier

DEFAULT_MIN_ASSIGNMENT_LENGTH = 5


class AssignmentWorkerRequest(BaseModel):
    """
    Body of ``POST /api/tools/assignment-worker``.

    The minimum assignment length can be overridden per validation through
    ``context={"min_length": n}``.
    """

    assignment: str
    instructions: Optional[str] = Field(default=None)
    output_format: OutputFormat = Field(default=OutputFormat.DETAILED, alias="outputFormat")
    model: str = Field(default="fast")
    language: str = Field(default="en")

    class Config:
        """Pydantic configuration."""

        populate_by_name = True
        use_enum_values = True

    @field_validator("assignment")
    @classmethod
    def check_length(cls, value: str, info: ValidationInfo) -> str:
        min_length = (info.context or {}).get("min_length", DEFAULT_MIN_ASSIGNMENT_LENGTH)
        if len(value) < min_length:
            raise PydanticCustomError(
                "assignment_too_short",
                "Assignment must be at least {min_length} characters",
                {"min_length": min_length},
            )
        return value

    def to_assignment(self) -> Assignment:
        """Convert to the domain model, resolving the model name to a tier."""
        return Assignment(
            text=self.assignment,
            instructions=self.instructions or "",
            output_format=self.output_format,
            language=self.language,
            tier=resolve_tier(self.model),
        )


def validation_messages(error: ValidationError) -> str:
    """Join every validation message into one comma-separated string."""
    messages: List[str] = [detail["msg"] for detail in error.errors()]
    return ", ".join(messages)
