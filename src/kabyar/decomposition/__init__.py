"""Assignment decomposition."""

from .decomposer import (
    AssignmentDecomposer,
    build_decomposition_prompt,
    fallback_decomposition,
    normalize_tasks,
)
from .json_extraction import extract_json, parse_json_object

__all__ = [
    "AssignmentDecomposer",
    "build_decomposition_prompt",
    "fallback_decomposition",
    "normalize_tasks",
    "extract_json",
    "parse_json_object",
]
