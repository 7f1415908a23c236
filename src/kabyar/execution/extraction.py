"""Structured extraction of code blocks and LaTeX math from task answers."""

import re
from typing import List

from ..models.assignment_models import CodeBlock, CompletedTaskResult, Task

# Tag must sit on the fence line; ``c++``/``objective-c`` style tags are allowed
_CODE_BLOCK_RE = re.compile(r"```([\w+#.-]+)?[ \t]*\r?\n([\s\S]*?)```")
_MATH_BLOCK_RE = re.compile(r"\$\$([\s\S]*?)\$\$")
_MATH_INLINE_RE = re.compile(r"(?<!\$)\$([^$]+?)\$(?!\$)")


def extract_code_blocks(text: str) -> List[CodeBlock]:
    """
    Capture every fenced code block in order of appearance.

    Args:
        text: Markdown answer

    Returns:
        Code blocks; untagged blocks get language ``"text"``
    """
    return [
        CodeBlock(language=match.group(1) or "text", code=match.group(2).strip())
        for match in _CODE_BLOCK_RE.finditer(text)
    ]


def extract_math_expressions(text: str) -> List[str]:
    """
    Capture LaTeX spans: all ``$$...$$`` blocks, then all inline ``$...$``.

    Args:
        text: Markdown answer

    Returns:
        Trimmed expressions, block-level first
    """
    expressions = [match.group(1).strip() for match in _MATH_BLOCK_RE.finditer(text)]
    expressions.extend(
        match.group(1).strip() for match in _MATH_INLINE_RE.finditer(text)
    )
    return expressions


def build_completed_result(task: Task, content: str) -> CompletedTaskResult:
    """
    Wrap a raw answer into a completed result with extraction annotations.

    The content is kept verbatim; empty annotation lists are left unset so
    they disappear from serialized payloads.

    Args:
        task: Task the answer belongs to
        content: Raw LLM answer

    Returns:
        CompletedTaskResult
    """
    code_blocks = extract_code_blocks(content)
    math_expressions = extract_math_expressions(content)

    return CompletedTaskResult(
        id=task.id,
        title=task.title,
        type=task.type,
        content=content,
        code_blocks=code_blocks or None,
        math_expressions=math_expressions or None,
    )
