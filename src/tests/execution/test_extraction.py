"""Tests for code block and math extraction."""

from kabyar.execution.extraction import (
    build_completed_result,
    extract_code_blocks,
    extract_math_expressions,
)
from kabyar.models.assignment_models import Task, TaskType


MIXED_ANSWER = """## Solution

First the code:

```python
def area(r):
    return 3.14159 * r ** 2
```

And the raw output:

```
78.53975
```

The area formula is

$$A = \\pi r^2$$

so for $r = 5$ we get the value above.
"""


class TestExtractCodeBlocks:
    """Test suite for fenced code extraction."""

    def test_tagged_and_untagged_blocks(self):
        """Test that untagged blocks default to text."""
        blocks = extract_code_blocks(MIXED_ANSWER)

        assert len(blocks) == 2
        assert blocks[0].language == "python"
        assert blocks[0].code == "def area(r):\n    return 3.14159 * r ** 2"
        assert blocks[1].language == "text"
        assert blocks[1].code == "78.53975"

    def test_language_tags_with_symbols(self):
        """Test that tags such as c++ and c# are kept."""
        text = "```c++\nint x;\n```\n```c#\nvar y;\n```"

        assert [b.language for b in extract_code_blocks(text)] == ["c++", "c#"]

    def test_no_blocks(self):
        """Test plain prose yields nothing."""
        assert extract_code_blocks("Just words.") == []


class TestExtractMathExpressions:
    """Test suite for LaTeX extraction."""

    def test_block_expressions_come_first(self):
        """Test that $$ blocks precede inline spans."""
        assert extract_math_expressions(MIXED_ANSWER) == ["A = \\pi r^2", "r = 5"]

    def test_inline_before_block_in_text_still_orders_blocks_first(self):
        """Test ordering when the inline span appears earlier in the text."""
        text = "Let $x = 3$. Then $$x^2 = 9$$ holds."

        assert extract_math_expressions(text) == ["x^2 = 9", "x = 3"]

    def test_multiline_block(self):
        """Test that block math may span lines."""
        text = "$$\na + b\n= c\n$$"

        assert extract_math_expressions(text) == ["a + b\n= c"]

    def test_no_math(self):
        """Test that prose without dollars yields nothing."""
        assert extract_math_expressions("No formulas here.") == []


class TestBuildCompletedResult:
    """Test suite for completed result assembly."""

    def setup_method(self):
        """Set up test fixtures."""
        self.task = Task(id=3, type=TaskType.MATH, title="Area", description="Compute area")

    def test_mixed_answer_annotations(self):
        """Test counts and ordering on a mixed answer."""
        result = build_completed_result(self.task, MIXED_ANSWER)

        assert result.status == "completed"
        assert result.content == MIXED_ANSWER
        assert len(result.code_blocks) == 2
        assert result.code_blocks[1].language == "text"
        assert len(result.math_expressions) == 2
        assert result.math_expressions[0] == "A = \\pi r^2"

        payload = result.model_dump(by_alias=True, exclude_none=True)
        assert len(payload["codeBlocks"]) == 2
        assert len(payload["mathExpressions"]) == 2

    def test_plain_answer_has_no_annotation_keys(self):
        """Test that absent annotations are omitted, not empty lists."""
        result = build_completed_result(self.task, "The answer is forty-two.")

        assert result.code_blocks is None
        assert result.math_expressions is None

        payload = result.model_dump(mode="json", by_alias=True, exclude_none=True)
        assert "codeBlocks" not in payload
        assert "mathExpressions" not in payload
        assert payload == {
            "id": 3,
            "title": "Area",
            "type": "math",
            "status": "completed",
            "content": "The answer is forty-two.",
        }
