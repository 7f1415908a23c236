"""Prompt templates for task execution, keyed by task type and output format."""

from typing import Dict, Tuple

from ..models.assignment_models import OutputFormat, Task, TaskType


TYPE_INSTRUCTIONS: Dict[TaskType, str] = {
    TaskType.ESSAY: """Write a well-structured essay with introduction, body paragraphs, and conclusion.
Use clear topic sentences and supporting evidence. Ensure smooth transitions between paragraphs.""",
    TaskType.MATH: """Solve the math problem step-by-step. Show ALL work clearly.
Use proper mathematical notation. Verify the answer at the end.
Format math expressions using LaTeX syntax wrapped in $ for inline and $$ for block.""",
    TaskType.CODE: """Write clean, well-commented code. Include:
- Proper variable naming
- Error handling
- Comments explaining logic
- Example usage/test cases
Wrap code in ```language blocks.""",
    TaskType.RESEARCH: """Provide well-researched information with:
- Key findings organized by theme
- Multiple perspectives where relevant
- Data and statistics when available
- Proper source attribution format""",
    TaskType.ANALYSIS: """Provide systematic analysis:
- Break down the subject into components
- Examine each component critically
- Identify patterns, strengths, weaknesses
- Draw evidence-based conclusions""",
    TaskType.CREATIVE: """Create engaging, original content:
- Use vivid language and imagery
- Maintain consistent tone and style
- Show creativity while meeting requirements""",
    TaskType.SUMMARY: """Create a clear, comprehensive summary:
- Identify main ideas and key points
- Maintain the original meaning
- Use concise language
- Organize logically""",
    TaskType.QA: """Answer the question directly and thoroughly:
- Start with a clear answer
- Provide supporting explanation
- Include relevant examples""",
    TaskType.DIAGRAM: """Describe the diagram/flowchart in detail using text representation:
- Use ASCII art or structured text for visual elements
- Label all components clearly
- Show relationships and flow""",
    TaskType.TRANSLATION: """Provide accurate translation:
- Maintain original meaning and tone
- Use natural language in target language
- Note any cultural context differences""",
    TaskType.OTHER: """Complete this task thoroughly and accurately. Use the most appropriate format for the content.""",
}

FORMAT_INSTRUCTIONS: Dict[OutputFormat, str] = {
    OutputFormat.DETAILED: "Provide thorough, well-structured answers with examples and explanations. Use markdown formatting.",
    OutputFormat.CONCISE: "Be direct and concise. Focus on key points. Use bullet points where appropriate.",
    OutputFormat.ACADEMIC: "Use formal academic tone. Include citations format where relevant. Structure with proper headings.",
}

LANGUAGE_INSTRUCTIONS: Dict[str, str] = {
    "my": "Write ALL content in natural Burmese (Myanmar script), like a friendly native speaker.",
    "zh": "Write ALL content in natural Simplified Chinese, like a friendly native speaker.",
    "th": "Write ALL content in natural Thai (Thai script), like a friendly native speaker.",
    "ko": "Write ALL content in natural Korean (Hangul), like a friendly native speaker.",
    "ja": "Write ALL content in natural Japanese with appropriate kanji, hiragana and katakana.",
}


def get_type_instructions(task_type: str) -> str:
    """Instruction block for a task type, falling back to ``other``."""
    try:
        return TYPE_INSTRUCTIONS[TaskType(task_type)]
    except ValueError:
        return TYPE_INSTRUCTIONS[TaskType.OTHER]


def get_format_instructions(output_format: str) -> str:
    """Tone directive for an output format, falling back to ``detailed``."""
    try:
        return FORMAT_INSTRUCTIONS[OutputFormat(output_format)]
    except ValueError:
        return FORMAT_INSTRUCTIONS[OutputFormat.DETAILED]


def get_language_instructions(language: str) -> str:
    """Language directive; English needs none."""
    if not language or language == "en":
        return ""
    return LANGUAGE_INSTRUCTIONS.get(
        language, f"Write ALL content in {language} language."
    )


def build_task_prompts(
    task: Task,
    assignment_context: str,
    output_format: str = OutputFormat.DETAILED.value,
    language: str = "en",
) -> Tuple[str, str]:
    """
    Compose the system and user prompts for one task.

    Args:
        task: Task to execute
        assignment_context: Original assignment text
        output_format: Output format value
        language: Output language code

    Returns:
        (system_prompt, user_prompt)
    """
    task_type = TaskType(task.type).value
    language_line = get_language_instructions(language)

    system_prompt = f"""You are an expert assignment worker. Complete the following task as part of a larger assignment.

ASSIGNMENT CONTEXT: {assignment_context}

TASK TYPE: {task_type}
{get_type_instructions(task.type)}

OUTPUT FORMAT: {get_format_instructions(output_format)}

{language_line}

IMPORTANT:
- Complete the task fully and thoroughly
- Use proper markdown formatting (headers, lists, bold, code blocks)
- For math: use LaTeX notation ($inline$ and $$block$$)
- For code: use proper code blocks with language tags
- Be accurate and well-organized
- Do NOT include meta-commentary about the task itself"""

    user_prompt = f"Task: {task.title}\n\nDetails: {task.description}"
    return system_prompt, user_prompt
