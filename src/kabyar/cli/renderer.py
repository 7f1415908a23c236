"""Rich rendering of assignment reports."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.markdown import Markdown
from rich.panel import Panel

from ..models.assignment_models import AssignmentReport, CompletedTaskResult, TaskReport


class ReportRenderer:
    """
    Rich output renderer for assignment reports.

    Renders a title panel, a completion summary, then every task as markdown.
    """

    def __init__(self, console: Optional[Console] = None, code_theme: str = "monokai"):
        """
        Initialize report renderer.

        Args:
            console: Rich console (creates new if not provided)
            code_theme: Pygments theme for code blocks
        """
        self.console = console or Console()
        self.code_theme = code_theme

    def render_report(self, report: AssignmentReport) -> None:
        """
        Render a full report.

        Args:
            report: Assignment report
        """
        self.console.print(Panel(escape(report.title), title="Assignment", border_style="cyan"))

        summary_color = "green" if report.completed_tasks == report.total_tasks else "yellow"
        self.console.print(
            f"[{summary_color}]{report.completed_tasks}/{report.total_tasks} "
            f"tasks completed[/{summary_color}]\n"
        )

        for task in report.tasks:
            self.render_task(task)

    def render_task(self, task: TaskReport) -> None:
        """
        Render one task and its result.

        Args:
            task: Task merged with its result
        """
        header = (
            f"[bold]{task.id}. {escape(task.title)}[/bold] "
            f"[dim]({task.type}, {task.priority})[/dim]"
        )
        self.console.rule(header, align="left")

        result = task.result
        if result is None:
            self.console.print("[dim]No result[/dim]\n")
            return

        if not isinstance(result, CompletedTaskResult):
            self.console.print(f"[red]{escape(result.content)}[/red]\n")
            return

        self.console.print(Markdown(result.content, code_theme=self.code_theme))

        if result.math_expressions:
            self.console.print(
                f"[dim]Math: {len(result.math_expressions)} expression(s)[/dim]"
            )
        if result.code_blocks:
            languages = ", ".join(escape(block.language) for block in result.code_blocks)
            self.console.print(f"[dim]Code: {languages}[/dim]")

        self.console.print()
