"""Parallel task execution with per-task failure isolation."""

import asyncio
import logging
from contextlib import AsyncExitStack
from datetime import datetime
from typing import List, Optional

from .extraction import build_completed_result
from .prompts import build_task_prompts
from ..llm.base import ChatClient
from ..models.assignment_models import (
    CompletedTaskResult,
    FailedTaskResult,
    OutputFormat,
    Task,
    TaskResult,
)
from ..models.llm_models import ModelTier


class TaskExecutor:
    """
    Runs every task of an assignment concurrently against the chat collaborator.

    PATTERN: asyncio.gather fan-out with a single all-settled barrier
    CRITICAL: A failing or timed-out task only degrades its own result
    GOTCHA: Results follow input order, not completion order
    """

    def __init__(
        self,
        llm_service: ChatClient,
        max_concurrency: int = 0,
        task_timeout: Optional[float] = None,
    ):
        """
        Initialize task executor.

        Args:
            llm_service: Chat collaborator
            max_concurrency: Maximum in-flight calls (0 means unlimited)
            task_timeout: Per-task timeout in seconds (None disables)
        """
        self.llm_service = llm_service
        self.max_concurrency = max_concurrency
        self.task_timeout = task_timeout
        self.logger = logging.getLogger(__name__)

    async def run_task(
        self,
        task: Task,
        assignment_context: str,
        output_format: str = OutputFormat.DETAILED.value,
        language: str = "en",
        tier: ModelTier = ModelTier.FAST,
        semaphore: Optional[asyncio.Semaphore] = None,
    ) -> TaskResult:
        """
        Execute one task, converting any failure into an error result.

        Args:
            task: Task to execute
            assignment_context: Original assignment text
            output_format: Output format value
            language: Output language code
            tier: Model tier
            semaphore: Optional concurrency limiter shared by a batch

        Returns:
            CompletedTaskResult or FailedTaskResult
        """
        system_prompt, user_prompt = build_task_prompts(
            task, assignment_context, output_format, language
        )

        try:
            async with AsyncExitStack() as stack:
                if semaphore is not None:
                    await stack.enter_async_context(semaphore)

                call = self.llm_service.chat(tier, system_prompt, user_prompt)
                if self.task_timeout:
                    content = await asyncio.wait_for(call, timeout=self.task_timeout)
                else:
                    content = await call

            if not isinstance(content, str):
                raise TypeError(f"Expected text completion, got {type(content).__name__}")

            return build_completed_result(task, content)

        except asyncio.TimeoutError:
            self.logger.error(
                f"Task {task.id} ('{task.title}') timed out after {self.task_timeout}s"
            )
        except Exception as e:
            self.logger.error(f"Task {task.id} ('{task.title}') failed: {e}")

        return FailedTaskResult(id=task.id, title=task.title, type=task.type)

    async def run_all(
        self,
        tasks: List[Task],
        assignment_context: str,
        output_format: str = OutputFormat.DETAILED.value,
        language: str = "en",
        tier: ModelTier = ModelTier.FAST,
    ) -> List[TaskResult]:
        """
        Execute all tasks concurrently and wait for every one to settle.

        Args:
            tasks: Tasks to execute (independent of each other)
            assignment_context: Original assignment text
            output_format: Output format value
            language: Output language code
            tier: Model tier

        Returns:
            One result per task, in input order
        """
        if not tasks:
            return []

        semaphore = (
            asyncio.Semaphore(self.max_concurrency) if self.max_concurrency > 0 else None
        )

        self.logger.info(
            f"Executing {len(tasks)} tasks in parallel "
            f"(max_concurrency={self.max_concurrency or 'unlimited'}, "
            f"timeout={self.task_timeout or 'none'})"
        )

        start_time = datetime.now()

        results = await asyncio.gather(
            *[
                self.run_task(
                    task,
                    assignment_context,
                    output_format=output_format,
                    language=language,
                    tier=tier,
                    semaphore=semaphore,
                )
                for task in tasks
            ]
        )

        total_time_ms = int((datetime.now() - start_time).total_seconds() * 1000)
        completed = sum(1 for r in results if isinstance(r, CompletedTaskResult))

        self.logger.info(
            f"Task execution complete: {completed} completed, "
            f"{len(results) - completed} failed in {total_time_ms}ms"
        )

        return list(results)
