"""End-to-end assignment processing: decompose, execute, merge."""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from ..config.worker_config import WorkerConfig
from ..decomposition.decomposer import AssignmentDecomposer
from ..execution.task_executor import TaskExecutor
from ..llm.base import ChatClient
from ..models.assignment_models import (
    Assignment,
    AssignmentReport,
    CompletedTaskResult,
    DecompositionResult,
    TaskReport,
    TaskResult,
)


class AssignmentOrchestrator:
    """
    High-level orchestration service for assignment runs.

    PATTERN: Facade coordinating decomposer and executor
    CRITICAL: Decomposition finishes before any task starts
    GOTCHA: Results are merged by task id, never by position
    """

    def __init__(
        self,
        llm_service: ChatClient,
        decomposer: Optional[AssignmentDecomposer] = None,
        executor: Optional[TaskExecutor] = None,
        config: Optional[WorkerConfig] = None,
    ):
        """
        Initialize assignment orchestrator.

        Args:
            llm_service: Chat collaborator shared by both phases
            decomposer: Assignment decomposer (creates default if None)
            executor: Task executor (creates default from config if None)
            config: Worker configuration (creates default if None)
        """
        self.config = config or WorkerConfig()
        self.llm_service = llm_service
        self.decomposer = decomposer or AssignmentDecomposer(llm_service)
        self.executor = executor or TaskExecutor(
            llm_service,
            max_concurrency=self.config.max_concurrency,
            task_timeout=self.config.task_timeout,
        )
        self.logger = logging.getLogger(__name__)

    async def run(self, assignment: Assignment) -> AssignmentReport:
        """
        Process an assignment end to end.

        Args:
            assignment: Submitted assignment

        Returns:
            AssignmentReport with every task and its result
        """
        start_time = datetime.now()

        decomposition = await self.decomposer.decompose(
            assignment.text,
            instructions=assignment.instructions,
            language=assignment.language,
            tier=assignment.tier,
        )
        self.logger.info(
            f"Assignment '{decomposition.title}' decomposed into "
            f"{len(decomposition.tasks)} tasks"
        )

        results = await self.executor.run_all(
            decomposition.tasks,
            assignment.text,
            output_format=assignment.output_format,
            language=assignment.language,
            tier=assignment.tier,
        )

        report = self.merge_results(decomposition, results)

        total_time_ms = int((datetime.now() - start_time).total_seconds() * 1000)
        self.logger.info(
            f"Assignment '{report.title}' finished: "
            f"{report.completed_tasks}/{report.total_tasks} tasks completed "
            f"in {total_time_ms}ms"
        )
        return report

    @staticmethod
    def merge_results(
        decomposition: DecompositionResult, results: List[TaskResult]
    ) -> AssignmentReport:
        """
        Attach each result to the task with the same id.

        Args:
            decomposition: Decomposed assignment
            results: Executor results

        Returns:
            AssignmentReport
        """
        by_id: Dict[int, TaskResult] = {result.id: result for result in results}

        tasks = [
            TaskReport(**task.model_dump(), result=by_id.get(task.id))
            for task in decomposition.tasks
        ]
        completed = sum(
            1 for task in tasks if isinstance(task.result, CompletedTaskResult)
        )

        return AssignmentReport(
            title=decomposition.title,
            total_tasks=len(tasks),
            completed_tasks=completed,
            tasks=tasks,
        )
