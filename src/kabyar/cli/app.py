"""Command line entry points."""

import asyncio
import json
import logging
import sys
from typing import Optional

import click
import uvicorn

from .renderer import ReportRenderer
from ..config.llm_config import LLMConfig
from ..config.worker_config import WorkerConfig
from ..llm.base import ChatClient
from ..models.assignment_models import Assignment, AssignmentReport, OutputFormat
from ..models.llm_models import resolve_tier
from ..services.assignment_service import AssignmentOrchestrator
from ..services.llm_service import LLMOrchestrator

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Configure root logging for CLI use."""
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Suppress noisy loggers in non-verbose mode
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
        logging.getLogger("kabyar.llm").setLevel(logging.CRITICAL)


async def run_assignment(
    assignment: Assignment,
    llm_service: Optional[ChatClient] = None,
    config: Optional[WorkerConfig] = None,
) -> AssignmentReport:
    """
    Run one assignment through the orchestrator.

    Args:
        assignment: Assignment to process
        llm_service: Chat collaborator (creates LLMOrchestrator if None)
        config: Worker configuration

    Returns:
        AssignmentReport
    """
    owns_service = llm_service is None
    if llm_service is None:
        llm_service = LLMOrchestrator(config=LLMConfig())

    try:
        orchestrator = AssignmentOrchestrator(llm_service, config=config)
        return await orchestrator.run(assignment)
    finally:
        if owns_service:
            await llm_service.close()


@click.command()
@click.argument("assignment")
@click.option(
    "-i", "--instructions",
    default="",
    help="Additional instructions for the assignment",
)
@click.option(
    "--format", "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.DETAILED.value,
    show_default=True,
    help="Answer style",
)
@click.option(
    "--model",
    default="fast",
    show_default=True,
    help="Model tier: fast, smart, pro, or a tier name",
)
@click.option(
    "--language",
    default="en",
    show_default=True,
    help="Output language code",
)
@click.option(
    "--json", "as_json",
    is_flag=True,
    help="Print the JSON payload instead of rendered output",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose logging",
)
def main(
    assignment: str,
    instructions: str,
    output_format: str,
    model: str,
    language: str,
    as_json: bool,
    verbose: bool,
) -> None:
    """
    Kabyar assignment worker.

    Decompose an assignment into tasks and complete them all in parallel:

        kabyar "Explain photosynthesis and calculate CO2 for 6 glucose"
    """
    configure_logging(verbose)

    worker_config = WorkerConfig()
    if len(assignment) < worker_config.min_assignment_length:
        raise click.BadParameter(
            f"Assignment must be at least {worker_config.min_assignment_length} characters",
            param_hint="ASSIGNMENT",
        )

    request = Assignment(
        text=assignment,
        instructions=instructions,
        output_format=output_format,
        language=language,
        tier=resolve_tier(model),
    )

    try:
        report = asyncio.run(run_assignment(request, config=worker_config))
        if as_json:
            click.echo(json.dumps(report.to_payload(), indent=2, ensure_ascii=False))
        else:
            ReportRenderer().render_report(report)
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as e:
        if verbose:
            logger.exception("CLI error")
        else:
            click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.command()
@click.option("--host", default=None, help="Bind host (defaults to HOST)")
@click.option("--port", type=int, default=None, help="Bind port (defaults to PORT)")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def serve(host: Optional[str], port: Optional[int], verbose: bool) -> None:
    """Run the assignment worker HTTP API."""
    from ..api.app import create_app

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = WorkerConfig()
    uvicorn.run(
        create_app(config=config),
        host=host or config.host,
        port=port or config.port,
    )


if __name__ == "__main__":
    main()
