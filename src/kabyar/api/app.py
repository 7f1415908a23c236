"""FastAPI application exposing the assignment worker."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI, Header, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .schemas import AssignmentWorkerRequest, validation_messages
from ..config.worker_config import WorkerConfig
from ..services.assignment_service import AssignmentOrchestrator
from ..services.credits_service import CreditsLedger, CreditsService
from ..services.llm_service import LLMOrchestrator

logger = logging.getLogger(__name__)

FEATURE_NAME = "assignment-worker"
GENERIC_ERROR = "Something went wrong. Please try again."

router = APIRouter(tags=["tools"])


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.post("/api/tools/assignment-worker")
async def assignment_worker(
    request: Request,
    x_user_id: Optional[str] = Header(default=None),
):
    """
    Decompose an assignment, execute every task in parallel and return the report.

    Credits are checked before any LLM work and deducted only after the
    report is assembled.
    """
    if not x_user_id:
        return JSONResponse({"error": "Unauthorized"}, status_code=401)

    state = request.app.state
    config: WorkerConfig = state.config
    credits: CreditsService = state.credits
    orchestrator: AssignmentOrchestrator = state.orchestrator

    try:
        body = await request.json()
    except ValueError:
        return JSONResponse({"error": "Invalid JSON body"}, status_code=400)

    try:
        payload = AssignmentWorkerRequest.model_validate(
            body, context={"min_length": config.min_assignment_length}
        )
    except ValidationError as e:
        return JSONResponse({"error": validation_messages(e)}, status_code=400)

    try:
        credits_needed = config.credits_per_run
        credit_check = await credits.check_credits(x_user_id, credits_needed)
        if not credit_check.has_credits:
            return JSONResponse(
                {
                    "error": "Insufficient credits",
                    "creditsNeeded": credits_needed,
                    "creditsRemaining": credit_check.remaining,
                },
                status_code=402,
            )

        report = await orchestrator.run(payload.to_assignment())

        await credits.deduct_credits(x_user_id, credits_needed, FEATURE_NAME)

        return {"success": True, "data": report.to_payload()}

    except Exception as e:
        logger.exception(f"Assignment worker failed for user {x_user_id}: {e}")
        return JSONResponse({"error": GENERIC_ERROR}, status_code=500)


def create_app(
    orchestrator: Optional[AssignmentOrchestrator] = None,
    credits: Optional[CreditsService] = None,
    config: Optional[WorkerConfig] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        orchestrator: Assignment orchestrator (creates default if None)
        credits: Credits service (creates in-memory/Redis ledger if None)
        config: Worker configuration (creates default if None)

    Returns:
        Configured FastAPI app
    """
    config = config or WorkerConfig()
    llm_service: Optional[LLMOrchestrator] = None

    if orchestrator is None:
        llm_service = LLMOrchestrator()
        orchestrator = AssignmentOrchestrator(llm_service, config=config)

    owns_credits = credits is None
    if credits is None:
        credits = CreditsLedger(config=config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if llm_service is not None:
            await llm_service.close()
        if owns_credits:
            await credits.close()
        logger.info("Assignment worker shut down")

    app = FastAPI(title="Kabyar Assignment Worker", lifespan=lifespan)
    app.state.config = config
    app.state.credits = credits
    app.state.orchestrator = orchestrator
    app.include_router(router)

    logger.info(
        f"Assignment worker ready (credits_per_run={config.credits_per_run}, "
        f"task_timeout={config.task_timeout}, "
        f"max_concurrency={config.max_concurrency or 'unlimited'})"
    )
    return app
