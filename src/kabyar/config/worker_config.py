"""Assignment worker configuration with environment variable loading."""

import os
from typing import Optional
from pydantic import BaseModel, Field
from dotenv import load_dotenv

load_dotenv()


def _optional_float(name: str, default: str) -> Optional[float]:
    """Read a float setting where 0 or an empty value disables it."""
    value = float(os.getenv(name, default) or 0)
    return value if value > 0 else None


class WorkerConfig(BaseModel):
    """Configuration for decomposition, execution and metering."""

    # Execution hardening
    task_timeout: Optional[float] = Field(
        default_factory=lambda: _optional_float("TASK_TIMEOUT", "120"),
        description="Per-task timeout in seconds (None disables)",
    )
    max_concurrency: int = Field(
        default_factory=lambda: int(os.getenv("MAX_CONCURRENCY", "0")),
        ge=0,
        description="Maximum in-flight task calls (0 means unlimited)",
    )

    # Request validation
    min_assignment_length: int = Field(
        default_factory=lambda: int(os.getenv("MIN_ASSIGNMENT_LENGTH", "5")),
        ge=1,
    )

    # Credits
    credits_per_run: int = Field(
        default_factory=lambda: int(os.getenv("ASSIGNMENT_CREDITS", "5")),
        ge=0,
        description="Credits charged per successful run",
    )
    daily_free_credits: int = Field(
        default_factory=lambda: int(os.getenv("DAILY_FREE_CREDITS", "50")),
    )
    daily_pro_credits: int = Field(
        default_factory=lambda: int(os.getenv("DAILY_PRO_CREDITS", "3500")),
    )
    credits_reset_hours: int = Field(default=24)

    # Storage
    use_redis: bool = Field(
        default_factory=lambda: os.getenv("USE_REDIS", "false").lower() == "true",
        description="Persist credit accounts in Redis",
    )
    redis_url: str = Field(
        default_factory=lambda: os.getenv("REDIS_URL", "redis://localhost:6379/0"),
    )

    # Server
    host: str = Field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "8000")))
