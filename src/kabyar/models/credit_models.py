"""Credit metering models."""

from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlanType(str, Enum):
    """Subscription plans."""

    FREE = "free"
    PRO = "pro"
    UNLIMITED = "unlimited"


class CreditAccount(BaseModel):
    """Daily credit state for a single user."""

    user_id: str
    plan: PlanType = Field(default=PlanType.FREE)
    daily_credits: int = Field(default=50, ge=0)
    daily_credits_used: int = Field(default=0, ge=0)
    credits_reset_at: datetime = Field(default_factory=_utcnow)

    class Config:
        """Pydantic configuration."""

        use_enum_values = True

    @property
    def remaining(self) -> int:
        """Credits left in the current window."""
        return self.daily_credits - self.daily_credits_used


class CreditCheck(BaseModel):
    """Outcome of a pre-run credit gate."""

    has_credits: bool
    remaining: int = Field(description="-1 means unlimited")
    plan: Optional[PlanType] = Field(default=None)

    class Config:
        """Pydantic configuration."""

        use_enum_values = True


class CreditDeduction(BaseModel):
    """Record of credits spent on a feature."""

    user_id: str
    cost: int = Field(ge=0)
    feature_name: str
    remaining: int
    timestamp: datetime = Field(default_factory=_utcnow)
