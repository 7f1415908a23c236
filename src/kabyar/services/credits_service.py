"""Daily credit metering for paid features."""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Protocol

import redis.asyncio as redis

from ..config.worker_config import WorkerConfig
from ..models.credit_models import (
    CreditAccount,
    CreditCheck,
    CreditDeduction,
    PlanType,
)


UNLIMITED_REMAINING = -1


class CreditsService(Protocol):
    """Credit gate used by the HTTP boundary."""

    async def check_credits(self, user_id: str, estimated_cost: int) -> CreditCheck:
        ...

    async def deduct_credits(
        self, user_id: str, cost: int, feature_name: str
    ) -> CreditDeduction:
        ...


class CreditsLedger:
    """
    Per-user daily credit ledger with optional Redis persistence.

    PATTERN: In-memory cache, written through to Redis when enabled
    CRITICAL: Windows reset 24h after the previous reset, measured in UTC
    GOTCHA: Unlimited accounts never accrue usage and report remaining -1
    """

    def __init__(
        self,
        config: Optional[WorkerConfig] = None,
        redis_url: Optional[str] = None,
        use_redis: Optional[bool] = None,
    ):
        """
        Initialize credits ledger.

        Args:
            config: Worker configuration (creates default if None)
            redis_url: Redis connection URL (overrides config)
            use_redis: Persist accounts in Redis (overrides config)
        """
        self.config = config or WorkerConfig()
        self.redis_url = redis_url or self.config.redis_url
        self.use_redis = self.config.use_redis if use_redis is None else use_redis
        self.redis_client: Optional[redis.Redis] = None
        self.logger = logging.getLogger(__name__)

        self.accounts: Dict[str, CreditAccount] = {}
        self.history: List[CreditDeduction] = []
        self._lock = asyncio.Lock()

        if self.use_redis:
            self.logger.info(f"Credits ledger configured with Redis: {self.redis_url}")
        else:
            self.logger.info("Credits ledger using in-memory storage only")

    async def _get_redis(self) -> Optional[redis.Redis]:
        """Get or create Redis client."""
        if not self.use_redis:
            return None

        if self.redis_client is None:
            try:
                self.redis_client = redis.from_url(self.redis_url)
            except Exception as e:
                self.logger.error(f"Failed to connect to Redis: {e}")
                self.use_redis = False
                return None

        return self.redis_client

    def _allowance_for(self, plan: str) -> int:
        if plan == PlanType.PRO.value:
            return self.config.daily_pro_credits
        return self.config.daily_free_credits

    def _should_reset(self, account: CreditAccount, now: datetime) -> bool:
        reset_at = account.credits_reset_at
        if reset_at.tzinfo is None:
            reset_at = reset_at.replace(tzinfo=timezone.utc)
        return now - reset_at >= timedelta(hours=self.config.credits_reset_hours)

    async def _load_account(self, user_id: str) -> CreditAccount:
        """Load an account from cache or Redis, creating a free one if unknown."""
        account = self.accounts.get(user_id)
        if account is not None:
            return account

        redis_client = await self._get_redis()
        if redis_client:
            try:
                data = await redis_client.get(f"credits:account:{user_id}")
                if data:
                    account = CreditAccount.model_validate_json(data)
            except Exception as e:
                self.logger.error(f"Failed to load credits from Redis: {e}")

        if account is None:
            account = CreditAccount(
                user_id=user_id,
                daily_credits=self.config.daily_free_credits,
            )

        self.accounts[user_id] = account
        return account

    async def _store_account(self, account: CreditAccount) -> None:
        self.accounts[account.user_id] = account

        redis_client = await self._get_redis()
        if redis_client:
            try:
                await redis_client.set(
                    f"credits:account:{account.user_id}",
                    account.model_dump_json(),
                )
            except Exception as e:
                self.logger.error(f"Failed to store credits in Redis: {e}")

    async def _current_account(self, user_id: str) -> CreditAccount:
        """Load an account and roll its window over if it has expired."""
        account = await self._load_account(user_id)
        now = datetime.now(timezone.utc)

        if account.plan != PlanType.UNLIMITED.value and self._should_reset(account, now):
            account = account.model_copy(
                update={
                    "daily_credits_used": 0,
                    "daily_credits": self._allowance_for(account.plan),
                    "credits_reset_at": now,
                }
            )
            await self._store_account(account)
            self.logger.info(f"Daily credit reset for user {user_id} at {now.isoformat()}")

        return account

    async def get_account(self, user_id: str) -> CreditAccount:
        """
        Current account state, after any pending daily reset.

        Args:
            user_id: User identifier

        Returns:
            CreditAccount
        """
        async with self._lock:
            return await self._current_account(user_id)

    async def set_plan(self, user_id: str, plan: PlanType) -> CreditAccount:
        """
        Change a user's plan and grant that plan's allowance immediately.

        Args:
            user_id: User identifier
            plan: New plan

        Returns:
            Updated account
        """
        async with self._lock:
            account = await self._load_account(user_id)
            plan_value = PlanType(plan).value
            account = account.model_copy(
                update={"plan": plan_value, "daily_credits": self._allowance_for(plan_value)}
            )
            await self._store_account(account)
            self.logger.info(f"User {user_id} moved to plan '{plan_value}'")
            return account

    async def check_credits(self, user_id: str, estimated_cost: int) -> CreditCheck:
        """
        Check whether a user can afford a run.

        Args:
            user_id: User identifier
            estimated_cost: Credits the run will cost

        Returns:
            CreditCheck with remaining balance
        """
        async with self._lock:
            account = await self._current_account(user_id)

        if account.plan == PlanType.UNLIMITED.value:
            return CreditCheck(
                has_credits=True, remaining=UNLIMITED_REMAINING, plan=account.plan
            )

        remaining = account.remaining
        return CreditCheck(
            has_credits=remaining >= estimated_cost,
            remaining=remaining,
            plan=account.plan,
        )

    async def deduct_credits(
        self, user_id: str, cost: int, feature_name: str
    ) -> CreditDeduction:
        """
        Charge a user for a completed feature run.

        Args:
            user_id: User identifier
            cost: Credits to charge
            feature_name: Feature being charged for

        Returns:
            CreditDeduction record
        """
        async with self._lock:
            account = await self._current_account(user_id)

            if account.plan == PlanType.UNLIMITED.value:
                self.logger.info(
                    f"Unlimited user {user_id}, no credits deducted for {feature_name}"
                )
                deduction = CreditDeduction(
                    user_id=user_id,
                    cost=0,
                    feature_name=feature_name,
                    remaining=UNLIMITED_REMAINING,
                )
            else:
                account = account.model_copy(
                    update={"daily_credits_used": account.daily_credits_used + cost}
                )
                await self._store_account(account)
                deduction = CreditDeduction(
                    user_id=user_id,
                    cost=cost,
                    feature_name=feature_name,
                    remaining=account.remaining,
                )
                self.logger.info(
                    f"Deducted {cost} credits for {feature_name} from user {user_id} "
                    f"({account.remaining} remaining)"
                )

            self.history.append(deduction)
            return deduction

    async def close(self) -> None:
        """Close Redis connection."""
        if self.redis_client:
            await self.redis_client.aclose()
            self.redis_client = None
