"""Tests for the daily credits ledger."""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, Mock, patch

import pytest

from kabyar.config.worker_config import WorkerConfig
from kabyar.models.credit_models import CreditAccount, PlanType
from kabyar.services.credits_service import CreditsLedger


def make_config(**overrides):
    values = {
        "daily_free_credits": 50,
        "daily_pro_credits": 3500,
        "credits_per_run": 5,
        "use_redis": False,
    }
    values.update(overrides)
    return WorkerConfig(**values)


class TestCreditsLedger:
    """Test suite for CreditsLedger (in-memory)."""

    def setup_method(self):
        """Set up test fixtures."""
        self.ledger = CreditsLedger(config=make_config())

    @pytest.mark.asyncio
    async def test_new_user_gets_free_allowance(self):
        """Test that unknown users start on the free plan."""
        check = await self.ledger.check_credits("user-1", 5)

        assert check.has_credits is True
        assert check.remaining == 50
        assert check.plan == "free"

    @pytest.mark.asyncio
    async def test_deduction_reduces_remaining(self):
        """Test that deductions are reflected in later checks."""
        deduction = await self.ledger.deduct_credits("user-1", 5, "assignment-worker")

        assert deduction.cost == 5
        assert deduction.remaining == 45
        assert deduction.feature_name == "assignment-worker"
        assert (await self.ledger.check_credits("user-1", 5)).remaining == 45
        assert self.ledger.history == [deduction]

    @pytest.mark.asyncio
    async def test_insufficient_credits(self):
        """Test that a balance below the cost fails the check."""
        self.ledger.accounts["user-1"] = CreditAccount(
            user_id="user-1", daily_credits=50, daily_credits_used=48
        )

        check = await self.ledger.check_credits("user-1", 5)

        assert check.has_credits is False
        assert check.remaining == 2

    @pytest.mark.asyncio
    async def test_exact_balance_is_enough(self):
        """Test that remaining equal to cost passes."""
        self.ledger.accounts["user-1"] = CreditAccount(
            user_id="user-1", daily_credits=50, daily_credits_used=45
        )

        assert (await self.ledger.check_credits("user-1", 5)).has_credits is True

    @pytest.mark.asyncio
    async def test_unlimited_plan(self):
        """Test that unlimited accounts always pass and never accrue usage."""
        await self.ledger.set_plan("vip", PlanType.UNLIMITED)

        check = await self.ledger.check_credits("vip", 10_000)
        deduction = await self.ledger.deduct_credits("vip", 5, "assignment-worker")

        assert check.has_credits is True
        assert check.remaining == -1
        assert deduction.cost == 0
        assert deduction.remaining == -1
        assert (await self.ledger.get_account("vip")).daily_credits_used == 0

    @pytest.mark.asyncio
    async def test_pro_plan_allowance(self):
        """Test that upgrading to pro grants the pro allowance."""
        account = await self.ledger.set_plan("user-1", PlanType.PRO)

        assert account.plan == "pro"
        assert account.daily_credits == 3500
        assert (await self.ledger.check_credits("user-1", 5)).remaining == 3500

    @pytest.mark.asyncio
    async def test_daily_reset_after_window(self):
        """Test that usage resets once 24 hours have passed."""
        stale = datetime.now(timezone.utc) - timedelta(hours=25)
        self.ledger.accounts["user-1"] = CreditAccount(
            user_id="user-1",
            daily_credits=50,
            daily_credits_used=50,
            credits_reset_at=stale,
        )

        check = await self.ledger.check_credits("user-1", 5)
        account = await self.ledger.get_account("user-1")

        assert check.remaining == 50
        assert account.daily_credits_used == 0
        assert account.credits_reset_at > stale

    @pytest.mark.asyncio
    async def test_no_reset_inside_window(self):
        """Test that usage persists within the window."""
        recent = datetime.now(timezone.utc) - timedelta(hours=23)
        self.ledger.accounts["user-1"] = CreditAccount(
            user_id="user-1",
            daily_credits=50,
            daily_credits_used=50,
            credits_reset_at=recent,
        )

        check = await self.ledger.check_credits("user-1", 5)

        assert check.has_credits is False
        assert check.remaining == 0

    @pytest.mark.asyncio
    async def test_reset_restores_pro_allowance(self):
        """Test that a reset grants the plan's allowance."""
        self.ledger.accounts["user-1"] = CreditAccount(
            user_id="user-1",
            plan=PlanType.PRO,
            daily_credits=10,
            daily_credits_used=10,
            credits_reset_at=datetime.now(timezone.utc) - timedelta(days=2),
        )

        check = await self.ledger.check_credits("user-1", 5)

        assert check.remaining == 3500


class TestCreditsLedgerRedis:
    """Test suite for Redis persistence."""

    def setup_method(self):
        """Set up test fixtures."""
        self.redis_client = Mock()
        self.redis_client.get = AsyncMock(return_value=None)
        self.redis_client.set = AsyncMock()
        self.redis_client.aclose = AsyncMock()

    @pytest.mark.asyncio
    async def test_accounts_are_written_through(self):
        """Test that deductions are persisted as JSON."""
        with patch(
            "kabyar.services.credits_service.redis.from_url",
            return_value=self.redis_client,
        ):
            ledger = CreditsLedger(config=make_config(), use_redis=True)
            await ledger.deduct_credits("user-1", 5, "assignment-worker")

        key, data = self.redis_client.set.call_args.args
        assert key == "credits:account:user-1"
        assert json.loads(data)["daily_credits_used"] == 5

    @pytest.mark.asyncio
    async def test_accounts_are_loaded_from_redis(self):
        """Test that a stored account is read back on first access."""
        stored = CreditAccount(user_id="user-1", daily_credits=50, daily_credits_used=40)
        self.redis_client.get.return_value = stored.model_dump_json()

        with patch(
            "kabyar.services.credits_service.redis.from_url",
            return_value=self.redis_client,
        ):
            ledger = CreditsLedger(config=make_config(), use_redis=True)
            check = await ledger.check_credits("user-1", 5)

        assert check.remaining == 10
        self.redis_client.get.assert_awaited_once_with("credits:account:user-1")

    @pytest.mark.asyncio
    async def test_redis_errors_fall_back_to_memory(self):
        """Test that Redis failures do not break metering."""
        self.redis_client.get.side_effect = ConnectionError("redis down")
        self.redis_client.set.side_effect = ConnectionError("redis down")

        with patch(
            "kabyar.services.credits_service.redis.from_url",
            return_value=self.redis_client,
        ):
            ledger = CreditsLedger(config=make_config(), use_redis=True)
            deduction = await ledger.deduct_credits("user-1", 5, "assignment-worker")

        assert deduction.remaining == 45
        assert ledger.accounts["user-1"].daily_credits_used == 5

    @pytest.mark.asyncio
    async def test_close(self):
        """Test that close releases the Redis client."""
        with patch(
            "kabyar.services.credits_service.redis.from_url",
            return_value=self.redis_client,
        ):
            ledger = CreditsLedger(config=make_config(), use_redis=True)
            await ledger.check_credits("user-1", 5)
            await ledger.close()

        self.redis_client.aclose.assert_awaited_once()
        assert ledger.redis_client is None
