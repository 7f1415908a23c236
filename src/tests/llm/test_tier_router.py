"""Tests for tier routing and LLM configuration."""

from unittest.mock import AsyncMock, Mock

import pytest

from kabyar.config.llm_config import LLMConfig, GROQ_ENDPOINT, GEMINI_ENDPOINT
from kabyar.llm.router import TierRouter
from kabyar.models.llm_models import ModelProvider, ModelTier


def make_config(**keys):
    """Build an LLMConfig with only the given API keys set."""
    values = {
        "groq_api_key": None,
        "xai_api_key": None,
        "gemini_api_key": None,
        "openai_api_key": None,
    }
    values.update(keys)
    return LLMConfig(**values)


def fake_factory(model_config, api_key):
    """Provider factory returning a mock that remembers its config."""
    provider = Mock()
    provider.config = model_config
    provider.api_key = api_key
    provider.close = AsyncMock()
    return provider


class TestLLMConfig:
    """Test suite for tier model configuration."""

    def test_tier_primaries(self):
        """Test that each tier maps to its vendor."""
        config = make_config()

        assert config.get_tier_config(ModelTier.FAST).provider == "groq"
        assert config.get_tier_config(ModelTier.FAST).api_endpoint == GROQ_ENDPOINT
        assert config.get_tier_config(ModelTier.NORMAL).provider == "xai"
        assert config.get_tier_config(ModelTier.PRO_SMART).model_name == config.pro_smart_model
        assert config.get_tier_config(ModelTier.SUPER_SMART).model_name == config.super_smart_model

    def test_groq_falls_back_to_gemini(self):
        """Test that fast tier gets the Gemini fallback model."""
        config = make_config()

        fallbacks = config.get_fallback_configs(ModelTier.FAST)

        assert [f.model_name for f in fallbacks] == [config.fallback_model]
        assert fallbacks[0].api_endpoint == GEMINI_ENDPOINT

    def test_gemini_tiers_have_no_gemini_fallback(self):
        """Test that Gemini primaries do not fall back to Gemini."""
        config = make_config()

        assert config.get_fallback_configs(ModelTier.PRO_SMART) == []

    def test_openai_is_last_resort(self):
        """Test that OpenAI is appended when its key is configured."""
        config = make_config(openai_api_key="sk-test")

        fallbacks = config.get_fallback_configs(ModelTier.NORMAL)

        assert [f.provider for f in fallbacks] == ["gemini", "openai"]

    def test_blank_keys_are_ignored(self):
        """Test that whitespace-only keys count as missing."""
        config = make_config(groq_api_key="   ")

        assert config.get_api_key(ModelProvider.GROQ) is None


class TestTierRouter:
    """Test suite for TierRouter."""

    def test_chain_order(self):
        """Test that the chain lists the primary first."""
        router = TierRouter(
            config=make_config(groq_api_key="g", gemini_api_key="gm"),
            provider_factory=fake_factory,
        )

        chain = router.get_chain(ModelTier.FAST)

        assert [p.config.provider for p in chain] == ["groq", "gemini"]
        assert chain[0].api_key == "g"

    def test_missing_keys_are_skipped(self):
        """Test that providers without keys never enter the chain."""
        router = TierRouter(
            config=make_config(gemini_api_key="gm"),
            provider_factory=fake_factory,
        )

        chain = router.get_chain(ModelTier.FAST)

        assert len(chain) == 1
        assert chain[0].config.provider == "gemini"

    def test_no_keys_gives_empty_chain(self):
        """Test that an unconfigured tier yields no providers."""
        router = TierRouter(config=make_config(), provider_factory=fake_factory)

        assert router.get_chain(ModelTier.SUPER_SMART) == []

    def test_providers_are_cached(self):
        """Test that providers are shared across calls."""
        factory = Mock(side_effect=fake_factory)
        router = TierRouter(
            config=make_config(groq_api_key="g", xai_api_key="x", gemini_api_key="gm"),
            provider_factory=factory,
        )

        router.get_chain(ModelTier.FAST)
        router.get_chain(ModelTier.NORMAL)
        router.get_chain(ModelTier.FAST)

        # groq, gemini fallback, xai
        assert factory.call_count == 3

    @pytest.mark.asyncio
    async def test_close_releases_providers(self):
        """Test that close calls close on each provider."""
        router = TierRouter(
            config=make_config(groq_api_key="g"),
            provider_factory=fake_factory,
        )
        provider = router.get_chain(ModelTier.FAST)[0]

        await router.close()

        provider.close.assert_awaited_once()
        assert router.providers == {}
