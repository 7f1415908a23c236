"""Tier routing: maps a model tier onto an ordered provider chain."""

import logging
from typing import Callable, Dict, List, Optional

from .base import BaseLLM
from .providers import OpenAIProvider
from ..config.llm_config import LLMConfig
from ..models.llm_models import ModelConfig, ModelTier

ProviderFactory = Callable[[ModelConfig, str], BaseLLM]


class TierRouter:
    """
    Resolves tiers to provider chains.

    PATTERN: Primary model first, then the configured fallbacks
    CRITICAL: Models without an API key are skipped, never instantiated
    GOTCHA: Providers are cached by model name and shared across tiers
    """

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        provider_factory: Optional[ProviderFactory] = None,
    ):
        """
        Initialize tier router.

        Args:
            config: LLM configuration (creates default if None)
            provider_factory: Builds a provider from (model config, api key)
        """
        self.config = config or LLMConfig()
        self.provider_factory = provider_factory or self._default_factory
        self.providers: Dict[str, BaseLLM] = {}
        self.logger = logging.getLogger(__name__)

    def _default_factory(self, model_config: ModelConfig, api_key: str) -> BaseLLM:
        return OpenAIProvider(
            model_config,
            api_key=api_key,
            timeout=self.config.request_timeout,
        )

    def _get_provider(self, model_config: ModelConfig) -> Optional[BaseLLM]:
        """Get or create the provider for a model, None if no key is configured."""
        if model_config.model_name in self.providers:
            return self.providers[model_config.model_name]

        api_key = self.config.get_api_key(model_config.provider)
        if not api_key:
            self.logger.warning(
                f"API key not configured for provider: {model_config.provider}"
            )
            return None

        provider = self.provider_factory(model_config, api_key)
        self.providers[model_config.model_name] = provider
        self.logger.debug(f"Initialized provider: {model_config.model_name}")
        return provider

    def get_chain(self, tier: ModelTier) -> List[BaseLLM]:
        """
        Build the provider chain for a tier.

        Args:
            tier: Model tier

        Returns:
            Ordered providers, primary first (may be empty)
        """
        model_configs = [self.config.get_tier_config(tier)]
        model_configs.extend(self.config.get_fallback_configs(tier))

        chain: List[BaseLLM] = []
        for model_config in model_configs:
            provider = self._get_provider(model_config)
            if provider and provider not in chain:
                chain.append(provider)

        return chain

    async def close(self) -> None:
        """Close every provider that holds a client."""
        for provider in self.providers.values():
            if hasattr(provider, "close"):
                try:
                    await provider.close()
                except Exception as e:
                    self.logger.error(f"Error closing provider: {e}")
        self.providers.clear()
