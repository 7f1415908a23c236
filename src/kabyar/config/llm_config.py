"""LLM system configuration with environment variable loading."""

import os
from typing import Optional, List, Dict
from pydantic import BaseModel, Field
from dotenv import load_dotenv
from ..models.llm_models import ModelProvider, ModelTier, ModelConfig

# Load environment variables from .env file
load_dotenv()


GROQ_ENDPOINT = "https://api.groq.com/openai/v1"
XAI_ENDPOINT = "https://api.x.ai/v1"
GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/openai/"


class LLMConfig(BaseModel):
    """Configuration for tier routing and provider access."""

    # API keys
    groq_api_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("GROQ_API_KEY"),
        description="Groq API key (fast tier)",
    )
    xai_api_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("GROK_API_KEY"),
        description="xAI API key (normal tier)",
    )
    gemini_api_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("GOOGLE_AI_API_KEY"),
        description="Gemini API key (pro tiers and fallback)",
    )
    openai_api_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY"),
        description="OpenAI API key (last-resort fallback)",
    )

    # Tier models
    fast_model: str = Field(
        default_factory=lambda: os.getenv(
            "FAST_MODEL", "moonshotai/kimi-k2-instruct-0905"
        ),
    )
    normal_model: str = Field(
        default_factory=lambda: os.getenv("NORMAL_MODEL", "grok-3-mini"),
    )
    pro_smart_model: str = Field(
        default_factory=lambda: os.getenv("PRO_SMART_MODEL", "gemini-2.5-flash"),
    )
    super_smart_model: str = Field(
        default_factory=lambda: os.getenv("SUPER_SMART_MODEL", "gemini-2.5-pro"),
    )
    fallback_model: str = Field(
        default_factory=lambda: os.getenv("FALLBACK_MODEL", "gemini-2.0-flash"),
        description="Gemini model used when Groq or xAI refuse a request",
    )
    openai_default_model: str = Field(
        default_factory=lambda: os.getenv("OPENAI_DEFAULT_MODEL", "gpt-4o-mini"),
    )

    # Request behaviour
    max_retries: int = Field(
        default_factory=lambda: int(os.getenv("MAX_RETRIES", "3")),
        description="Maximum retry attempts per provider on rate limits",
    )
    base_delay: float = Field(
        default_factory=lambda: float(os.getenv("RETRY_BASE_DELAY", "1.0")),
        description="Base delay for exponential backoff in seconds",
    )
    max_delay: float = Field(
        default_factory=lambda: float(os.getenv("RETRY_MAX_DELAY", "30")),
        description="Maximum delay between retries in seconds",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("LLM_REQUEST_TIMEOUT", "90")),
        description="HTTP timeout for a single completion call in seconds",
    )
    temperature: float = Field(default=0.7, ge=0, le=2)
    max_tokens: int = Field(
        default_factory=lambda: int(os.getenv("LLM_MAX_TOKENS", "4096")),
    )

    def _config_for(
        self,
        provider: ModelProvider,
        model_name: str,
    ) -> ModelConfig:
        """Build a ModelConfig for a provider/model pair."""
        provider_defaults: Dict[ModelProvider, Dict] = {
            ModelProvider.GROQ: {
                "api_endpoint": GROQ_ENDPOINT,
                "context_window": 131072,
                "cost_per_1k_input": 0.001,
                "cost_per_1k_output": 0.003,
            },
            ModelProvider.XAI: {
                "api_endpoint": XAI_ENDPOINT,
                "context_window": 131072,
                "cost_per_1k_input": 0.0003,
                "cost_per_1k_output": 0.0005,
            },
            ModelProvider.GEMINI: {
                "api_endpoint": GEMINI_ENDPOINT,
                "context_window": 1048576,
                "cost_per_1k_input": 0.0003,
                "cost_per_1k_output": 0.0025,
            },
            ModelProvider.OPENAI: {
                "api_endpoint": None,
                "context_window": 128000,
                "cost_per_1k_input": 0.00015,
                "cost_per_1k_output": 0.0006,
            },
        }

        return ModelConfig(
            provider=provider,
            model_name=model_name,
            max_tokens=self.max_tokens,
            **provider_defaults[provider],
        )

    def get_api_key(self, provider: ModelProvider) -> Optional[str]:
        """
        Get the API key for a provider.

        Args:
            provider: Model provider

        Returns:
            Stripped key, or None if not configured
        """
        keys = {
            ModelProvider.GROQ: self.groq_api_key,
            ModelProvider.XAI: self.xai_api_key,
            ModelProvider.GEMINI: self.gemini_api_key,
            ModelProvider.OPENAI: self.openai_api_key,
        }
        key = keys.get(ModelProvider(provider))
        return key.strip() if key and key.strip() else None

    def get_tier_config(self, tier: ModelTier) -> ModelConfig:
        """
        Get the primary model configuration for a tier.

        Args:
            tier: Model tier

        Returns:
            ModelConfig for the tier's primary model
        """
        tier = ModelTier(tier)
        if tier == ModelTier.SUPER_SMART:
            return self._config_for(ModelProvider.GEMINI, self.super_smart_model)
        if tier == ModelTier.PRO_SMART:
            return self._config_for(ModelProvider.GEMINI, self.pro_smart_model)
        if tier == ModelTier.NORMAL:
            return self._config_for(ModelProvider.XAI, self.normal_model)
        return self._config_for(ModelProvider.GROQ, self.fast_model)

    def get_fallback_configs(self, tier: ModelTier) -> List[ModelConfig]:
        """
        Get fallback model configurations for a tier, in order.

        Groq and xAI primaries fall back to Gemini. OpenAI is appended as a
        last resort when a key is configured.

        Args:
            tier: Model tier

        Returns:
            Ordered list of fallback ModelConfigs
        """
        primary = self.get_tier_config(tier)
        fallbacks: List[ModelConfig] = []

        if primary.provider in (ModelProvider.GROQ.value, ModelProvider.XAI.value):
            fallbacks.append(
                self._config_for(ModelProvider.GEMINI, self.fallback_model)
            )

        if self.get_api_key(ModelProvider.OPENAI):
            fallbacks.append(
                self._config_for(ModelProvider.OPENAI, self.openai_default_model)
            )

        return fallbacks
