"""LLM-related data models."""

from pydantic import BaseModel, Field
from typing import List, Optional
from enum import Enum


class ModelProvider(str, Enum):
    """Supported model providers (all reachable through OpenAI-compatible APIs)."""

    GROQ = "groq"
    XAI = "xai"
    GEMINI = "gemini"
    OPENAI = "openai"


class ModelTier(str, Enum):
    """Quality/cost levels a caller can ask for."""

    FAST = "fast"
    NORMAL = "normal"
    PRO_SMART = "pro-smart"
    SUPER_SMART = "super-smart"


# Short names the dashboard sends in the ``model`` field
TIER_ALIASES = {
    "smart": ModelTier.NORMAL,
    "pro": ModelTier.PRO_SMART,
}


def resolve_tier(model: Optional[str]) -> ModelTier:
    """
    Map a request's model name onto a tier.

    Unknown or missing names resolve to the fast tier.

    Args:
        model: Model name or tier name from the request

    Returns:
        Resolved ModelTier
    """
    if not model:
        return ModelTier.FAST

    if model in TIER_ALIASES:
        return TIER_ALIASES[model]

    try:
        return ModelTier(model)
    except ValueError:
        return ModelTier.FAST


class ModelConfig(BaseModel):
    """Configuration for a specific model."""

    provider: ModelProvider
    model_name: str = Field(description="Model identifier")
    api_endpoint: Optional[str] = Field(default=None, description="API base URL")
    max_tokens: int = Field(default=4096, description="Max token limit")
    context_window: int = Field(description="Context window size")
    cost_per_1k_input: float = Field(default=0.0, description="Cost per 1k input tokens")
    cost_per_1k_output: float = Field(default=0.0, description="Cost per 1k output tokens")
    supports_streaming: bool = Field(default=True)

    class Config:
        """Pydantic configuration."""

        use_enum_values = True


class LLMRequest(BaseModel):
    """Request to LLM service."""

    messages: List[dict] = Field(description="Chat messages")
    tier: ModelTier = Field(default=ModelTier.FAST)
    max_tokens: Optional[int] = Field(default=None)
    temperature: float = Field(default=0.7, ge=0, le=2)

    class Config:
        """Pydantic configuration."""

        use_enum_values = True


class LLMResponse(BaseModel):
    """Response from LLM service."""

    content: str = Field(description="Response content")
    model_used: str = Field(description="Model that generated response")
    provider: ModelProvider
    input_tokens: int
    output_tokens: int
    total_cost: float = Field(description="Cost in USD")
    latency_ms: int = Field(description="Response time")
    fallback_used: bool = Field(default=False)

    class Config:
        """Pydantic configuration."""

        use_enum_values = True
