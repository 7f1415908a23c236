"""LLM subsystem: providers, tier routing and fallback."""

from .base import (
    BaseLLM,
    ChatClient,
    LLMError,
    RateLimitError,
    AccessDeniedError,
    APIError,
    ValidationError,
    LLMUnavailableError,
)
from .router import TierRouter
from .fallback import FallbackChainManager

__all__ = [
    "BaseLLM",
    "ChatClient",
    "LLMError",
    "RateLimitError",
    "AccessDeniedError",
    "APIError",
    "ValidationError",
    "LLMUnavailableError",
    "TierRouter",
    "FallbackChainManager",
]
