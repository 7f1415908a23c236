"""Provider abstraction shared by every LLM vendor."""

import logging
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, List, Optional, Protocol

from ..models.llm_models import ModelConfig, ModelTier

Messages = List[Dict[str, str]]


class ChatClient(Protocol):
    """Anything that can answer ``chat(tier, system_prompt, user_prompt)``."""

    async def chat(
        self,
        tier: ModelTier,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        ...


class LLMError(Exception):
    """Base class for provider and chain failures."""


class RateLimitError(LLMError):
    """Vendor answered HTTP 429. Worth retrying on the same provider."""


class AccessDeniedError(LLMError):
    """Vendor answered HTTP 403. Retrying the same provider is pointless."""


class APIError(LLMError):
    """Any other vendor failure."""


class ValidationError(LLMError):
    """Request rejected locally before it reached the vendor."""


class LLMUnavailableError(LLMError):
    """No provider in the tier's chain produced an answer."""


class BaseLLM(ABC):
    """
    One chat-completions model at one vendor.

    PATTERN: Vendors differ only in base URL, key and model name
    CRITICAL: Failures must surface as the typed errors above so the
              fallback chain can tell retryable from terminal ones
    """

    def __init__(self, config: ModelConfig):
        """
        Initialize provider.

        Args:
            config: Model configuration
        """
        self.config = config
        self.logger = logging.getLogger(f"{__name__}.{config.model_name}")

    @property
    def name(self) -> str:
        """``vendor/model`` label for logs."""
        return f"{self.config.provider}/{self.config.model_name}"

    @abstractmethod
    async def agenerate(
        self,
        messages: Messages,
        max_tokens: Optional[int] = None,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> str:
        """
        Return the full completion text for a conversation.

        Raises:
            RateLimitError, AccessDeniedError, APIError, ValidationError
        """

    @abstractmethod
    def astream(
        self,
        messages: Messages,
        max_tokens: Optional[int] = None,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> AsyncIterator[str]:
        """Yield completion text as it arrives."""

    @abstractmethod
    def get_num_tokens(self, text: str) -> int:
        """Token count of ``text`` under this model's tokenizer."""

    def count_message_tokens(self, messages: Messages) -> int:
        """Token count of every message body in a conversation."""
        return sum(self.get_num_tokens(msg.get("content", "")) for msg in messages)

    async def validate_request(
        self,
        messages: Messages,
        max_tokens: Optional[int] = None,
    ) -> None:
        """
        Reject conversations that cannot fit the model's context window.

        Args:
            messages: Chat messages
            max_tokens: Completion budget reserved on top of the prompt

        Raises:
            ValidationError: Prompt plus budget exceeds the context window
        """
        needed = self.count_message_tokens(messages) + (max_tokens or 0)

        if needed > self.config.context_window:
            raise ValidationError(
                f"{self.name}: request needs {needed} tokens, "
                f"context window is {self.config.context_window}"
            )

        self.logger.debug(f"Request fits: {needed}/{self.config.context_window} tokens")

    def calculate_cost(self, input_tokens: int, output_tokens: int) -> float:
        """USD cost of one exchange at the configured per-1k prices."""
        return (
            input_tokens * self.config.cost_per_1k_input
            + output_tokens * self.config.cost_per_1k_output
        ) / 1000
