"""High-level LLM service: the chat collaborator used by the pipeline."""

import logging
from typing import AsyncIterator, Dict, List, Optional

from ..llm import TierRouter, FallbackChainManager, LLMUnavailableError
from ..models.llm_models import LLMRequest, LLMResponse, ModelTier
from ..config.llm_config import LLMConfig


def build_messages(system_prompt: str, user_prompt: str) -> List[Dict[str, str]]:
    """Build a system + user message pair."""
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


class LLMOrchestrator:
    """
    High-level LLM service orchestrating tier routing and fallback.

    PATTERN: Facade over TierRouter and FallbackChainManager
    CRITICAL: Failures surface as exceptions; callers decide how to contain them
    """

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        router: Optional[TierRouter] = None,
        fallback_manager: Optional[FallbackChainManager] = None,
    ):
        """
        Initialize LLM orchestrator.

        Args:
            config: LLM configuration (creates default if None)
            router: Tier router (creates default if None)
            fallback_manager: Fallback manager (creates default if None)
        """
        self.config = config or LLMConfig()
        self.router = router or TierRouter(config=self.config)
        self.fallback_manager = fallback_manager or FallbackChainManager(
            max_retries=self.config.max_retries,
            base_delay=self.config.base_delay,
            max_delay=self.config.max_delay,
        )
        self.logger = logging.getLogger(__name__)

    async def generate_response(self, request: LLMRequest) -> LLMResponse:
        """
        Generate a response for a tier with fallback.

        Args:
            request: LLM request

        Returns:
            LLM response with usage metadata

        Raises:
            LLMUnavailableError: If no provider is configured or all fail
        """
        chain = self.router.get_chain(request.tier)
        if not chain:
            raise LLMUnavailableError(
                f"No available providers for tier '{request.tier}'"
            )

        response = await self.fallback_manager.execute_with_fallback(
            request=request,
            providers=chain,
        )

        self.logger.info(
            f"Generated response: {response.model_used} "
            f"(cost: ${response.total_cost:.4f}, "
            f"latency: {response.latency_ms}ms, "
            f"tokens: {response.input_tokens + response.output_tokens})"
        )
        return response

    async def chat(
        self,
        tier: ModelTier,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        """
        Run one system + user exchange and return the completion text.

        Args:
            tier: Model tier
            system_prompt: System prompt
            user_prompt: User prompt

        Returns:
            Completion text
        """
        request = LLMRequest(
            messages=build_messages(system_prompt, user_prompt),
            tier=tier,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
        )
        response = await self.generate_response(request)
        return response.content

    async def stream(
        self,
        tier: ModelTier,
        system_prompt: str,
        user_prompt: str,
    ) -> AsyncIterator[str]:
        """
        Stream one system + user exchange.

        Args:
            tier: Model tier
            system_prompt: System prompt
            user_prompt: User prompt

        Yields:
            Response chunks
        """
        request = LLMRequest(
            messages=build_messages(system_prompt, user_prompt),
            tier=tier,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
        )
        chain = self.router.get_chain(request.tier)
        if not chain:
            raise LLMUnavailableError(
                f"No available providers for tier '{request.tier}'"
            )

        async for chunk in self.fallback_manager.execute_streaming_with_fallback(
            request=request,
            providers=chain,
        ):
            yield chunk

    async def close(self) -> None:
        """Release provider clients."""
        await self.router.close()
        self.logger.info("LLM Orchestrator closed")
