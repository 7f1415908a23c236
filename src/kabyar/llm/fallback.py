"""Walks a tier's provider chain until one of them answers."""

import asyncio
import logging
import time
from typing import AsyncIterator, List

from .base import AccessDeniedError, BaseLLM, LLMUnavailableError, RateLimitError
from ..models.llm_models import LLMRequest, LLMResponse


class FallbackChainManager:
    """
    Sends one request down an ordered provider chain.

    PATTERN: Retry the same provider on 429, then cascade to the next one
    CRITICAL: A 403 or any other error abandons the provider at once
    GOTCHA: Backoff sleeps happen inside the caller's task, so a task
            timeout also bounds time spent waiting on rate limits
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
    ):
        """
        Initialize fallback chain manager.

        Args:
            max_retries: Attempts per provider while it keeps answering 429
            base_delay: First backoff delay in seconds
            max_delay: Upper bound on any single backoff delay
        """
        self.max_retries = max(1, max_retries)
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.logger = logging.getLogger(__name__)

    def _backoff(self, retry: int) -> float:
        return min(self.base_delay * (2 ** retry), self.max_delay)

    async def _ask(self, provider: BaseLLM, request: LLMRequest) -> str:
        """
        Query one provider, retrying only while it is rate limited.

        Raises:
            The last error from the provider once it gives up.
        """
        for retry in range(self.max_retries):
            try:
                return await provider.agenerate(
                    messages=request.messages,
                    max_tokens=request.max_tokens,
                    temperature=request.temperature,
                )
            except RateLimitError as e:
                if retry == self.max_retries - 1:
                    raise
                delay = self._backoff(retry)
                self.logger.warning(
                    f"{provider.name} rate limited "
                    f"({retry + 1}/{self.max_retries}), sleeping {delay}s: {e}"
                )
                await asyncio.sleep(delay)
        raise RateLimitError(f"{provider.name} never answered")

    async def execute_with_fallback(
        self,
        request: LLMRequest,
        providers: List[BaseLLM],
    ) -> LLMResponse:
        """
        Execute request with fallback chain.

        Args:
            request: LLM request
            providers: Ordered list of providers (primary first)

        Returns:
            Response from the first provider that answered

        Raises:
            ValueError: If the chain is empty
            LLMUnavailableError: If every provider failed
        """
        if not providers:
            raise ValueError("No providers available")

        started = time.monotonic()
        last_error = None

        for position, provider in enumerate(providers):
            try:
                content = await self._ask(provider, request)
            except RateLimitError as e:
                self.logger.warning(f"{provider.name} still rate limited, trying next")
                last_error = e
                continue
            except AccessDeniedError as e:
                self.logger.warning(f"{provider.name} refused the request: {e}")
                last_error = e
                continue
            except Exception as e:
                self.logger.error(f"{provider.name} failed: {e}", exc_info=True)
                last_error = e
                continue

            if position:
                self.logger.info(f"Answered by fallback #{position}: {provider.name}")

            input_tokens = provider.count_message_tokens(request.messages)
            output_tokens = provider.get_num_tokens(content)
            return LLMResponse(
                content=content,
                model_used=provider.config.model_name,
                provider=provider.config.provider,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                total_cost=provider.calculate_cost(input_tokens, output_tokens),
                latency_ms=int((time.monotonic() - started) * 1000),
                fallback_used=position > 0,
            )

        message = f"{len(providers)} provider(s) exhausted, last error: {last_error}"
        self.logger.error(message)
        raise LLMUnavailableError(message)

    async def execute_streaming_with_fallback(
        self,
        request: LLMRequest,
        providers: List[BaseLLM],
    ) -> AsyncIterator[str]:
        """
        Stream from the first provider that starts answering.

        GOTCHA: Once a chunk has been yielded a failure is re-raised,
                since the caller already holds partial output

        Yields:
            Response chunks

        Raises:
            LLMUnavailableError: If no provider produced a first chunk
        """
        if not providers:
            raise ValueError("No providers available")

        last_error = None

        for provider in providers:
            emitted = False
            try:
                async for chunk in provider.astream(
                    messages=request.messages,
                    max_tokens=request.max_tokens,
                    temperature=request.temperature,
                ):
                    emitted = True
                    yield chunk
                return
            except Exception as e:
                if emitted:
                    raise
                self.logger.warning(f"{provider.name} could not start streaming: {e}")
                last_error = e

        message = f"Streaming unavailable on {len(providers)} provider(s): {last_error}"
        self.logger.error(message)
        raise LLMUnavailableError(message)
