"""OpenAI-compatible provider used for Groq, xAI, Gemini and OpenAI."""

from typing import Any, AsyncIterator, Dict, Optional

import openai
import tiktoken
from openai import AsyncOpenAI

from ..base import AccessDeniedError, APIError, BaseLLM, LLMError, Messages, RateLimitError
from ...models.llm_models import ModelConfig


class OpenAIProvider(BaseLLM):
    """
    Chat-completions provider over the official OpenAI SDK.

    PATTERN: One async client per model, pointed at the vendor's base URL
    GOTCHA: Every vendor here speaks the OpenAI wire format, only the
            base URL and key differ
    """

    def __init__(
        self,
        config: ModelConfig,
        api_key: str,
        timeout: Optional[float] = None,
    ):
        """
        Initialize provider.

        Args:
            config: Model configuration (api_endpoint is the base URL)
            api_key: Vendor API key
            timeout: HTTP timeout in seconds
        """
        super().__init__(config)
        client_kwargs: Dict[str, Any] = {"api_key": api_key}
        if config.api_endpoint:
            client_kwargs["base_url"] = config.api_endpoint
        if timeout:
            client_kwargs["timeout"] = timeout
        self.client = AsyncOpenAI(**client_kwargs)

        try:
            self.tokenizer = tiktoken.encoding_for_model(config.model_name)
        except KeyError:
            # Non-OpenAI model names: cl100k_base is close enough for budgeting
            self.tokenizer = tiktoken.get_encoding("cl100k_base")

    def _translate(self, error: openai.APIError) -> LLMError:
        """Map an SDK failure onto the chain's error types."""
        if isinstance(error, openai.RateLimitError):
            self.logger.warning(f"{self.name} returned 429: {error}")
            return RateLimitError(f"{self.name} rate limit: {error}")
        if isinstance(error, openai.PermissionDeniedError):
            self.logger.warning(f"{self.name} returned 403: {error}")
            return AccessDeniedError(f"{self.name} access denied: {error}")
        self.logger.error(f"{self.name} API error: {error}")
        return APIError(f"{self.name} API error: {error}")

    def _completion_args(
        self,
        messages: Messages,
        max_tokens: Optional[int],
        temperature: float,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        return {
            "model": self.config.model_name,
            "messages": messages,
            "max_tokens": max_tokens or self.config.max_tokens,
            "temperature": temperature,
            **kwargs,
        }

    async def agenerate(
        self,
        messages: Messages,
        max_tokens: Optional[int] = None,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> str:
        """
        Generate a chat completion.

        Args:
            messages: Chat messages in OpenAI format
            max_tokens: Completion budget, defaults to the model's max_tokens
            temperature: Sampling temperature (0-2)

        Returns:
            Completion text, empty when the vendor returned no content

        Raises:
            RateLimitError: On HTTP 429
            AccessDeniedError: On HTTP 403
            APIError: On any other SDK failure
            ValidationError: If the prompt cannot fit the context window
        """
        await self.validate_request(messages, max_tokens)

        try:
            response = await self.client.chat.completions.create(
                **self._completion_args(messages, max_tokens, temperature, **kwargs)
            )
        except openai.APIError as e:
            raise self._translate(e) from e

        return response.choices[0].message.content or ""

    async def astream(
        self,
        messages: Messages,
        max_tokens: Optional[int] = None,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> AsyncIterator[str]:
        """Stream completion deltas, skipping empty ones."""
        await self.validate_request(messages, max_tokens)

        try:
            stream = await self.client.chat.completions.create(
                stream=True,
                **self._completion_args(messages, max_tokens, temperature, **kwargs),
            )
            async for chunk in stream:
                if chunk.choices and chunk.choices[0].delta.content:
                    yield chunk.choices[0].delta.content
        except openai.APIError as e:
            raise self._translate(e) from e

    def get_num_tokens(self, text: str) -> int:
        return len(self.tokenizer.encode(text))

    async def close(self):
        """Close the HTTP client."""
        await self.client.close()
