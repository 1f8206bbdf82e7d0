"""OpenAI-compatible provider (Groq, Together, OpenRouter, OpenAI, xAI) using openai SDK."""

import asyncio
import logging
import os
import time

from openai import AsyncOpenAI

from config.config_loader import ProviderConfig
from council.models import ChatMessage, ChatOptions
from council.providers.base import ChatProvider, ProviderError

logger = logging.getLogger(__name__)


class OpenAICompatProvider(ChatProvider):
    """Any chat-completions endpoint that speaks the OpenAI wire format."""

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        self._client: AsyncOpenAI | None = None
        if api_key:
            self._client = AsyncOpenAI(api_key=api_key, base_url=config.base_url)

    def name(self) -> str:
        return self._config.name

    def is_configured(self) -> bool:
        return self._client is not None

    async def invoke(self, model: str, messages: list[ChatMessage], options: ChatOptions) -> str:
        if self._client is None:
            raise ProviderError(self._config.name, f"Missing API key: {self._config.api_key_env}")

        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.chat.completions.create(
                    model=model,
                    messages=messages,
                    temperature=options.temperature,
                    max_tokens=options.max_tokens,
                ),
                timeout=self._config.timeout_sec,
            )
        except TimeoutError as exc:
            raise ProviderError(self._config.name, f"Request timed out after {self._config.timeout_sec}s") from exc
        except Exception as exc:
            raise ProviderError(self._config.name, f"API call failed: {exc}") from exc

        latency = time.monotonic() - start

        choice = response.choices[0] if response.choices else None
        if not choice or not choice.message.content:
            raise ProviderError(self._config.name, "Empty response content")

        token_count: int | None = None
        if response.usage:
            token_count = response.usage.total_tokens

        logger.info("%s %s: %.2fs, %s tokens", self._config.name, model, latency, token_count)
        return choice.message.content
