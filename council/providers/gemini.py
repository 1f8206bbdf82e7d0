"""Gemini provider using google-genai SDK with native async."""

import asyncio
import logging
import os
import time

from google import genai
from google.genai import types as genai_types

from config.config_loader import ProviderConfig
from council.models import ChatMessage, ChatOptions
from council.providers.base import ChatProvider, ProviderError

logger = logging.getLogger(__name__)

# google-genai names the assistant role "model"
_ROLE_MAP = {"user": "user", "assistant": "model"}


def _to_contents(messages: list[ChatMessage]) -> tuple[str | None, list[genai_types.Content]]:
    system_parts = [m["content"] for m in messages if m["role"] == "system"]
    contents = [
        genai_types.Content(
            role=_ROLE_MAP.get(m["role"], "user"),
            parts=[genai_types.Part(text=m["content"])],
        )
        for m in messages
        if m["role"] != "system"
    ]
    return ("\n\n".join(system_parts) if system_parts else None), contents


class GeminiProvider(ChatProvider):
    """Google Gemini provider via google-genai SDK."""

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        self._client: genai.Client | None = None
        if api_key:
            self._client = genai.Client(api_key=api_key)

    def name(self) -> str:
        return self._config.name

    def is_configured(self) -> bool:
        return self._client is not None

    async def invoke(self, model: str, messages: list[ChatMessage], options: ChatOptions) -> str:
        if self._client is None:
            raise ProviderError(self._config.name, f"Missing API key: {self._config.api_key_env}")

        system, contents = _to_contents(messages)
        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=model,
                    contents=contents,
                    config=genai_types.GenerateContentConfig(
                        system_instruction=system,
                        temperature=options.temperature,
                        max_output_tokens=options.max_tokens,
                    ),
                ),
                timeout=self._config.timeout_sec,
            )
        except TimeoutError as exc:
            raise ProviderError(self._config.name, f"Request timed out after {self._config.timeout_sec}s") from exc
        except Exception as exc:
            raise ProviderError(self._config.name, f"API call failed: {exc}") from exc

        latency = time.monotonic() - start

        if not response.text:
            raise ProviderError(self._config.name, "Empty response text")

        token_count: int | None = None
        if response.usage_metadata:
            token_count = response.usage_metadata.total_token_count

        logger.info("Gemini %s: %.2fs, %s tokens", model, latency, token_count)
        return response.text
