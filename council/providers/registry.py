"""Provider lookup table: provider id -> ChatProvider instance."""

import logging

from config.config_loader import AppConfig
from council.providers.anthropic import AnthropicProvider
from council.providers.base import ChatProvider
from council.providers.gemini import GeminiProvider
from council.providers.openai_compat import OpenAICompatProvider

logger = logging.getLogger(__name__)

SDK_CLASSES: dict[str, type[ChatProvider]] = {
    "openai_compat": OpenAICompatProvider,
    "anthropic": AnthropicProvider,
    "gemini": GeminiProvider,
}


class ProviderRegistry:
    """Resolves the provider ids used in a council roster to adapters.

    Adding a provider means registering one more adapter; the pipeline never
    branches on provider names.
    """

    def __init__(self, providers: dict[str, ChatProvider] | None = None) -> None:
        self._providers: dict[str, ChatProvider] = dict(providers or {})

    def register(self, provider: ChatProvider) -> None:
        self._providers[provider.name()] = provider

    def get(self, provider_id: str) -> ChatProvider | None:
        return self._providers.get(provider_id)

    def names(self) -> list[str]:
        return list(self._providers)

    def availability(self) -> dict[str, bool]:
        """Map each registered provider id to whether it has a usable credential."""
        return {name: p.is_configured() for name, p in self._providers.items()}

    def is_any_configured(self) -> bool:
        return any(p.is_configured() for p in self._providers.values())


def build_registry(config: AppConfig) -> ProviderRegistry:
    """Instantiate one adapter per provider in settings. Unknown sdk values are skipped."""
    registry = ProviderRegistry()
    for name, provider_cfg in config.providers.items():
        provider_cls = SDK_CLASSES.get(provider_cfg.sdk)
        if provider_cls is None:
            logger.warning("Provider '%s' has unknown sdk '%s', skipping", name, provider_cfg.sdk)
            continue
        try:
            registry.register(provider_cls(provider_cfg))
        except Exception as exc:
            logger.warning("Failed to instantiate provider '%s': %s", name, exc)
    return registry
