from council.providers.base import ChatProvider, ProviderError
from council.providers.registry import ProviderRegistry, build_registry

__all__ = ["ChatProvider", "ProviderError", "ProviderRegistry", "build_registry"]
