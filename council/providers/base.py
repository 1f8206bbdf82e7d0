"""Abstract base for all chat-completion providers."""

from abc import ABC, abstractmethod

from council.models import ChatMessage, ChatOptions


class ProviderError(Exception):
    """Raised when a provider call fails."""

    def __init__(self, provider_name: str, message: str) -> None:
        self.provider_name = provider_name
        super().__init__(f"[{provider_name}] {message}")


class ChatProvider(ABC):
    """Abstract base for all chat-completion providers.

    One instance serves every model hosted by that provider; the model id is
    passed per call.
    """

    @abstractmethod
    def name(self) -> str:
        """Return the provider id (e.g. 'groq', 'anthropic')."""
        ...

    @abstractmethod
    def is_configured(self) -> bool:
        """Return True if the provider has a usable credential."""
        ...

    @abstractmethod
    async def invoke(
        self,
        model: str,
        messages: list[ChatMessage],
        options: ChatOptions,
    ) -> str:
        """Send a chat prompt to a model and return the reply text.

        Args:
            model: Provider-specific model id.
            messages: Ordered chat messages ({"role", "content"}).
            options: Sampling temperature and token limit.

        Returns:
            The non-empty reply text.

        Raises:
            ProviderError: On missing credentials, API failure, timeout or empty reply.
        """
        ...
