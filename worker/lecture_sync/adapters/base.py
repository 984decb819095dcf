"""Base adapter interface for LLM completion providers."""

from abc import ABC, abstractmethod


class CompletionAdapter(ABC):
    """Abstract base class for JSON-mode completion adapters."""

    provider: str = ""

    @abstractmethod
    async def complete_json(self, prompt: str) -> str:
        """Send one completion request and return the raw message content.

        Args:
            prompt: User prompt asking for a JSON object

        Returns:
            Message content as returned by the provider (a JSON string)

        Raises:
            RateLimitedError: If the provider signals a rate limit
            ProviderError: For any other non-success status
            MalformedResponseError: If the response envelope is unexpected
            NetworkError: If the request could not be completed
        """
        pass
