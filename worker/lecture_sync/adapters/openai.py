"""OpenAI-compatible chat completions adapter."""
import logging
import re
from typing import Dict, Optional

import httpx

from lecture_sync.adapters.base import CompletionAdapter
from lecture_sync.config import (
    OPENAI_API_KEY,
    OPENAI_URL,
    SUMMARIZER_MODEL,
    SUMMARIZER_TIMEOUT,
    SUMMARY_MAX_TOKENS,
    SUMMARY_TEMPERATURE,
)
from lecture_sync.errors import (
    MalformedResponseError,
    NetworkError,
    ProviderError,
    RateLimitedError,
)

logger = logging.getLogger(__name__)

RATE_LIMIT_MARKER = "rate_limit_exceeded"

# e.g. "Please try again in 7.66s" or "try again in 1m2.5s"
_RETRY_HINT = re.compile(r"try again in (?:(\d+)m)?(\d+(?:\.\d+)?)s", re.IGNORECASE)


def parse_retry_after(body: str) -> Optional[float]:
    """Read the retry-after hint from a rate-limit error body, in seconds."""
    match = _RETRY_HINT.search(body)
    if not match:
        return None
    minutes = int(match.group(1) or 0)
    return minutes * 60 + float(match.group(2))


class OpenAIAdapter(CompletionAdapter):
    """Chat completions over HTTP against an OpenAI-compatible endpoint."""

    provider = "openai"

    def __init__(self):
        if not OPENAI_API_KEY:
            raise ValueError("OPENAI_API_KEY environment variable is required")

        self.api_key = OPENAI_API_KEY
        self.base_url = OPENAI_URL.rstrip("/")
        self.model = SUMMARIZER_MODEL
        self.timeout = SUMMARIZER_TIMEOUT
        self.temperature = SUMMARY_TEMPERATURE
        self.max_tokens = SUMMARY_MAX_TOKENS

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def complete_json(self, prompt: str) -> str:
        """Request a JSON-object completion for a single user prompt."""
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            "response_format": {"type": "json_object"},
            "max_tokens": self.max_tokens,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers=self._headers(),
                )
        except httpx.TransportError as e:
            logger.error(f"Completion request to {self.provider} failed: {e}")
            raise NetworkError(f"Completion request to {self.provider} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            body = response.text
            if RATE_LIMIT_MARKER in body:
                retry_after = parse_retry_after(body)
                raise RateLimitedError(
                    f"{self.provider} rate limit exceeded", retry_after=retry_after
                )
            raise ProviderError(response.status_code, body)

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError(
                f"Unexpected completion response from {self.provider}: {e}"
            ) from e

        if not isinstance(content, str):
            raise MalformedResponseError(
                f"Completion from {self.provider} has no text content"
            )

        logger.debug(f"Raw completion from {self.provider}: {content}")
        return content
