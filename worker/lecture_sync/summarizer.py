"""Structured lecture summaries from an LLM completion endpoint."""

import asyncio
import json
import logging
from typing import Awaitable, Callable, Optional

from lecture_sync.adapters import CompletionAdapter, get_adapter
from lecture_sync.config import (
    MAX_ATTEMPTS,
    MAX_SUMMARIZER_INPUT_CHARS,
    MIN_SUMMARIZER_INPUT_CHARS,
    RATE_LIMIT_DEFAULT_WAIT,
    RATE_LIMIT_MARGIN,
)
from lecture_sync.errors import MalformedResponseError, RateLimitedError, TextTooShortError
from lecture_sync.schemas.summary import (
    PROMPT,
    SummaryResult,
    normalize_summary_field,
    truncate_summary,
    validate_summary,
)

logger = logging.getLogger(__name__)


def build_prompt(text: str) -> str:
    """Fill the summary prompt template with lecture text."""
    return PROMPT.replace("{text}", text)


def parse_completion(content: str) -> SummaryResult:
    """Turn raw completion content into a validated SummaryResult.

    Raises:
        MalformedResponseError: If the content is not a JSON object
        InvalidSummaryShapeError: If no summary text can be recovered
        SchemaValidationError: If the normalized object fails validation
    """
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON from model: {e}")
        raise MalformedResponseError(f"Invalid JSON from model: {e}") from e

    if not isinstance(parsed, dict):
        raise MalformedResponseError(
            f"Expected a JSON object from model, got {type(parsed).__name__}"
        )

    logger.debug(f"Model returned fields: {sorted(parsed.keys())}")

    if not isinstance(parsed.get("summary"), str):
        logger.warning(
            f"Summary arrived as {type(parsed.get('summary')).__name__}, normalizing"
        )
    normalized = normalize_summary_field(parsed)

    summary = normalized["summary"]
    truncated = truncate_summary(summary)
    if truncated != summary:
        logger.warning(f"Summary truncated from {len(summary)} to {len(truncated)} characters")
        normalized["summary"] = truncated

    return validate_summary(normalized)


class Summarizer:
    """Generate study summaries with bounded rate-limit retries.

    Args:
        adapter: Completion adapter (defaults to the configured provider)
        max_attempts: Requests made before giving up on rate limits
        default_wait: Seconds to wait when the provider gives no hint
        margin: Extra seconds added to every wait
        sleep: Awaitable sleep function
    """

    def __init__(
        self,
        adapter: Optional[CompletionAdapter] = None,
        max_attempts: int = MAX_ATTEMPTS,
        default_wait: float = RATE_LIMIT_DEFAULT_WAIT,
        margin: float = RATE_LIMIT_MARGIN,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.adapter = adapter or get_adapter()
        self.max_attempts = max_attempts
        self.default_wait = default_wait
        self.margin = margin
        self.sleep = sleep

    def backoff_for(self, error: RateLimitedError) -> float:
        """Seconds to wait before retrying after a rate limit."""
        hint = error.retry_after if error.retry_after is not None else self.default_wait
        return hint + self.margin

    async def complete(self, prompt: str) -> str:
        """Run the completion, retrying only on rate limits."""
        waited = 0.0
        attempt = 1
        while True:
            try:
                return await self.adapter.complete_json(prompt)
            except RateLimitedError as e:
                if attempt >= self.max_attempts:
                    logger.error(
                        f"Rate limit persisted after {attempt} attempts ({waited:.1f}s waited)"
                    )
                    raise RateLimitedError(
                        f"Rate limit persisted after {attempt} attempts",
                        retry_after=e.retry_after,
                        attempts=attempt,
                        waited=waited,
                    ) from e

                delay = self.backoff_for(e)
                logger.info(
                    f"Rate limit hit; waiting {delay:.1f}s before retrying "
                    f"(attempt {attempt + 1}/{self.max_attempts})"
                )
                await self.sleep(delay)
                waited += delay
                attempt += 1

    async def summarize(self, text: str) -> SummaryResult:
        """Summarize lecture text into a SummaryResult.

        Args:
            text: Extracted lecture text

        Returns:
            Validated SummaryResult

        Raises:
            TextTooShortError: If the trimmed input is under the minimum length
            RateLimitedError: If every attempt was rate limited
            ProviderError, NetworkError, MalformedResponseError,
            InvalidSummaryShapeError, SchemaValidationError: See parse_completion
        """
        trimmed = text[:MAX_SUMMARIZER_INPUT_CHARS].strip()
        if len(trimmed) < MIN_SUMMARIZER_INPUT_CHARS:
            raise TextTooShortError(len(trimmed), MIN_SUMMARIZER_INPUT_CHARS)

        content = await self.complete(build_prompt(trimmed))
        return parse_completion(content)
