"""Groq adapter for lecture summaries."""
from lecture_sync.adapters.openai import OpenAIAdapter
from lecture_sync.config import (
    GROQ_API_KEY,
    GROQ_URL,
    SUMMARIZER_MODEL,
    SUMMARIZER_TIMEOUT,
    SUMMARY_MAX_TOKENS,
    SUMMARY_TEMPERATURE,
)


class GroqAdapter(OpenAIAdapter):
    """Groq's OpenAI-compatible chat completions endpoint."""

    provider = "groq"

    def __init__(self):
        if not GROQ_API_KEY:
            raise ValueError("GROQ_API_KEY environment variable is required")

        self.api_key = GROQ_API_KEY
        self.base_url = GROQ_URL.rstrip("/")
        self.model = SUMMARIZER_MODEL
        self.timeout = SUMMARIZER_TIMEOUT
        self.temperature = SUMMARY_TEMPERATURE
        self.max_tokens = SUMMARY_MAX_TOKENS
