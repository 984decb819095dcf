"""Ollama adapter for lecture summaries."""

from lecture_sync.adapters.openai import OpenAIAdapter
from lecture_sync.config import (
    OLLAMA_URL,
    SUMMARIZER_MODEL,
    SUMMARIZER_TIMEOUT,
    SUMMARY_MAX_TOKENS,
    SUMMARY_TEMPERATURE,
)


class OllamaAdapter(OpenAIAdapter):
    """Local Ollama server through its OpenAI-compatible API (no auth)."""

    provider = "ollama"

    def __init__(self):
        self.api_key = ""
        self.base_url = f"{OLLAMA_URL.rstrip('/')}/v1"
        self.model = SUMMARIZER_MODEL
        self.timeout = SUMMARIZER_TIMEOUT
        self.temperature = SUMMARY_TEMPERATURE
        self.max_tokens = SUMMARY_MAX_TOKENS
