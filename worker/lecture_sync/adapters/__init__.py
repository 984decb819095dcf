"""Adapter factory and exports."""
from lecture_sync.adapters.base import CompletionAdapter
from lecture_sync.config import SUMMARIZER_PROVIDER


def get_adapter() -> CompletionAdapter:
    """Get the configured completion adapter.

    Returns:
        CompletionAdapter instance based on SUMMARIZER_PROVIDER config
    """
    if SUMMARIZER_PROVIDER == "openai":
        from lecture_sync.adapters.openai import OpenAIAdapter
        return OpenAIAdapter()
    elif SUMMARIZER_PROVIDER == "ollama":
        from lecture_sync.adapters.ollama import OllamaAdapter
        return OllamaAdapter()
    else:
        # Default to Groq
        from lecture_sync.adapters.groq import GroqAdapter
        return GroqAdapter()


__all__ = ["CompletionAdapter", "get_adapter"]
