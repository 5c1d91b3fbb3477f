"""
Generation providers and provider selection.
"""
from functools import lru_cache
from typing import Optional

from src.config.settings import Settings, get_settings

from .base import (
    EMPTY_RESPONSE_FALLBACK,
    ERROR_PREFIX,
    GenerationProvider,
    format_provider_error,
    is_error_content,
)
from .echo import EchoProvider
from .gemini import GeminiProvider
from .openai_provider import OpenAIProvider


def get_generation_provider(settings: Optional[Settings] = None) -> GenerationProvider:
    """
    Select the generation provider from configured credentials.

    Gemini wins over OpenAI when both keys are set; with neither the service
    runs in echo mode.
    """
    settings = settings or get_settings()
    mode = settings.generation_mode
    if mode == "gemini":
        return _build_provider(mode, settings.gemini_api_key, settings.gemini_base_url)
    if mode == "openai":
        return _build_provider(mode, settings.openai_api_key)
    return _build_provider(mode)


@lru_cache(maxsize=None)
def _build_provider(mode: str, api_key: str = "", base_url: str = "") -> GenerationProvider:
    """Build one provider per credential set so SDK clients and their pools are reused."""
    if mode == "gemini":
        return GeminiProvider(api_key, base_url=base_url)
    if mode == "openai":
        return OpenAIProvider(api_key)
    return EchoProvider()


__all__ = [
    "EMPTY_RESPONSE_FALLBACK",
    "ERROR_PREFIX",
    "EchoProvider",
    "GeminiProvider",
    "GenerationProvider",
    "OpenAIProvider",
    "format_provider_error",
    "get_generation_provider",
    "is_error_content",
]
