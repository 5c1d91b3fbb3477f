"""
Generation provider interface.

Every backend answers the same question, "what text does this prompt get for
this model tag", and the base class owns the normalization rules so callers
never see which backend is active:

- usable text is returned as-is
- empty or missing text becomes ``EMPTY_RESPONSE_FALLBACK``
- a failed upstream call becomes an ``ERROR_PREFIX``-marked string
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

from src.services.exceptions import ProviderError

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Error: "
EMPTY_RESPONSE_FALLBACK = "Sorry, I could not generate a response. Please try again."


def format_provider_error(detail: str) -> str:
    """Render a provider failure as inline message content."""
    return f"{ERROR_PREFIX}{detail}. Please check your API key and try again."


def is_error_content(text: str) -> bool:
    """Check whether message content is a rendered provider failure."""
    return text.startswith(ERROR_PREFIX)


class GenerationProvider(ABC):
    """Produces assistant text for a prompt and a model tag."""

    name: str = "base"

    async def generate(self, prompt: str, model_tag: str) -> str:
        """
        Generate a reply for ``prompt`` using the model selected by ``model_tag``.

        Never raises ``ProviderError``: failures come back as error-marked text.
        """
        try:
            text = await self._complete(prompt, model_tag)
        except ProviderError as e:
            logger.error(f"{self.name} generation failed: {e.message}")
            return format_provider_error(e.message)

        if not text or not text.strip():
            logger.warning(f"{self.name} returned no usable text for tag '{model_tag}'")
            return EMPTY_RESPONSE_FALLBACK
        return text

    @abstractmethod
    async def _complete(self, prompt: str, model_tag: str) -> Optional[str]:
        """Call the backend; return its text (possibly empty) or raise ``ProviderError``."""
