"""
OpenAI chat completions provider.
"""
import logging
from typing import Dict, Optional

from openai import AsyncOpenAI, OpenAIError

from src.services.exceptions import ProviderError
from src.services.providers.base import GenerationProvider

logger = logging.getLogger(__name__)

OPENAI_MODEL_MAP: Dict[str, str] = {
    "gpt-4o": "gpt-4o",
    "gpt-4o-mini": "gpt-4o-mini",
    "gpt-4-turbo": "gpt-4-turbo",
    "gpt-3.5-turbo": "gpt-3.5-turbo",
}
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"

MAX_TOKENS = 1000


def resolve_openai_model(model_tag: str) -> str:
    """Map a model tag to an OpenAI model name, falling back to the default."""
    return OPENAI_MODEL_MAP.get(model_tag, DEFAULT_OPENAI_MODEL)


class OpenAIProvider(GenerationProvider):
    """Generation provider backed by the OpenAI chat completions API."""

    name = "openai"

    def __init__(self, api_key: str, client: Optional[AsyncOpenAI] = None):
        self.client = client or AsyncOpenAI(api_key=api_key)

    async def _complete(self, prompt: str, model_tag: str) -> Optional[str]:
        model = resolve_openai_model(model_tag)
        logger.info(f"Calling OpenAI API with model: {model}")

        try:
            completion = await self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=MAX_TOKENS,
            )
        except OpenAIError as e:
            raise ProviderError(f"OpenAI API error: {e}") from e

        if not completion.choices:
            return None
        return completion.choices[0].message.content
