"""
Echo provider used when no generation credential is configured.
"""
from typing import Optional

from src.services.providers.base import GenerationProvider


class EchoProvider(GenerationProvider):
    """Deterministic offline provider: repeats the prompt back."""

    name = "echo"

    async def _complete(self, prompt: str, model_tag: str) -> Optional[str]:
        return f'You said: "{prompt}"'
