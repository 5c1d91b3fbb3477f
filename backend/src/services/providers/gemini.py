"""
Google Gemini provider.

Calls the ``generateContent`` REST endpoint with fixed generation parameters
and extracts the first candidate's first text part.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from src.services.exceptions import ProviderError
from src.services.providers.base import GenerationProvider

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

# Model tags stored in the ``models`` table -> Gemini model names
GEMINI_MODEL_MAP: Dict[str, str] = {
    "gemini-1.5-flash-latest": "gemini-2.5-flash",
    "gemini-1.5-pro-latest": "gemini-2.5-pro",
    "gemini-pro-latest": "gemini-pro-latest",
}
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"

GENERATION_CONFIG: Dict[str, Any] = {
    "temperature": 0.7,
    "topK": 40,
    "topP": 0.95,
    "maxOutputTokens": 2048,
}

SAFETY_SETTINGS = [
    {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
    for category in (
        "HARM_CATEGORY_HARASSMENT",
        "HARM_CATEGORY_HATE_SPEECH",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "HARM_CATEGORY_DANGEROUS_CONTENT",
    )
]

# Generation calls are not bounded; a hung provider hangs the exchange.
REQUEST_TIMEOUT = httpx.Timeout(None)


def resolve_gemini_model(model_tag: str) -> str:
    """Map a model tag to a Gemini model name, falling back to the default."""
    return GEMINI_MODEL_MAP.get(model_tag, DEFAULT_GEMINI_MODEL)


def build_request_body(prompt: str) -> Dict[str, Any]:
    """Build the ``generateContent`` payload for a single-turn prompt."""
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": GENERATION_CONFIG,
        "safetySettings": SAFETY_SETTINGS,
    }


def extract_candidate_text(result: Any) -> Optional[str]:
    """
    Pull ``candidates[0].content.parts[0].text`` out of a response body.

    Returns None when any level is missing, which is what a safety-blocked
    response looks like.
    """
    try:
        text = result["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


class GeminiProvider(GenerationProvider):
    """Generation provider backed by the Gemini REST API."""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_GEMINI_BASE_URL,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            api_key: Gemini API key, sent as the ``x-goog-api-key`` header
            base_url: API root, without a trailing slash
            http_client: Client to reuse; a short-lived one is opened per call otherwise
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.http_client = http_client

    async def _complete(self, prompt: str, model_tag: str) -> Optional[str]:
        model_name = resolve_gemini_model(model_tag)
        url = f"{self.base_url}/models/{model_name}:generateContent"
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}

        logger.info(f"Calling Gemini API with model: {model_name}")

        try:
            if self.http_client is not None:
                response = await self.http_client.post(
                    url, json=build_request_body(prompt), headers=headers
                )
            else:
                async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as client:
                    response = await client.post(
                        url, json=build_request_body(prompt), headers=headers
                    )
        except httpx.HTTPError as e:
            raise ProviderError(f"Gemini request failed: {e}") from e

        if not response.is_success:
            raise ProviderError(
                f"Gemini API error: {response.status_code} - {response.text}"
            )

        try:
            result = response.json()
        except ValueError as e:
            raise ProviderError(f"Gemini returned an unreadable body: {e}") from e

        text = extract_candidate_text(result)
        if text is None:
            logger.error(f"No response text from Gemini: {result}")
        return text
