"""
Chat controller.

Owns the message exchange: persist the user's message, generate a reply,
persist the reply. Storage and generation are injected so the controller can
run against fakes.
"""
import logging
from typing import List, Optional

from starlette.concurrency import run_in_threadpool

from src.api.models.chat import ExchangeResult, Message, Model
from src.services.exceptions import StorageError, ValidationError
from src.services.providers import ERROR_PREFIX, GenerationProvider
from src.services.storage import ChatStore

logger = logging.getLogger(__name__)


class ChatController:
    """Controller for model listing, message exchange and history."""

    def __init__(self, store: ChatStore, provider: GenerationProvider):
        """
        Args:
            store: Backing store for models and messages
            provider: Generation provider used for assistant replies
        """
        self.store = store
        self.provider = provider

    def _validate_exchange(self, model_tag: str, prompt: str, user_id: str) -> None:
        """
        Validate exchange input before anything is written.

        Raises:
            ValidationError: If any field is missing, not a string, or empty
        """
        missing = [
            field
            for field, value in (("modelTag", model_tag), ("prompt", prompt), ("userId", user_id))
            if not isinstance(value, str) or not value
        ]
        if missing:
            raise ValidationError(
                f"{', '.join(missing)} must be a non-empty string",
                details={"fields": missing},
            )

    def list_models(self) -> List[Model]:
        """Return the selectable models in display order (oldest first)."""
        try:
            return self.store.list_models()
        except StorageError as e:
            logger.error(f"Model listing failed: {e.message}")
            raise StorageError("failed to fetch models") from e

    async def send_message(self, model_tag: str, prompt: str, user_id: str) -> ExchangeResult:
        """
        Run one exchange and return both persisted messages.

        Generation failures never raise here: they are stored as the
        assistant's message content. The two writes are sequential, so the
        user message is always created first. There is no transaction around
        them; if the second write fails the user message stays without a reply.
        Store writes run in the threadpool so a slow store does not block the
        event loop.

        Args:
            model_tag: Tag of the model to answer with
            prompt: The user's message text
            user_id: Id of the authenticated user

        Returns:
            ExchangeResult with the user message and the assistant message

        Raises:
            ValidationError: If input is malformed (nothing is written)
            StorageError: If either write fails
        """
        self._validate_exchange(model_tag, prompt, user_id)

        try:
            user_message = await run_in_threadpool(
                self.store.insert_message,
                {
                    "user_id": user_id,
                    "model_tag": model_tag,
                    "role": "user",
                    "content": prompt,
                },
            )
        except StorageError as e:
            logger.error(f"User message write failed for user {user_id}: {e.message}")
            raise StorageError("user message write failed") from e

        reply = await self._generate_reply(prompt, model_tag)

        try:
            ai_message = await run_in_threadpool(
                self.store.insert_message,
                {
                    "user_id": user_id,
                    "model_tag": model_tag,
                    "role": "assistant",
                    "content": reply,
                },
            )
        except StorageError as e:
            logger.error(
                f"Assistant message write failed for user {user_id}; "
                f"user message {user_message.id} has no reply: {e.message}"
            )
            raise StorageError("assistant message write failed") from e

        return ExchangeResult(user_message=user_message, ai_message=ai_message)

    async def _generate_reply(self, prompt: str, model_tag: str) -> str:
        """Ask the provider for a reply; anything it raises becomes error content."""
        try:
            return await self.provider.generate(prompt, model_tag)
        except Exception as e:
            logger.exception(f"Unexpected {self.provider.name} provider failure")
            return f"{ERROR_PREFIX}{e}"

    def get_history(self, user_id: str, model_tag: Optional[str] = None) -> List[Message]:
        """
        Return a user's messages oldest first, optionally for one model tag.

        Raises:
            ValidationError: If ``user_id`` is empty
            StorageError: If the read fails
        """
        if not isinstance(user_id, str) or not user_id:
            raise ValidationError("userId must be a non-empty string", details={"fields": ["userId"]})
        try:
            return self.store.list_messages(user_id, model_tag or None)
        except StorageError as e:
            logger.error(f"History read failed for user {user_id}: {e.message}")
            raise StorageError("failed to fetch chat history") from e
