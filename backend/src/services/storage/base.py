"""
Storage collaborator interface.

The chat core only ever selects (filtered by equality, ordered by
``created_at`` ascending) and inserts with returning. It never updates or
deletes.
"""
from typing import Any, Dict, List, Optional, Protocol

from src.api.models.chat import Message, Model

MODELS_TABLE = "models"
MESSAGES_TABLE = "messages"


class ChatStore(Protocol):
    """Persistence operations used by the chat controller.

    Every method raises ``StorageError`` when the underlying read or write
    fails.
    """

    def list_models(self) -> List[Model]:
        """Return all models, ascending by creation time."""
        ...

    def insert_model(self, record: Dict[str, Any]) -> Model:
        """Insert a model row and return it as stored."""
        ...

    def insert_message(self, record: Dict[str, Any]) -> Message:
        """Insert a message row and return it as stored (id and timestamp filled in)."""
        ...

    def list_messages(self, user_id: str, model_tag: Optional[str] = None) -> List[Message]:
        """Return a user's messages ascending by creation time, optionally for one tag."""
        ...
