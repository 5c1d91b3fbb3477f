"""
Supabase-backed chat store.

Talks to the ``models`` and ``messages`` tables through the PostgREST query
builder and normalizes every failure into ``StorageError``.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx
from postgrest import APIError as PostgrestError
from supabase import Client

from src.api.models.chat import Message, Model
from src.services.exceptions import StorageError
from src.services.storage.base import MESSAGES_TABLE, MODELS_TABLE

logger = logging.getLogger(__name__)


class SupabaseChatStore:
    """``ChatStore`` implementation over a Supabase client."""

    def __init__(self, client: Client):
        self.client = client

    def _execute(self, query, action: str) -> List[Dict[str, Any]]:
        try:
            response = query.execute()
        except PostgrestError as e:
            logger.error(
                "Supabase API error",
                extra={"action": action, "error": str(e), "code": getattr(e, "code", None)},
            )
            raise StorageError(f"{action}: {e}") from e
        except httpx.HTTPError as e:
            logger.error(f"Supabase transport error during '{action}': {e}")
            raise StorageError(f"{action}: {e}") from e
        return response.data or []

    # ========================================================================
    # Models
    # ========================================================================

    def list_models(self) -> List[Model]:
        query = (
            self.client.table(MODELS_TABLE)
            .select("*")
            .order("created_at", desc=False)
        )
        rows = self._execute(query, "failed to fetch models")
        return [Model.model_validate(row) for row in rows]

    def insert_model(self, record: Dict[str, Any]) -> Model:
        query = self.client.table(MODELS_TABLE).insert(record)
        rows = self._execute(query, "failed to insert model")
        if not rows:
            raise StorageError("failed to insert model: no row returned")
        return Model.model_validate(rows[0])

    # ========================================================================
    # Messages
    # ========================================================================

    def insert_message(self, record: Dict[str, Any]) -> Message:
        query = self.client.table(MESSAGES_TABLE).insert(record)
        rows = self._execute(query, "failed to insert message")
        if not rows:
            raise StorageError("failed to insert message: no row returned")
        return Message.model_validate(rows[0])

    def list_messages(self, user_id: str, model_tag: Optional[str] = None) -> List[Message]:
        query = self.client.table(MESSAGES_TABLE).select("*").eq("user_id", user_id)
        if model_tag:
            query = query.eq("model_tag", model_tag)
        query = query.order("created_at", desc=False)

        rows = self._execute(query, "failed to fetch chat history")
        return [Message.model_validate(row) for row in rows]
