from .base import MESSAGES_TABLE, MODELS_TABLE, ChatStore
from .supabase_store import SupabaseChatStore

__all__ = [
    "ChatStore",
    "SupabaseChatStore",
    "MESSAGES_TABLE",
    "MODELS_TABLE",
]
