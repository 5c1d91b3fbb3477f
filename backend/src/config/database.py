"""
Supabase client management and dependency injection.
Provides the service-role client and the chat store built on top of it.
"""
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from supabase import Client, create_client
from supabase.client import ClientOptions

from src.config.settings import get_settings
from src.services.storage import SupabaseChatStore


@lru_cache(maxsize=None)
def get_supabase_for(
    postgrest_client_timeout: int = 60,
    storage_client_timeout: int = 60,
    schema: str = "public",
) -> Client:
    """
    Returns a Supabase client with the specified options.

    Args:
        postgrest_client_timeout (int): Timeout for PostgREST client in seconds.
        storage_client_timeout (int): Timeout for storage client in seconds.
        schema (str): The Postgres schema to use (defaults to "public").

    Returns:
        Client: Configured Supabase client.

    Raises:
        ValueError: If SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY environment variables are not set.
    """
    settings = get_settings()

    if not settings.storage_configured:
        raise ValueError(
            "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set in environment variables"
        )

    options = ClientOptions(
        postgrest_client_timeout=postgrest_client_timeout,
        storage_client_timeout=storage_client_timeout,
        schema=schema,
    )
    return create_client(
        settings.supabase_url, settings.supabase_service_role_key, options=options
    )


def get_supabase() -> Client:
    """Get default Supabase client (public schema)."""
    return get_supabase_for(schema="public")


def get_chat_store(client: Client = Depends(get_supabase)) -> SupabaseChatStore:
    """Dependency injection for the chat store."""
    return SupabaseChatStore(client)


# Type alias for dependency injection
ChatStoreDep = Annotated[SupabaseChatStore, Depends(get_chat_store)]
