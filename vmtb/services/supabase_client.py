"""Shared Supabase client for the backing store."""

from functools import lru_cache

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from ..utils.config import settings
from ..utils.errors import CollaboratorError
from ..utils.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Create the Supabase client once per process."""
    if not settings.supabase_url or not settings.supabase_key:
        raise CollaboratorError("supabase_connect", "SUPABASE_URL and SUPABASE_KEY must be set")

    try:
        options = ClientOptions(auto_refresh_token=True, persist_session=True)
        client = create_client(settings.supabase_url, settings.supabase_key, options=options)
    except Exception as e:
        logger.error(f"Failed to initialize Supabase client: {e}")
        raise CollaboratorError("supabase_connect", str(e)) from e

    logger.info("Supabase client initialized")
    return client
