# storefront/core/supabase_client.py
from functools import lru_cache

from supabase import create_client, Client

from storefront.core.config import get_settings


@lru_cache
def catalog_client() -> Client:
    """
    Supabase client for the PostgREST catalog backend.

    Uses the service role key when one is configured, so catalog rows that
    RLS hides from anon (unpublished products, for example) stay readable
    by the backend. Without it the anon key is used and RLS applies.

    WARNING:
      - Never expose the service role key to the frontend.
    """
    settings = get_settings()
    key = settings.SUPABASE_SERVICE_ROLE_KEY or settings.SUPABASE_KEY
    return create_client(settings.SUPABASE_URL, key)
