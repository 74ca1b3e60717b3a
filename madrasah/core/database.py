from supabase import create_client, Client
from madrasah.core.config import Settings


def create_supabase(settings: Settings) -> Client:
    """Data client. Uses the service key when configured so row writes are not
    tied to whichever end user last signed in."""
    return create_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_SERVICE_KEY or settings.SUPABASE_KEY,
    )


def create_auth_client(settings: Settings) -> Client:
    """Short-lived anon-key client for sign-in / sign-up / sign-out calls."""
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
