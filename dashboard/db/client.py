"""
Supabase client factory.

Clients are created per request with the caller's access token so that
Row Level Security policies on the invoices table apply to every statement.
The factory refuses to talk to a database URL without TLS unless
DATABASE_REQUIRE_TLS is turned off.
"""

import logging

from dashboard.config import settings
from supabase import Client, create_client

logger = logging.getLogger(__name__)


def ensure_tls(url: str) -> None:
    """
    Raise if `url` is not an https URL while TLS is required.

    Raises:
        ValueError: If DATABASE_REQUIRE_TLS is set and the URL is not https.
    """
    if settings.DATABASE_REQUIRE_TLS and not url.startswith("https://"):
        raise ValueError(
            "Refusing non-TLS database connection. "
            "SUPABASE_URL must start with https://"
        )


def get_supabase_client(access_token: str) -> Client:
    """
    Create an authenticated Supabase client for a specific user.

    Args:
        access_token: The user's JWT access token, already verified by
                      dashboard/auth/dependencies.py.

    Returns:
        An authenticated Supabase client.

    Raises:
        ValueError: If the configured URL violates the TLS requirement.

    Example:
        >>> client = get_supabase_client(auth_user.access_token)
        >>> client.table("invoices").select("*").execute()
    """
    ensure_tls(settings.SUPABASE_URL)

    client: Client = create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_PUBLISHABLE_KEY
    )

    # Forward the user's token; RLS policies see it as auth.uid()
    client.auth.set_session(access_token, access_token)

    logger.debug("Created authenticated Supabase client with user token")

    return client
