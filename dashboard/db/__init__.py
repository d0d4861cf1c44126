"""
Database access layer for the invoice dashboard.

All statements go through a per-request Supabase client so Row Level
Security applies. Table schemas and policies live in the database, not here.
"""

from .client import ensure_tls, get_supabase_client

__all__ = ["ensure_tls", "get_supabase_client"]
