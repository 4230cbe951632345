"""
Supabase client initialization.

This module contains *only* the database connection setup. Supabase is an
optional secondary (backup) medium for the persistent store, so the client is
created on demand instead of at import time.

Environment variables:
- SUPABASE_URL: Your Supabase project URL
- SUPABASE_KEY: Your Supabase API key (use a server-side key only on the backend)
"""

from __future__ import annotations

from functools import lru_cache

# The dependency is `supabase` (supabase-py). If your editor can't resolve it,
# install it in your environment: `pip install supabase`.
from supabase import Client, create_client  # type: ignore[import-not-found]


@lru_cache(maxsize=None)
def get_supabase(url: str, key: str) -> Client:
    """
    Return a Supabase client for (url, key), creating it once per process.

    Raises:
        RuntimeError: If either credential is missing.
    """

    if not url:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_URL. "
            "Set SUPABASE_URL to your Supabase project URL."
        )

    if not key:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_KEY. "
            "Set SUPABASE_KEY to your Supabase API key."
        )

    return create_client(url, key)


__all__ = ["get_supabase"]
