import os
from typing import Optional

from aws_lambda_powertools import Logger
from supabase import create_client, Client

logger = Logger(service="database")

_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Returns the process-wide Supabase client, creating it on first use.

    Raises:
        ValueError: If SUPABASE_URL or SUPABASE_KEY is not set.
    """
    global _client
    if not _client:
        url = os.environ.get("SUPABASE_URL")
        key = os.environ.get("SUPABASE_KEY")
        if not url or not key:
            raise ValueError("Supabase settings missing (SUPABASE_URL / SUPABASE_KEY)")
        _client = create_client(url, key)
        logger.info("Supabase client initialized")
    return _client


def reset_supabase_client() -> None:
    """Drops the cached client so the next call re-reads the environment."""
    global _client
    _client = None
