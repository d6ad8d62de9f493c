"""
Supabase access.

One client per process, created lazily on first use. Services fetch it
through get_supabase_client() and never build their own.
"""

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator
from urllib.parse import urlsplit

import structlog
from supabase import create_client, Client

from config.settings import settings

logger = structlog.get_logger(__name__)

# Tables counted by the health check
HEALTH_TABLES = ("guest_blog_sites", "publishers")


class DatabaseUnavailableError(RuntimeError):
    """Supabase client could not be created or failed its probe query."""


@lru_cache()
def get_supabase_client() -> Client:
    """
    Create the shared Supabase client.

    The first call probes the publishers table so a bad URL or key fails
    at startup rather than on the first upload. Clear the cache with
    get_supabase_client.cache_clear() to reconnect.

    Raises:
        DatabaseUnavailableError: If the client cannot reach Supabase
    """
    host = urlsplit(settings.supabase_url).hostname
    logger.info("supabase_connecting", host=host)

    try:
        client = create_client(settings.supabase_url, settings.supabase_key)
        client.table("publishers").select("id").limit(1).execute()
    except Exception as e:
        logger.error(
            "supabase_unreachable",
            host=host,
            error=str(e),
            error_type=type(e).__name__
        )
        raise DatabaseUnavailableError(f"Supabase unreachable: {e}") from e

    logger.info("supabase_connected", host=host)
    return client


@contextmanager
def db_operation(name: str) -> Iterator[Client]:
    """Yield the shared client, logging the operation's outcome."""
    logger.debug("db_operation_start", operation=name)
    try:
        yield get_supabase_client()
    except Exception as e:
        logger.error(
            "db_operation_failed",
            operation=name,
            error=str(e),
            error_type=type(e).__name__
        )
        raise
    logger.debug("db_operation_complete", operation=name)


def check_connection() -> dict:
    """Row counts for the core tables, or the error that prevented reading them."""
    try:
        with db_operation("health_check") as client:
            counts = {
                table: client.table(table).select("id", count="exact").execute().count
                for table in HEALTH_TABLES
            }
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}

    return {"status": "healthy", "tables": counts}
