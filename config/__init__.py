"""
Settings and the Supabase client.

    from config import settings, get_supabase_client
"""

from config.settings import settings, get_settings, Settings
from config.database import (
    get_supabase_client,
    db_operation,
    check_connection,
    DatabaseUnavailableError,
)

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "get_supabase_client",
    "db_operation",
    "check_connection",
    "DatabaseUnavailableError",
]
