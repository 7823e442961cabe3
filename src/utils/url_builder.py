"""
Database URL utilities
"""
from urllib.parse import urlsplit, urlunsplit, parse_qsl, urlencode
from typing import Optional, Tuple


ASYNC_SCHEME = "postgresql+asyncpg"
SESSION_POOLER_PORT = "5432"
TRANSACTION_POOLER_PORT = "6543"


def build_async_url(sync_url: str) -> str:
    """
    Rewrite a postgres URL for the asyncpg driver

    asyncpg rejects the libpq ``sslmode`` query parameter, so it is dropped here
    and SSL is requested through connect_args instead.

    Args:
        sync_url: URL as copied from the Supabase dashboard

    Returns:
        URL with the postgresql+asyncpg scheme; non-postgres URLs are returned unchanged
    """
    if not sync_url:
        return sync_url

    parts = urlsplit(sync_url)
    base_scheme = parts.scheme.split("+")[0]
    if not base_scheme.startswith("postgres"):
        return sync_url

    query_pairs = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    return urlunsplit((ASYNC_SCHEME, parts.netloc, parts.path, urlencode(query_pairs), parts.fragment))


def normalize_database_url(database_url: str) -> str:
    """
    Point Supabase pooler URLs at the session pooler

    The transaction pooler does not support prepared statements, which asyncpg uses.
    """
    if not database_url:
        return database_url

    if f":{TRANSACTION_POOLER_PORT}" in database_url:
        print(f"Switching from transaction pooler ({TRANSACTION_POOLER_PORT}) to session pooler ({SESSION_POOLER_PORT})")
        return database_url.replace(f":{TRANSACTION_POOLER_PORT}", f":{SESSION_POOLER_PORT}")

    if ".pooler.supabase.com" in database_url and f":{SESSION_POOLER_PORT}" not in database_url:
        print(f"Adding session pooler port ({SESSION_POOLER_PORT}) to pooler host")
        return database_url.replace(".pooler.supabase.com", f".pooler.supabase.com:{SESSION_POOLER_PORT}")

    return database_url


def requires_ssl(database_url: str, sslmode: Optional[str] = None) -> bool:
    """True when either the URL or SUPABASE_SSLMODE asks for sslmode=require"""
    return "sslmode=require" in (database_url or "").lower() or sslmode == "require"


def prepare_database_url(database_url: str, sslmode: Optional[str] = None) -> Tuple[str, bool]:
    """
    Normalize a configured URL for the async engine

    Returns:
        (async URL, whether SSL must be enabled)
    """
    normalized = normalize_database_url(database_url)
    return build_async_url(normalized), requires_ssl(normalized, sslmode)
