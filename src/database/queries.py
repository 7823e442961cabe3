"""
Database query utilities with retry logic
"""
import asyncio
from typing import Any
from sqlalchemy.ext.asyncio import AsyncSession


POOL_ERROR_MARKERS = ("maxclientsinsessionmode", "max clients reached", "connection pool")
CONNECTION_ERROR_MARKERS = ("closed", "lost", "reset")


def classify_error(error: BaseException) -> str:
    """
    Sort a database error into a retry category

    Returns:
        "pool", "connection", "timeout" or "fatal"
    """
    error_str = str(error).lower()
    error_type = type(error).__name__

    if any(marker in error_str for marker in POOL_ERROR_MARKERS):
        return "pool"
    if "connection" in error_str and any(marker in error_str for marker in CONNECTION_ERROR_MARKERS):
        return "connection"
    if error_type in ("TimeoutError", "CancelledError") or "timeout" in error_str:
        return "timeout"
    return "fatal"


async def execute_with_retry(
    session: AsyncSession,
    query: Any,
    max_retries: int = 3,
    initial_delay: float = 0.5
) -> Any:
    """
    Execute query with retry logic for transient database errors

    Args:
        session: Database session
        query: SQLAlchemy query object
        max_retries: Maximum number of attempts
        initial_delay: Initial delay between retries (exponential backoff)

    Returns:
        Query result

    Raises:
        The last database error once retries are exhausted, or immediately for
        errors that are not transient (syntax errors, constraint violations, ...)
    """
    for attempt in range(max_retries):
        try:
            return await session.execute(query)
        except Exception as e:
            category = classify_error(e)
            error_type = type(e).__name__
            print(f"Database error on attempt {attempt + 1}/{max_retries}: {error_type}: {str(e)[:200]}")

            if category == "fatal":
                print(f"Non-retryable error: {error_type}")
                raise

            if attempt == max_retries - 1:
                print(f"Max retries reached, failing with: {error_type}")
                raise

            # 0.5s, 1s, 2s; timeouts wait twice as long
            delay = initial_delay * (2 ** attempt)
            if category == "timeout":
                delay *= 2
            print(f"Retrying after {delay}s ({category} error)...")
            await asyncio.sleep(delay)

    raise RuntimeError("execute_with_retry called with max_retries < 1")
