"""
Database connection management
"""
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker

from src.config import settings
from src.utils.url_builder import prepare_database_url


# Global database objects
engine: Optional[AsyncEngine] = None
async_session: Optional[sessionmaker] = None


def init_database(database_url: Optional[str] = None) -> bool:
    """
    Initialize the async engine for the Supabase Postgres database

    Args:
        database_url: Overrides settings.DATABASE_URL when given

    Returns:
        True if initialization successful, False otherwise
    """
    global engine, async_session

    database_url = database_url if database_url is not None else settings.DATABASE_URL
    if not database_url:
        print("Warning: DATABASE_URL not set, assessments will be scored but not stored")
        return False

    try:
        async_database_url, ssl_required = prepare_database_url(database_url, settings.SUPABASE_SSLMODE)

        connect_args = {
            "server_settings": {
                "application_name": "asd_screening_backend",
                "tcp_keepalives_idle": "600",
                "tcp_keepalives_interval": "30",
                "tcp_keepalives_count": "3",
            },
            "command_timeout": 60,
            "timeout": 20,
        }

        if ssl_required:
            # Supabase pooler only needs SSL on, not certificate verification
            connect_args["ssl"] = True

        engine = create_async_engine(
            async_database_url,
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
            pool_recycle=3600,
            pool_timeout=30,
            connect_args=connect_args,
            echo=False,
        )

        async_session = sessionmaker(
            bind=engine,
            expire_on_commit=False,
            class_=AsyncSession
        )

        print("Database engine initialized successfully")
        return True

    except Exception as e:
        print(f"Warning: Failed to initialize database engine: {e}")
        import traceback
        traceback.print_exc()
        engine = None
        async_session = None
        return False


async def dispose_database() -> None:
    """Close pooled connections on shutdown"""
    global engine, async_session
    if engine is not None:
        await engine.dispose()
        print("Database engine disposed")
    engine = None
    async_session = None


def get_session() -> Optional[sessionmaker]:
    """
    Get database session maker

    Returns:
        Session maker or None if not initialized
    """
    return async_session


def is_initialized() -> bool:
    return engine is not None and async_session is not None


def require_session_maker() -> sessionmaker:
    """
    Get database session maker for a request handler

    Raises:
        HTTPException: 503 if the database is not configured
    """
    if not is_initialized():
        raise HTTPException(status_code=503, detail="Database not configured")
    return async_session
