# File: database.py
# Path: claryon/core/database.py

import logging

from fastapi import HTTPException, status
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from claryon.core.config import settings

logger = logging.getLogger(__name__)

# Shared declarative base for all models
Base = declarative_base()


def _engine_options(url: str) -> dict:
    """Pool and driver options for the configured backend."""
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live on a single connection
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_recycle": 300,     # Hosted Postgres drops idle connections
        "pool_timeout": 20,
        "connect_args": {
            "options": "-c timezone=utc",
            "connect_timeout": 5,
            "application_name": "ClaryonSiteBackend",
        } if "postgresql" in url else {},
    }


# No engine without DATABASE_URL; requests that need the store fail with a 500
engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.database_echo,
    **_engine_options(settings.DATABASE_URL),
) if settings.DATABASE_URL else None

if engine is None:
    logger.error("DATABASE_URL is not set; database access is disabled")

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False
)


def get_db():
    """
    Dependency function for FastAPI endpoints.
    Creates a new database session for each request.
    """
    if engine is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database is not configured. Set DATABASE_URL."
        )

    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_optional_db():
    """
    Like get_db, but yields None when no database is configured so the
    caller can report the missing store itself.
    """
    if engine is None:
        yield None
        return

    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def check_database_connection() -> bool:
    """
    Test database connection health.
    Returns True if connection is successful, False otherwise.
    """
    if engine is None:
        logger.error("Database connection test skipped: DATABASE_URL is not set")
        return False

    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        logger.info("Database connection test successful")
        return True
    except Exception as e:
        logger.error(f"Database connection test failed: {str(e)}")
        return False
    finally:
        db.close()
