"""
Database initialization script.
Creates all tables and optionally seeds the first admin account.
"""

from sqlalchemy import inspect
from claryon.core.config import settings
from claryon.core.database import engine, Base, SessionLocal
from claryon.core.auth import AuthUtils
from claryon.models import Admin
import logging

logger = logging.getLogger(__name__)


def init_db():
    """
    Initialize the database by creating all tables.
    """
    if engine is None:
        raise RuntimeError("DATABASE_URL is not set; cannot create tables")

    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully!")


def seed_initial_admin(db=None) -> bool:
    """
    Create the first admin from ADMIN_USERNAME / ADMIN_EMAIL / ADMIN_PASSWORD.

    Does nothing when an admin already exists or no password is configured.
    Returns True when an account was created.
    """
    owns_session = db is None
    db = db or SessionLocal()

    try:
        existing_admins = db.query(Admin).count()
        if existing_admins:
            logger.info(f"Database already has {existing_admins} admin(s). Skipping seed data.")
            return False

        if not settings.admin_password:
            logger.warning("No admins found and ADMIN_PASSWORD is not set; skipping admin seed")
            return False

        db.add(Admin(
            username=settings.admin_username,
            email=settings.admin_email,
            name="Site Administrator",
            hashed_password=AuthUtils.hash_password(settings.admin_password),
            is_active=True
        ))
        db.commit()
        logger.info(f"Default admin '{settings.admin_username}' created")
        return True

    except Exception as e:
        logger.error(f"Error seeding initial data: {e}")
        db.rollback()
        raise
    finally:
        if owns_session:
            db.close()


def check_tables():
    """
    Check which tables exist in the database.
    """
    if engine is None:
        raise RuntimeError("DATABASE_URL is not set; cannot inspect tables")

    inspector = inspect(engine)
    tables = inspector.get_table_names()

    logger.info("Existing tables in database:")
    for table in tables:
        logger.info(f"  - {table}")

    return tables


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    logger.info("=" * 50)
    logger.info("Database Initialization Script")
    logger.info("=" * 50)

    check_tables()
    init_db()
    seed_initial_admin()
    check_tables()

    logger.info("=" * 50)
    logger.info("Database initialization complete!")
    logger.info("=" * 50)
