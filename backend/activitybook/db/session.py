"""
Database session management.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from activitybook.core.config import settings
from activitybook.core.keys import PrimaryKeyAllocator
from activitybook.db.base import Base

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    pool_pre_ping=True,
    connect_args=connect_args
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Source of primary keys for activities created through the API
primary_keys = PrimaryKeyAllocator()


def get_db() -> Session:
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_primary_keys() -> PrimaryKeyAllocator:
    """Dependency for the activity primary-key allocator."""
    return primary_keys


def init_db():
    """Initialize database tables and restore the primary-key counter."""
    import activitybook.models  # noqa: F401  registers tables on Base
    from activitybook.services.activity_service import restore_primary_key_counter

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        restore_primary_key_counter(db, primary_keys)
    finally:
        db.close()
