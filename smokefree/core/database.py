"""
Database configuration and session management for SQLAlchemy.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from smokefree.core.config import DATABASE_URL

# SQLite needs cross-thread access for FastAPI's threadpool
engine_args = {}
if DATABASE_URL.startswith("sqlite"):
    engine_args["connect_args"] = {"check_same_thread": False}

# Engine & Session
engine = create_engine(DATABASE_URL, **engine_args)
SessionLocal = sessionmaker(
    autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
)

# Declarative Base
Base = declarative_base()

# Import all models to register them with the Base metadata
import smokefree.auth.models  # noqa: F401, E402
import smokefree.profile.models  # noqa: F401, E402
import smokefree.quit_plans.models  # noqa: F401, E402
import smokefree.cravings.models  # noqa: F401, E402
import smokefree.milestones.models  # noqa: F401, E402
import smokefree.chat.models  # noqa: F401, E402


# Dependency for FastAPI Routes
def get_db():
    """
    Yields a database session for use in FastAPI dependency injection.
    Ensures the session is closed after the request lifecycle.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
