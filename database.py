"""
SQLAlchemy database connection and session management.

This module provides:
- Engine configuration (SQLite by default, MS SQL Server via pymssql)
- Session factory for dependency injection
- The process-wide change feed used by live dashboard subscribers

Usage:
     from database import get_session, engine

     # In FastAPI routes:
     @app.get("/shops")
     def list_shops(db: Session = Depends(get_session)):
          return db.query(Shop).all()
     """
import logging
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

import config
from services.change_feed import ChangeFeed

logger = logging.getLogger(__name__)


def enable_sqlite_foreign_keys(target: Engine) -> None:
     """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""

     @event.listens_for(target, "connect")
     def _set_sqlite_pragma(dbapi_connection, connection_record):
          cursor = dbapi_connection.cursor()
          cursor.execute("PRAGMA foreign_keys=ON")
          cursor.close()


def create_app_engine(url: str = config.DATABASE_URL) -> Engine:
     """Create the engine for the configured backend."""
     if url.startswith("sqlite"):
          new_engine = create_engine(
               url,
               connect_args={"check_same_thread": False},
               echo=config.SQL_ECHO,
          )
          enable_sqlite_foreign_keys(new_engine)
          return new_engine

     return create_engine(
          url,
          poolclass=QueuePool,
          pool_size=5,
          max_overflow=10,
          pool_timeout=30,
          pool_recycle=1800,  # Recycle connections after 30 minutes
          pool_pre_ping=True,
          echo=config.SQL_ECHO,
     )


engine = create_app_engine()

# Session factory
SessionLocal = sessionmaker(
     bind=engine,
     autocommit=False,
     autoflush=False,
     expire_on_commit=False,
)

# Publishes committed table changes to live subscribers
change_feed = ChangeFeed(SessionLocal)


def get_session() -> Generator[Session, None, None]:
     """
     FastAPI dependency that provides a database session.

     Yields:
          Session: SQLAlchemy database session
     """
     session = SessionLocal()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


def get_change_feed() -> ChangeFeed:
     """FastAPI dependency returning the change feed bound to SessionLocal."""
     return change_feed


def init_db() -> None:
     """
     Initialize database tables.

     Creates all tables defined in the models if they don't exist.
     For production, use Alembic migrations instead.
     """
     from models import Base
     Base.metadata.create_all(bind=engine)


def check_connection() -> bool:
     """
     Test database connectivity.

     Returns:
          bool: True if connection successful, False otherwise
     """
     try:
          with engine.connect() as conn:
               conn.execute(text("SELECT 1"))
          return True
     except SQLAlchemyError as e:
          logger.error("Database connection failed: %s", e)
          return False
