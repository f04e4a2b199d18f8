"""
Database Connection and Session Management

This module handles database connections, session management, and table
creation for the ARGO document store.
"""

from contextlib import contextmanager
from typing import Generator, Optional
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from .. import config
from .models import Base

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """Custom exception for database operations"""
    pass


class DatabaseManager:
    """Manages database connections and operations"""

    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url or config.get_database_url()
        self.engine = None
        self.SessionLocal = None
        self._initialize_connection()

    def _engine_options(self) -> dict:
        if self.database_url.startswith('sqlite'):
            # A single shared connection keeps in-memory databases alive
            return {
                'poolclass': StaticPool,
                'connect_args': {'check_same_thread': False},
            }
        return {
            'pool_size': 10,
            'max_overflow': 20,
            'pool_recycle': 3600,
            'pool_pre_ping': True,
        }

    def _initialize_connection(self):
        """Initialize database connection"""
        try:
            self.engine = create_engine(
                self.database_url,
                echo=config.SQL_ECHO,
                **self._engine_options()
            )

            # Create session factory
            self.SessionLocal = sessionmaker(
                autocommit=False,
                autoflush=False,
                bind=self.engine
            )

            logger.info(f"Database connection initialized for {self.engine.url.render_as_string(hide_password=True)}")

        except Exception as e:
            logger.error(f"Failed to initialize database connection: {str(e)}")
            raise

    def create_tables(self):
        """Create all database tables"""
        try:
            Base.metadata.create_all(bind=self.engine)
            logger.info("Database tables created successfully")
        except Exception as e:
            logger.error(f"Failed to create database tables: {str(e)}")
            raise

    def drop_tables(self):
        """Drop all database tables (use with caution!)"""
        try:
            Base.metadata.drop_all(bind=self.engine)
            logger.warning("All database tables dropped")
        except Exception as e:
            logger.error(f"Failed to drop database tables: {str(e)}")
            raise

    def get_session(self) -> Session:
        """Get a new database session"""
        if not self.SessionLocal:
            raise RuntimeError("Database connection not initialized")
        return self.SessionLocal()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Context manager for database sessions with automatic cleanup"""
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """Get the database manager for the configured database"""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager
