"""Database connection and session management."""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from models.task import Base
import logging

logger = logging.getLogger(__name__)


class DatabaseManager:
    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self.engine = None
        self.SessionLocal = None

    def initialize(self):
        """Initialize database connection and create tables."""
        url = make_url(self.database_url)
        is_sqlite = url.get_backend_name() == "sqlite"

        # Ensure database directory exists for file-backed SQLite
        if is_sqlite and url.database and url.database != ":memory:":
            db_dir = Path(url.database).parent
            db_dir.mkdir(parents=True, exist_ok=True)

        # Use StaticPool for SQLite to avoid connection issues
        connect_args = {"check_same_thread": False} if is_sqlite else {}
        poolclass = StaticPool if is_sqlite else None

        self.engine = create_engine(
            self.database_url,
            connect_args=connect_args,
            poolclass=poolclass,
            echo=self.echo
        )

        # Create all tables
        Base.metadata.create_all(bind=self.engine)

        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine
        )

        logger.info(f"Database initialized at {self.database_url}")

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session."""
        if not self.SessionLocal:
            self.initialize()

        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self):
        """Close database connection."""
        if self.engine:
            self.engine.dispose()
            logger.info("Database connection closed")


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency for FastAPI to get a session from the application's database."""
    with request.app.state.db_manager.get_session() as session:
        yield session
