"""
Database connection and session management for the keyword learning store.

The manager owns one engine and a session factory. Callers open a session
with session_scope() and pass it to LearningStore.from_session(), which
holds the repositories the learning components use.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from .models import Base


# Default database path (relative to project root)
DEFAULT_DB_PATH = "data/keyword_learning.db"


def configure_sqlite_engine(engine: Engine) -> Engine:
    """
    Enable foreign keys and working SAVEPOINTs on a SQLite engine.

    pysqlite defers BEGIN to the first write, which breaks nested
    transactions. The driver is put in autocommit mode and BEGIN is
    emitted when SQLAlchemy starts a transaction.
    """

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


class DatabaseManager:
    """Engine and session factory for one SQLite database."""

    def __init__(self, db_path: Optional[str] = None, echo: bool = False):
        """
        Initialize database manager.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
            echo: If True, SQL statements will be logged
        """
        self.db_path = db_path or DEFAULT_DB_PATH
        self.echo = echo

        engine_kwargs = dict(echo=self.echo, connect_args={"check_same_thread": False})

        # In-memory databases need a single shared connection or the schema is lost
        if self.db_path == ":memory:":
            engine_kwargs["poolclass"] = StaticPool
        else:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            engine_kwargs["pool_pre_ping"] = True

        self.database_url = f"sqlite:///{self.db_path}"
        self.engine = configure_sqlite_engine(create_engine(self.database_url, **engine_kwargs))

        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    def create_all_tables(self) -> None:
        """Create all tables defined in models."""
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope with automatic commit/rollback.

        Usage:
            with db_manager.session_scope() as session:
                learner = KeywordLearner(LearningStore.from_session(session))
                learner.learn_for_type("RedBook Valuation")

        Yields:
            SQLAlchemy Session within a transaction context
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self) -> None:
        """Close all connections and dispose of the engine."""
        self.engine.dispose()


def create_test_db() -> DatabaseManager:
    """
    Create an in-memory database for testing.

    Returns:
        DatabaseManager instance with in-memory database
    """
    db = DatabaseManager(db_path=":memory:")
    db.create_all_tables()
    return db
