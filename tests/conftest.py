"""
Pytest configuration and shared fixtures for keyword learning tests.

Provides:
- In-memory test database engine and session
- LearningStore over the test session
- Preloaded file type definitions
- Temporary directories
"""

import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from keyword_learning.database.connection import configure_sqlite_engine
from keyword_learning.database.models import Base
from keyword_learning.database.repositories import LearningStore
from keyword_learning.learning import KeywordLearner, LearningEventLog
from tests.fixtures.test_data import SAMPLE_DEFINITIONS


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def test_db_engine():
    """Create a fresh in-memory SQLite database engine for each test."""
    engine = configure_sqlite_engine(create_engine("sqlite:///:memory:", echo=False))
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine) -> Generator[Session, None, None]:
    """
    Provide a database session for testing.

    Each test gets a clean session that rolls back after completion.
    """
    SessionLocal = sessionmaker(bind=test_db_engine, expire_on_commit=False)
    session = SessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def store(test_db_session: Session) -> LearningStore:
    """Empty learning store over the test session."""
    return LearningStore.from_session(test_db_session)


@pytest.fixture(scope="function")
def preloaded_store(store: LearningStore) -> LearningStore:
    """Learning store preloaded with sample file type definitions."""
    for data in SAMPLE_DEFINITIONS:
        store.definitions.create(**data)

    store.session.commit()
    return store


@pytest.fixture(scope="function")
def learner(preloaded_store: LearningStore) -> KeywordLearner:
    """Keyword learner with default thresholds."""
    return KeywordLearner(preloaded_store)


@pytest.fixture(scope="function")
def event_log(preloaded_store: LearningStore) -> LearningEventLog:
    """Learning event log over the preloaded store."""
    return LearningEventLog(preloaded_store)


# ============================================================================
# TEMPORARY DIRECTORY FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test file operations."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)
