"""
Database package for the file type keyword learning store.

This package provides:
- SQLAlchemy ORM models for corrections, definitions and learning events
- Connection and session management
- Repositories and the LearningStore transaction contract

Quick start:
    from keyword_learning.database import DatabaseManager, LearningStore

    db = DatabaseManager("data/keyword_learning.db")
    db.create_all_tables()

    with db.session_scope() as session:
        store = LearningStore.from_session(session)
        store.definitions.create("RedBook Valuation", keywords=["valuation report"])
"""

from .connection import (
    DatabaseManager,
    configure_sqlite_engine,
    create_test_db,
)

from .models import (
    Base,
    FilingCorrection,
    FileTypeDefinition,
    LearnedKeyword,
    LearningEvent,
    KeywordSource,
    KEYWORD_LEARNED_EVENT,
)

from .repositories import (
    CorrectionRepository,
    TypeDefinitionRepository,
    LearningEventRepository,
    LearningStore,
)


__all__ = [
    # Connection
    "DatabaseManager",
    "configure_sqlite_engine",
    "create_test_db",
    # Models
    "Base",
    "FilingCorrection",
    "FileTypeDefinition",
    "LearnedKeyword",
    "LearningEvent",
    "KeywordSource",
    "KEYWORD_LEARNED_EVENT",
    # Repositories
    "CorrectionRepository",
    "TypeDefinitionRepository",
    "LearningEventRepository",
    "LearningStore",
]
