"""
SQLAlchemy ORM models for the file type keyword learning store.

This module defines the database schema including:
- Filing corrections (user overrides of AI file type predictions)
- File type definitions (curated classification vocabulary)
- Learned keywords (machine-discovered vocabulary ledger)
- Learning events (append-only audit trail with dismiss/undo)
"""

from datetime import datetime, timezone
from typing import Optional
import enum
from sqlalchemy import (
    String,
    Integer,
    DateTime,
    Text,
    JSON,
    Boolean,
    Index,
    ForeignKey,
    CheckConstraint,
    UniqueConstraint,
    Enum,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


KEYWORD_LEARNED_EVENT = "keyword_learned"


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in every DateTime column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


class KeywordSource(enum.Enum):
    """Where a learned keyword came from."""
    CORRECTION = "correction"
    MANUAL = "manual"


class FilingCorrection(Base):
    """
    A user correction of an automated file type prediction.

    Created by the correction-capture flow and never mutated by the
    learning engine. Only corrections with a changed file type and at
    least one document keyword carry a learning signal.
    """
    __tablename__ = "filing_corrections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # What the classifier guessed vs. what the user chose
    predicted_type: Mapped[str] = mapped_column(String(200), nullable=False)
    corrected_type: Mapped[Optional[str]] = mapped_column(
        String(200),
        nullable=True,
        comment="NULL when the user only confirmed the prediction"
    )

    # Key terms extracted from the document at correction time
    document_keywords: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    # Capture context
    file_name: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    corrected_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_filing_corrections_corrected_type", "corrected_type"),
        Index("ix_filing_corrections_pattern", "predicted_type", "corrected_type"),
        Index("ix_filing_corrections_created_at", "created_at"),
    )

    @property
    def has_learning_signal(self) -> bool:
        """True if the correction changed the file type and carries keywords."""
        return (
            bool(self.corrected_type)
            and self.corrected_type != self.predicted_type
            and bool(self.document_keywords)
        )

    def __repr__(self) -> str:
        return (
            f"<FilingCorrection(id={self.id}, "
            f"'{self.predicted_type}' -> '{self.corrected_type}')>"
        )


class FileTypeDefinition(Base):
    """
    Classification definition for one file type.

    The explicit keyword list is human-curated. The learning engine only
    appends to the learned keyword ledger and stamps last_learned_at.
    """
    __tablename__ = "file_type_definitions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    file_type: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    category: Mapped[str] = mapped_column(String(200), nullable=False, default="Uncategorized")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Human-curated vocabulary
    keywords: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    last_learned_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Relationships
    learned_keywords: Mapped[list["LearnedKeyword"]] = relationship(
        back_populates="definition",
        cascade="all, delete-orphan",
        order_by="LearnedKeyword.id",
    )
    learning_events: Mapped[list["LearningEvent"]] = relationship(back_populates="definition")

    def known_keywords(self) -> set[str]:
        """Normalized (trimmed, lower-cased) union of explicit and learned keywords."""
        known = {k.strip().lower() for k in (self.keywords or [])}
        known.update(lk.keyword.strip().lower() for lk in self.learned_keywords)
        known.discard("")
        return known

    def all_keywords(self) -> list[str]:
        """Explicit keywords followed by learned ones, without normalized duplicates."""
        combined: list[str] = []
        seen: set[str] = set()
        for keyword in [*(self.keywords or []), *(lk.keyword for lk in self.learned_keywords)]:
            normalized = keyword.strip().lower()
            if normalized and normalized not in seen:
                seen.add(normalized)
                combined.append(keyword)
        return combined

    def __repr__(self) -> str:
        return f"<FileTypeDefinition(id={self.id}, file_type='{self.file_type}')>"


class LearnedKeyword(Base):
    """
    One machine-discovered keyword in a definition's ledger.

    correction_count is the size of the correction group that justified
    the keyword when it was learned, and is never updated afterwards.
    """
    __tablename__ = "learned_keywords"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    file_type_definition_id: Mapped[int] = mapped_column(
        ForeignKey("file_type_definitions.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Stored normalized (lowercase, trimmed)
    keyword: Mapped[str] = mapped_column(String(200), nullable=False)
    source: Mapped[KeywordSource] = mapped_column(
        Enum(KeywordSource),
        nullable=False,
        default=KeywordSource.CORRECTION
    )
    added_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    correction_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    definition: Mapped["FileTypeDefinition"] = relationship(back_populates="learned_keywords")

    __table_args__ = (
        UniqueConstraint("file_type_definition_id", "keyword", name="uq_learned_keyword_per_type"),
        CheckConstraint("length(keyword) > 0", name="ck_learned_keyword_nonempty"),
    )

    def __repr__(self) -> str:
        return f"<LearnedKeyword(id={self.id}, keyword='{self.keyword}', source={self.source.value})>"


class LearningEvent(Base):
    """
    Audit record for one learned keyword.

    Append-only: events are created once by the learner and only ever
    transition to dismissed=True (by dismissal or undo). Never deleted.
    """
    __tablename__ = "learning_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    event_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=KEYWORD_LEARNED_EVENT
    )

    file_type_id: Mapped[int] = mapped_column(
        ForeignKey("file_type_definitions.id"),
        nullable=False,
        index=True
    )
    # Denormalized for display
    file_type: Mapped[str] = mapped_column(String(200), nullable=False)

    keyword: Mapped[str] = mapped_column(String(200), nullable=False)
    correction_count: Mapped[int] = mapped_column(Integer, nullable=False)

    # Provenance: ordered correction ids of the justifying group
    source_corrections: Mapped[list] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Array of filing_corrections.id"
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    dismissed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    definition: Mapped["FileTypeDefinition"] = relationship(back_populates="learning_events")

    __table_args__ = (
        Index("ix_learning_events_created_at", "created_at"),
        Index("ix_learning_events_dismissed", "dismissed"),
        CheckConstraint("correction_count >= 0", name="ck_learning_event_count"),
    )

    def __repr__(self) -> str:
        return (
            f"<LearningEvent(id={self.id}, file_type='{self.file_type}', "
            f"keyword='{self.keyword}', dismissed={self.dismissed})>"
        )
