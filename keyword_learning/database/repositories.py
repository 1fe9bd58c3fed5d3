"""
Repositories over the keyword learning store.

Each repository is bound to one SQLAlchemy session. LearningStore bundles
the three over a shared session so that a definition patch and the
learning events that justify it commit together or not at all.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Generator, Iterable, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import (
    FilingCorrection,
    FileTypeDefinition,
    LearnedKeyword,
    LearningEvent,
    KeywordSource,
    KEYWORD_LEARNED_EVENT,
    utcnow,
)

logger = logging.getLogger(__name__)


# ============================================================================
# CORRECTIONS
# ============================================================================

class CorrectionRepository:
    """Read access to filing corrections, plus capture of new ones."""

    def __init__(self, session: Session):
        self.session = session

    def record_correction(
        self,
        predicted_type: str,
        corrected_type: Optional[str],
        document_keywords: Sequence[str] = (),
        file_name: Optional[str] = None,
        corrected_by: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> FilingCorrection:
        """
        Insert a correction captured from the review flow.

        Args:
            predicted_type: File type the classifier guessed
            corrected_type: File type the user chose (None if only confirmed)
            document_keywords: Key terms extracted from the document
            file_name: Source file name (optional)
            corrected_by: User who made the correction (optional)
            created_at: Capture time (defaults to now)

        Returns:
            Created FilingCorrection instance
        """
        correction = FilingCorrection(
            predicted_type=predicted_type,
            corrected_type=corrected_type,
            document_keywords=[str(k) for k in document_keywords],
            file_name=file_name,
            corrected_by=corrected_by,
            created_at=created_at or utcnow(),
        )
        self.session.add(correction)
        self.session.flush()
        return correction

    def get(self, correction_id: int) -> Optional[FilingCorrection]:
        return self.session.get(FilingCorrection, correction_id)

    def list_all(self) -> List[FilingCorrection]:
        """All corrections in creation order."""
        stmt = select(FilingCorrection).order_by(FilingCorrection.created_at, FilingCorrection.id)
        return list(self.session.execute(stmt).scalars().all())

    def list_for_corrected_type(self, corrected_type: str) -> List[FilingCorrection]:
        """Corrections whose user-chosen type is corrected_type, in creation order."""
        stmt = (
            select(FilingCorrection)
            .where(FilingCorrection.corrected_type == corrected_type)
            .order_by(FilingCorrection.created_at, FilingCorrection.id)
        )
        return list(self.session.execute(stmt).scalars().all())

    def distinct_corrected_types(self) -> List[str]:
        """Every corrected type seen in history, in order of first appearance."""
        stmt = (
            select(FilingCorrection.corrected_type)
            .where(FilingCorrection.corrected_type.is_not(None))
            .order_by(FilingCorrection.created_at, FilingCorrection.id)
        )
        seen: dict[str, None] = {}
        for corrected_type in self.session.execute(stmt).scalars():
            if corrected_type:
                seen.setdefault(corrected_type, None)
        return list(seen)


# ============================================================================
# FILE TYPE DEFINITIONS
# ============================================================================

class TypeDefinitionRepository:
    """Reads file type definitions and patches their learned keyword ledger."""

    def __init__(self, session: Session):
        self.session = session

    def create(
        self,
        file_type: str,
        keywords: Iterable[str] = (),
        category: str = "Uncategorized",
        description: str = "",
    ) -> FileTypeDefinition:
        """
        Insert a file type definition.

        Raises:
            IntegrityError: If file_type already exists (on flush)
        """
        definition = FileTypeDefinition(
            file_type=file_type,
            keywords=list(keywords),
            category=category,
            description=description,
        )
        self.session.add(definition)
        self.session.flush()
        return definition

    def get(self, definition_id: int) -> Optional[FileTypeDefinition]:
        return self.session.get(FileTypeDefinition, definition_id)

    def get_by_file_type(self, file_type: str) -> Optional[FileTypeDefinition]:
        return self.session.execute(
            select(FileTypeDefinition).where(FileTypeDefinition.file_type == file_type)
        ).scalar_one_or_none()

    def append_learned_keywords(
        self,
        definition: FileTypeDefinition,
        keywords: Sequence[str],
        correction_count: int,
        learned_at: datetime,
        source: KeywordSource = KeywordSource.CORRECTION,
    ) -> List[LearnedKeyword]:
        """
        Append keywords to the ledger and stamp last_learned_at/updated_at.

        Keywords must already be normalized and absent from the definition.
        """
        added = [
            LearnedKeyword(
                keyword=keyword,
                source=source,
                added_at=learned_at,
                correction_count=correction_count,
            )
            for keyword in keywords
        ]
        definition.learned_keywords.extend(added)
        definition.last_learned_at = learned_at
        definition.updated_at = learned_at
        self.session.flush()
        return added

    def remove_learned_keyword(
        self,
        definition: FileTypeDefinition,
        keyword: str,
        removed_at: datetime,
    ) -> bool:
        """
        Strip a keyword (case-insensitive) from the ledger.

        Returns:
            True if an entry was removed, False if it was already absent
        """
        target = keyword.strip().lower()
        remaining = [lk for lk in definition.learned_keywords if lk.keyword.strip().lower() != target]
        if len(remaining) == len(definition.learned_keywords):
            return False

        definition.learned_keywords = remaining
        definition.updated_at = removed_at
        self.session.flush()
        return True


# ============================================================================
# LEARNING EVENTS
# ============================================================================

class LearningEventRepository:
    """Append-only access to learning events."""

    def __init__(self, session: Session):
        self.session = session

    def record(
        self,
        definition: FileTypeDefinition,
        keyword: str,
        correction_count: int,
        source_corrections: Sequence[int],
        created_at: datetime,
    ) -> LearningEvent:
        learning_event = LearningEvent(
            event_type=KEYWORD_LEARNED_EVENT,
            file_type_id=definition.id,
            file_type=definition.file_type,
            keyword=keyword,
            correction_count=correction_count,
            source_corrections=list(source_corrections),
            created_at=created_at,
            dismissed=False,
        )
        self.session.add(learning_event)
        self.session.flush()
        return learning_event

    def get(self, event_id: int) -> Optional[LearningEvent]:
        return self.session.get(LearningEvent, event_id)

    def list_recent(self, limit: int) -> List[LearningEvent]:
        """Newest events first, dismissed included."""
        stmt = (
            select(LearningEvent)
            .order_by(LearningEvent.created_at.desc(), LearningEvent.id.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars().all())

    def list_all(self) -> List[LearningEvent]:
        return list(self.session.execute(select(LearningEvent)).scalars().all())

    def list_undismissed(self) -> List[LearningEvent]:
        stmt = select(LearningEvent).where(LearningEvent.dismissed.is_(False))
        return list(self.session.execute(stmt).scalars().all())

    def mark_dismissed(self, learning_event: LearningEvent) -> bool:
        """
        Flag an event as dismissed.

        Returns:
            True if the flag changed, False if it was already set
        """
        if learning_event.dismissed:
            return False
        learning_event.dismissed = True
        self.session.flush()
        return True


# ============================================================================
# UNIT OF WORK
# ============================================================================

@dataclass
class LearningStore:
    """
    The three repositories over one shared session.

    transaction() is the atomicity contract: every definition patch and
    event insert made inside the block is kept together, or none are.
    The block runs in a SAVEPOINT, so a failure discards only its own
    writes. Committing the session stays with whoever opened it, such as
    DatabaseManager.session_scope().
    """

    session: Session
    corrections: CorrectionRepository
    definitions: TypeDefinitionRepository
    events: LearningEventRepository

    @classmethod
    def from_session(cls, session: Session) -> "LearningStore":
        return cls(
            session=session,
            corrections=CorrectionRepository(session),
            definitions=TypeDefinitionRepository(session),
            events=LearningEventRepository(session),
        )

    @contextmanager
    def transaction(self) -> Generator["LearningStore", None, None]:
        """Release the savepoint on success, roll it back and re-raise on failure."""
        try:
            with self.session.begin_nested():
                yield self
        except Exception as e:
            logger.error(f"Learning store changes rolled back: {e}")
            raise
