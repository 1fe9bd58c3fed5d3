"""
Learning event log: listing, statistics, dismiss and undo.

Events are never deleted. Dismissal hides an event while keeping its
keyword; undo strips the keyword from the definition and dismisses the
event in the same transaction.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from ..database.models import LearningEvent, utcnow
from ..database.repositories import LearningStore
from ..utils.config_manager import ConfigManager
from .results import LearningEventView, LearningStats, UndoResult

logger = logging.getLogger(__name__)


class LearningEventNotFoundError(LookupError):
    """Raised when a learning event id does not exist."""


class FileTypeDefinitionNotFoundError(LookupError):
    """Raised when an event's owning definition no longer exists."""


class LearningEventLog:
    """Queries and state transitions over learning events."""

    def __init__(
        self,
        store: LearningStore,
        recent_scan_limit: int = 100,
        week_days: int = 7,
        month_days: int = 30,
    ):
        """
        Args:
            store: Repositories sharing one session
            recent_scan_limit: Newest events scanned before filtering dismissed ones
            week_days: Window for the "this week" count
            month_days: Window for the "this month" count
        """
        self.store = store
        self.recent_scan_limit = recent_scan_limit
        self.week_days = week_days
        self.month_days = month_days

    @classmethod
    def from_config(cls, store: LearningStore, config: ConfigManager) -> "LearningEventLog":
        return cls(
            store,
            recent_scan_limit=config.get_events_param('recent_scan_limit'),
            week_days=config.get_events_param('week_days'),
            month_days=config.get_events_param('month_days'),
        )

    def get_recent_events(self, limit: int = 20, include_dismissed: bool = False) -> list[LearningEventView]:
        """
        Most recent events first, enriched with file type details.

        Only the newest recent_scan_limit events are considered, so with
        many dismissed events fewer than limit may be returned.
        """
        events = self.store.events.list_recent(max(limit, self.recent_scan_limit))
        if not include_dismissed:
            events = [e for e in events if not e.dismissed]

        return [self._to_view(e) for e in events[:limit]]

    def get_stats(self, now: Optional[datetime] = None) -> LearningStats:
        """
        Aggregate counts over the whole log.

        Dismissed events still count as learned. The contributed-corrections
        figure counts each correction once, however many keywords it backed.
        """
        now = now or utcnow()
        week_ago = now - timedelta(days=self.week_days)
        month_ago = now - timedelta(days=self.month_days)

        events = self.store.events.list_all()

        contributing: set[int] = set()
        for e in events:
            contributing.update(e.source_corrections or [])

        types_with_learning = {
            e.file_type_id for e in events
            if e.definition is not None and e.definition.learned_keywords
        }

        return LearningStats(
            total_learned=len(events),
            this_week=sum(1 for e in events if e.created_at >= week_ago),
            this_month=sum(1 for e in events if e.created_at >= month_ago),
            types_with_learning=len(types_with_learning),
            total_corrections_contributed=len(contributing),
        )

    def dismiss(self, event_id: int) -> bool:
        """
        Hide an event without touching its keyword. Idempotent.

        Returns:
            True (the event is dismissed after the call)

        Raises:
            LearningEventNotFoundError: If the event does not exist
        """
        learning_event = self._get_event(event_id)

        with self.store.transaction() as store:
            changed = store.events.mark_dismissed(learning_event)

        if changed:
            logger.info(f"Dismissed learning event {event_id} ('{learning_event.keyword}')")
        return True

    def dismiss_all(self) -> int:
        """
        Dismiss every event not yet dismissed.

        Returns:
            Number of events newly dismissed
        """
        with self.store.transaction() as store:
            pending = store.events.list_undismissed()
            for learning_event in pending:
                store.events.mark_dismissed(learning_event)

        logger.info(f"Dismissed {len(pending)} learning events")
        return len(pending)

    def undo(self, event_id: int) -> UndoResult:
        """
        Revert a learned keyword and dismiss its event.

        Undoing an already-undone event leaves the ledger unchanged and the
        event dismissed, and does not raise.

        Raises:
            LearningEventNotFoundError: If the event does not exist
            FileTypeDefinitionNotFoundError: If the owning definition is gone
        """
        learning_event = self._get_event(event_id)

        definition = self.store.definitions.get(learning_event.file_type_id)
        if definition is None:
            raise FileTypeDefinitionNotFoundError(
                f"File type definition {learning_event.file_type_id} not found"
            )

        with self.store.transaction() as store:
            removed = store.definitions.remove_learned_keyword(
                definition, learning_event.keyword, removed_at=utcnow(),
            )
            store.events.mark_dismissed(learning_event)

        if removed:
            logger.info(f"Undid learned keyword '{learning_event.keyword}' for '{learning_event.file_type}'")
        else:
            logger.info(
                f"Keyword '{learning_event.keyword}' already absent from '{learning_event.file_type}', "
                f"event {event_id} dismissed"
            )

        return UndoResult(
            success=True,
            keyword=learning_event.keyword,
            file_type=learning_event.file_type,
            keyword_removed=removed,
        )

    def _get_event(self, event_id: int) -> LearningEvent:
        learning_event = self.store.events.get(event_id)
        if learning_event is None:
            raise LearningEventNotFoundError(f"Learning event {event_id} not found")
        return learning_event

    def _to_view(self, learning_event: LearningEvent) -> LearningEventView:
        definition = learning_event.definition
        return LearningEventView(
            id=learning_event.id,
            event_type=learning_event.event_type,
            file_type_id=learning_event.file_type_id,
            file_type=learning_event.file_type,
            keyword=learning_event.keyword,
            correction_count=learning_event.correction_count,
            source_corrections=list(learning_event.source_corrections or []),
            created_at=learning_event.created_at,
            dismissed=learning_event.dismissed,
            file_type_category=definition.category if definition else None,
            file_type_description=definition.description if definition else None,
        )
