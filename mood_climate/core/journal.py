"""
Bounded mood journal.

Entries are kept newest-first and capped at MAX_JOURNAL_ENTRIES; every
append is written through to the configured state store immediately.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from mood_climate.core.models import Coordinates, MoodEntry

logger = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

MAX_JOURNAL_ENTRIES = 50

MOOD_OPTIONS: List[str] = ['joyful', 'content', 'neutral', 'anxious', 'sad', 'angry']
DEFAULT_INTENSITY = 50
MIN_INTENSITY = 1
MAX_INTENSITY = 100


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_entry_id() -> str:
    return uuid.uuid4().hex


# ============================================================================
# JOURNAL
# ============================================================================

class MoodJournal:
    """Append-only, size-capped log of mood reports."""

    def __init__(self,
                 store,
                 max_entries: int = MAX_JOURNAL_ENTRIES,
                 clock: Callable[[], datetime] = utc_now,
                 id_factory: Callable[[], str] = new_entry_id):
        """
        Args:
            store: State store exposing load_entries()/save_entries().
            max_entries: Cap applied after every append.
            clock: Timestamp source for new entries.
            id_factory: Unique id source for new entries.
        """
        self.store = store
        self.max_entries = max_entries
        self._clock = clock
        self._id_factory = id_factory
        self._entries: Tuple[MoodEntry, ...] = ()

    @property
    def entries(self) -> Tuple[MoodEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def load(self) -> Tuple[MoodEntry, ...]:
        """
        Restores the persisted log, newest-first.

        Malformed records are skipped. An unreadable store leaves the
        journal empty.
        """
        try:
            raw_entries = self.store.load_entries()
        except Exception as e:
            logger.error(f"Failed to load mood journal: {e}. Starting empty.")
            self._entries = ()
            return self._entries

        entries: List[MoodEntry] = []
        for raw in raw_entries:
            try:
                entries.append(MoodEntry.from_dict(raw))
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping malformed mood entry {raw!r}: {e}")

        self._entries = tuple(entries[:self.max_entries])
        logger.info(f"[OK] Loaded {len(self._entries)} mood entries")
        return self._entries

    def append(self,
               mood: str,
               intensity: int,
               location: str,
               coordinates: Optional[Coordinates] = None) -> Tuple[MoodEntry, ...]:
        """
        Prepends a new report, evicts past the cap and persists.

        The journal stores what it is given; range checks belong to the
        submission handler.

        Returns:
            The new journal state.

        Raises:
            StorageError: If persisting fails. The in-memory state already
                holds the new entry and is not rolled back.
        """
        entry = MoodEntry(
            id=self._id_factory(),
            mood=mood,
            intensity=intensity,
            timestamp=self._clock(),
            location=location,
            coordinates=coordinates,
        )
        self._entries = ((entry,) + self._entries)[:self.max_entries]
        logger.info(f"Mood logged: {mood} ({intensity}) @ {location}")

        self.store.save_entries([e.to_dict() for e in self._entries])
        return self._entries
