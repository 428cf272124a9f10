"""
Transcription history kept on the client side.

``HistoryStore`` holds up to ``limit`` past transcriptions, most recent
first, and persists the whole collection through a ``HistoryRepository``
after every mutation. The app uses ``JsonFileHistoryRepository`` (a single
JSON record on disk); tests use ``InMemoryHistoryRepository``.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from src.core.models import FileHistoryEntry

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 10

_entries_adapter = TypeAdapter(list[FileHistoryEntry])

# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


class HistoryRepository(ABC):
    """Loads and saves the full history collection."""

    @abstractmethod
    def load(self) -> list[FileHistoryEntry]:
        """Return the persisted entries (empty list when nothing is stored)."""

    @abstractmethod
    def save(self, entries: list[FileHistoryEntry]) -> None:
        """Overwrite the persisted collection with ``entries``."""


class InMemoryHistoryRepository(HistoryRepository):
    """Keeps the collection in process memory."""

    def __init__(self, entries: list[FileHistoryEntry] | None = None) -> None:
        self.saved: list[FileHistoryEntry] = list(entries or [])
        self.save_count = 0

    def load(self) -> list[FileHistoryEntry]:
        return list(self.saved)

    def save(self, entries: list[FileHistoryEntry]) -> None:
        self.saved = list(entries)
        self.save_count += 1


class JsonFileHistoryRepository(HistoryRepository):
    """Stores the collection as one JSON array in ``path``.

    A missing file means an empty history. An unreadable or malformed file
    is logged and treated as empty; the next save overwrites it.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[FileHistoryEntry]:
        if not self._path.exists():
            return []
        try:
            return _entries_adapter.validate_json(self._path.read_bytes())
        except (OSError, PydanticValidationError) as exc:
            logger.warning("Ignoring unreadable history file %s: %s", self._path, exc)
            return []

    def save(self, entries: list[FileHistoryEntry]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = [entry.model_dump() for entry in entries]
        self._path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class ListingStatus(StrEnum):
    """Outcome of a history listing."""

    ok = "ok"
    empty = "empty"  # no files yet
    no_matches = "no_matches"  # files exist, none match the filter


@dataclass(frozen=True)
class HistoryListing:
    status: ListingStatus
    entries: list[FileHistoryEntry] = field(default_factory=list)
    term: str = ""

    def is_match(self, entry: FileHistoryEntry) -> bool:
        """True when a filter is active and ``entry`` satisfied it."""
        return bool(self.term) and entry_matches(entry, self.term)


def entry_matches(entry: FileHistoryEntry, term: str) -> bool:
    """Case-insensitive substring match on the file name or transcript."""
    needle = term.lower()
    return needle in entry.name.lower() or needle in entry.transcript.lower()


class HistoryStore:
    """Ordered, capped collection of past transcriptions.

    Args:
        repository: Persistence backend, loaded once at construction.
        limit: Maximum number of entries kept (oldest evicted first).
    """

    def __init__(self, repository: HistoryRepository, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self._repository = repository
        self._limit = limit
        self._entries: list[FileHistoryEntry] = repository.load()[:limit]

    @property
    def entries(self) -> list[FileHistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, filename: str, transcript: str) -> FileHistoryEntry:
        """Prepend a new entry, truncate to the limit and persist.

        Returns:
            The newly created entry.
        """
        entry_id = int(time.time() * 1000)
        if self._entries and entry_id <= self._entries[0].id:
            entry_id = self._entries[0].id + 1
        entry = FileHistoryEntry(
            id=entry_id,
            name=filename,
            transcript=transcript,
            timestamp=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        )
        self._entries = [entry, *self._entries][: self._limit]
        self._repository.save(self._entries)
        return entry

    def list(self, term: str = "") -> HistoryListing:
        """Return entries matching ``term``, most recent first.

        An empty term returns every entry. ``ListingStatus.empty`` means no
        entries exist at all; ``ListingStatus.no_matches`` means entries exist
        but none match.
        """
        term = term.strip()
        if not self._entries:
            return HistoryListing(status=ListingStatus.empty, term=term)
        if not term:
            return HistoryListing(status=ListingStatus.ok, entries=self.entries)
        matched = [e for e in self._entries if entry_matches(e, term)]
        if not matched:
            return HistoryListing(status=ListingStatus.no_matches, term=term)
        return HistoryListing(status=ListingStatus.ok, entries=matched, term=term)

    def get(self, entry_id: int) -> FileHistoryEntry | None:
        return next((e for e in self._entries if e.id == entry_id), None)

    def clear(self) -> None:
        """Drop every entry and persist the empty collection."""
        self._entries = []
        self._repository.save(self._entries)

    def as_context(self) -> str:
        """Concatenate all entries as ``File: name`` blocks for the chat relay."""
        return "\n\n".join(f"File: {e.name}\n{e.transcript}" for e in self._entries)
