"""
Feedback Store - Append-only storage for feedback entries.
"""
from abc import ABC, abstractmethod
from typing import List

from claimassist.models.feedback import FeedbackEntry


class FeedbackStore(ABC):
    """Abstract base class for feedback storage."""

    @abstractmethod
    def append(self, entry: FeedbackEntry) -> None:
        """Append an entry to the log."""
        pass

    @abstractmethod
    def list(self) -> List[FeedbackEntry]:
        """All entries, oldest first."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry (test/reset utility)."""
        pass


class InMemoryFeedbackStore(FeedbackStore):
    """Process-local feedback log. Lost on restart."""

    def __init__(self):
        self._entries: List[FeedbackEntry] = []

    def append(self, entry: FeedbackEntry) -> None:
        self._entries.append(entry)

    def list(self) -> List[FeedbackEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
