"""Holder for the current dashboard snapshot"""

import logging
from typing import Optional
from database.models import DashboardSnapshot

logger = logging.getLogger(__name__)


class SnapshotStore:
    """
    Caller-owned reference to the latest complete DashboardSnapshot.

    Snapshots are immutable and replaced by a single reference assignment,
    so a reader sees either the previous snapshot or the new one.
    """

    def __init__(self, initial: Optional[DashboardSnapshot] = None):
        self._current: Optional[DashboardSnapshot] = initial

    @property
    def current(self) -> Optional[DashboardSnapshot]:
        """Get the latest snapshot (None before the first refresh)"""
        return self._current

    def swap(self, snapshot: DashboardSnapshot) -> Optional[DashboardSnapshot]:
        """Replace the current snapshot and return the previous one"""
        previous, self._current = self._current, snapshot
        logger.debug(f"Dashboard snapshot swapped at {snapshot.refreshed_at.isoformat()}")
        return previous
