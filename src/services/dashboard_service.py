"""Service that refreshes the dashboard snapshot from the database."""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence
from config import config
from database.client import DashboardRepository
from database.models import (
    Event,
    Guest,
    VendorQuote,
    VoiceAgentLog,
    QuoteMetricsMode,
    AgentActivity,
    DashboardSnapshot,
)
from services.extraction_service import ExtractionService
from services.metrics_service import MetricsService
from services.polling_service import Poller, start_polling, ErrorHandler
from utils.date_time_utils import get_now
from utils.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class DashboardService:
    """
    Load the current event's records and publish a fresh DashboardSnapshot.

    Methods:
    - refresh(): Fetch, extract, aggregate and swap in a new snapshot
    - build_snapshot(): Pure snapshot construction from loaded records
    - start(): Refresh now and then on a timer
    """

    AGENT_NAME = "Maya"

    def __init__(
        self,
        user_id: str,
        repository: Optional[DashboardRepository] = None,
        store: Optional[SnapshotStore] = None,
        clock: Optional[Callable[[], datetime]] = None,
        quote_metrics_mode: Optional[QuoteMetricsMode] = None,
    ):
        self.user_id = user_id
        self.repository = repository or DashboardRepository()
        self.store = store or SnapshotStore()
        self.clock = clock or (lambda: get_now(config.timezone))
        self.quote_metrics_mode = quote_metrics_mode or QuoteMetricsMode(
            config.quote_metrics_mode
        )

    async def refresh(self) -> DashboardSnapshot:
        """
        Rebuild the snapshot from the database and swap it into the store.

        Errors propagate so the poller can report them; the previous
        snapshot stays in place when this raises.
        """
        now = self.clock()
        event = self.repository.fetch_current_event(self.user_id)

        guests: List[Guest] = []
        stored_quotes: List[VendorQuote] = []
        logs: List[VoiceAgentLog] = []
        if event is not None:
            guests = self.repository.fetch_guests(event.id)
            stored_quotes = self.repository.fetch_vendor_quotes(event.id)
            logs = self.repository.fetch_voice_agent_logs(event.id)

        snapshot = self.build_snapshot(
            event,
            guests,
            stored_quotes,
            logs,
            now,
            self.quote_metrics_mode,
            recent_window_days=config.recent_call_window_days,
        )
        self.store.swap(snapshot)
        logger.info(
            f"Dashboard refreshed for user {self.user_id}: "
            f"{len(snapshot.quotes)} quotes, {len(snapshot.logs)} calls"
        )
        return snapshot

    @staticmethod
    def build_snapshot(
        event: Optional[Event],
        guests: Sequence[Guest],
        stored_quotes: Sequence[VendorQuote],
        logs: Sequence[VoiceAgentLog],
        now: datetime,
        mode: QuoteMetricsMode = QuoteMetricsMode.EXTRACTED,
        recent_window_days: Optional[int] = None,
    ) -> DashboardSnapshot:
        """Combine stored and summary-extracted quotes into a complete snapshot"""
        if event is None:
            return DashboardSnapshot(refreshed_at=now)

        quotes = list(stored_quotes)
        activities = []
        parsed = ExtractionService.extract(event.summary, event.id, now)
        if parsed is not None and all(quote.id != parsed.id for quote in quotes):
            quotes.append(parsed)
            activities.append(DashboardService._activity_for(parsed, event))

        return DashboardSnapshot(
            event=event,
            guest_count=len(guests),
            quotes=tuple(quotes),
            logs=tuple(logs),
            metrics=MetricsService.aggregate(
                event, guests, quotes, now, mode, recent_window_days
            ),
            call_stats=MetricsService.summarize_calls(logs),
            activities=tuple(activities),
            refreshed_at=now,
        )

    @staticmethod
    def _activity_for(quote: VendorQuote, event: Event) -> AgentActivity:
        return AgentActivity(
            id=f"event-{event.id}",
            status="completed",
            vendor_name=quote.vendor_name,
            vendor_type=quote.vendor_type,
            progress=100,
            duration=quote.call_duration,
            agent_name=DashboardService.AGENT_NAME,
            last_update=event.updated_at,
        )

    def start(
        self,
        interval_ms: Optional[int] = None,
        on_error: Optional[ErrorHandler] = None,
    ) -> Poller:
        """Refresh immediately, then every interval, until the poller is cancelled"""
        return start_polling(
            interval_ms or config.poll_interval_ms,
            self.refresh,
            on_error=on_error,
            run_immediately=True,
        )
