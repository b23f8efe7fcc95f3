"""Service for folding event, guest, quote and call data into dashboard metrics."""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional, Sequence
from database.models import (
    Event,
    Guest,
    VendorQuote,
    VoiceAgentLog,
    QuoteStatus,
    QuoteMetricsMode,
    DashboardMetrics,
    CallStats,
)
from utils.date_time_utils import days_until, ensure_aware

logger = logging.getLogger(__name__)


class MetricsService:
    """
    Compute dashboard KPIs from in-memory records.

    Methods:
    - aggregate(): Event + guests + quotes -> DashboardMetrics
    - summarize_calls(): Voice agent logs -> CallStats

    Both are pure for a fixed `now` and never raise on empty input.
    """

    RECENT_CALL_WINDOW_DAYS = 7
    SUMMARY_PROXY_CALL_QUALITY = 4.0
    SUCCESSFUL_CALL_STATUS = "completed"
    ACTIVE_CALL_STATUS = "in_progress"

    @staticmethod
    def aggregate(
        event: Optional[Event],
        guests: Sequence[Guest],
        quotes: Sequence[VendorQuote],
        now: datetime,
        mode: QuoteMetricsMode = QuoteMetricsMode.EXTRACTED,
        recent_window_days: Optional[int] = None,
    ) -> DashboardMetrics:
        """
        Build the dashboard KPI snapshot.

        Args:
            event: Current event, or None when the user has no events yet
            guests: Guests of the event (only counted)
            quotes: Vendor quotes of the event
            now: Current time
            mode: Where total_quotes / average_call_quality come from
            recent_window_days: Window for recent_calls (default 7 days)

        Returns:
            DashboardMetrics (all zero when there is no event)
        """
        if event is None:
            return DashboardMetrics.empty()

        if mode == QuoteMetricsMode.SUMMARY_PROXY:
            total_quotes, average_call_quality = MetricsService._summary_proxy(event.summary)
        else:
            total_quotes, average_call_quality = MetricsService._from_quotes(quotes)

        window = (
            MetricsService.RECENT_CALL_WINDOW_DAYS
            if recent_window_days is None
            else recent_window_days
        )
        recently_updated = ensure_aware(event.updated_at) > ensure_aware(now) - timedelta(
            days=window
        )

        return DashboardMetrics(
            total_guests=len(guests),
            total_vendors=total_quotes,
            total_budget=event.budget or Decimal("0"),
            days_until_event=days_until(event.event_date, now),
            confirmed_vendors=sum(
                1 for quote in quotes if quote.status == QuoteStatus.CONFIRMED
            ),
            total_quotes=total_quotes,
            average_call_quality=average_call_quality,
            recent_calls=1 if recently_updated else 0,
        )

    @staticmethod
    def _from_quotes(quotes: Sequence[VendorQuote]):
        scores = [
            quote.call_quality_score
            for quote in quotes
            if quote.call_quality_score is not None
        ]
        average = round(sum(scores) / len(scores), 1) if scores else 0.0
        return len(quotes), average

    @staticmethod
    def _summary_proxy(summary: Optional[str]):
        # Legacy heuristic: every "$" counts as a quote
        if not summary:
            return 0, 0.0
        return summary.count("$"), MetricsService.SUMMARY_PROXY_CALL_QUALITY

    @staticmethod
    def summarize_calls(logs: Sequence[VoiceAgentLog]) -> CallStats:
        """Totals, completed calls, mean duration and agents currently on a call"""
        if not logs:
            return CallStats()

        successful = [
            log for log in logs if log.call_status == MetricsService.SUCCESSFUL_CALL_STATUS
        ]
        active_agents = {
            log.agent_id or log.agent_name
            for log in logs
            if log.call_status == MetricsService.ACTIVE_CALL_STATUS
            and (log.agent_id or log.agent_name)
        }
        return CallStats(
            total_calls=len(logs),
            successful_calls=len(successful),
            average_duration=round(sum(log.call_duration for log in logs) / len(logs)),
            active_agents=len(active_agents),
        )


def aggregate(
    event: Optional[Event],
    guests: Sequence[Guest],
    quotes: Sequence[VendorQuote],
    now: datetime,
    mode: QuoteMetricsMode = QuoteMetricsMode.EXTRACTED,
) -> DashboardMetrics:
    return MetricsService.aggregate(event, guests, quotes, now, mode)
