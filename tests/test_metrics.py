"""Unit tests for dashboard metric aggregation"""
from datetime import datetime, date, timedelta
from decimal import Decimal
import pytest
import pytz
from pydantic import ValidationError

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from database.models import (
    Event,
    Guest,
    VendorQuote,
    VoiceAgentLog,
    VendorType,
    QuoteStatus,
    QuoteMetricsMode,
    DashboardMetrics,
    InvalidStatusTransition,
)
from services import aggregate
from services.metrics_service import MetricsService

NOW = pytz.UTC.localize(datetime(2026, 6, 1, 15, 0))


def make_event(**overrides):
    data = {
        "id": "evt-1",
        "user_id": "user-1",
        "budget": Decimal("25000"),
        "event_date": date(2026, 6, 11),
        "summary": "Quote: $12,500 for vegetarian catering",
        "updated_at": NOW - timedelta(days=2),
        "created_at": NOW - timedelta(days=30),
    }
    data.update(overrides)
    return Event(**data)


def make_quote(quote_id, status=QuoteStatus.PENDING, score=4.0):
    return VendorQuote(
        id=quote_id,
        event_id="evt-1",
        vendor_type=VendorType.CATERER,
        vendor_name="Caterer",
        quote_amount=Decimal("500"),
        call_quality_score=score,
        status=status,
    )


def make_guests(count):
    return [Guest(id=f"g{i}", event_id="evt-1") for i in range(count)]


class TestAggregate:
    """Tests for MetricsService.aggregate"""

    def test_no_event_gives_all_zero_metrics(self):
        metrics = aggregate(None, [], [], NOW)

        assert metrics == DashboardMetrics.empty()
        assert metrics.total_guests == 0
        assert metrics.total_budget == 0
        assert metrics.average_call_quality == 0.0

    def test_counts_and_budget(self):
        metrics = aggregate(make_event(), make_guests(3), [make_quote("q1")], NOW)

        assert metrics.total_guests == 3
        assert metrics.total_budget == Decimal("25000")
        assert metrics.total_quotes == 1
        assert metrics.total_vendors == 1

    def test_missing_budget_defaults_to_zero(self):
        metrics = aggregate(make_event(budget=None), [], [], NOW)

        assert metrics.total_budget == Decimal("0")

    def test_days_until_event_rounds_up(self):
        metrics = aggregate(make_event(), [], [], NOW)

        assert metrics.days_until_event == 10
        assert not metrics.event_is_today_or_past
        assert metrics.timeline_label == "10 days"

    def test_event_today_is_today_or_past(self):
        metrics = aggregate(make_event(event_date=date(2026, 6, 1)), [], [], NOW)

        assert metrics.days_until_event <= 0
        assert metrics.event_is_today_or_past
        assert metrics.timeline_label == "Today!"

    def test_past_event_is_not_negative_label(self):
        metrics = aggregate(make_event(event_date=date(2026, 5, 1)), [], [], NOW)

        assert metrics.days_until_event < 0
        assert metrics.timeline_label == "Today!"

    def test_confirmed_vendors_counted(self):
        quotes = [
            make_quote("q1", QuoteStatus.CONFIRMED),
            make_quote("q2", QuoteStatus.PENDING),
            make_quote("q3", QuoteStatus.CONFIRMED),
        ]
        metrics = aggregate(make_event(), [], quotes, NOW)

        assert metrics.confirmed_vendors == 2
        assert metrics.success_rate == 67

    def test_no_confirmed_vendors(self):
        metrics = aggregate(make_event(), [], [make_quote("q1")], NOW)

        assert metrics.confirmed_vendors == 0
        assert metrics.success_rate == 0

    def test_average_call_quality_from_quotes(self):
        quotes = [make_quote("q1", score=4.0), make_quote("q2", score=3.5), make_quote("q3", score=None)]
        metrics = aggregate(make_event(), [], quotes, NOW)

        assert metrics.average_call_quality == 3.8
        assert metrics.total_quotes == 3

    def test_summary_proxy_mode(self):
        event = make_event(summary="Venue $5,000 and catering $2,000")
        metrics = MetricsService.aggregate(
            event, [], [], NOW, mode=QuoteMetricsMode.SUMMARY_PROXY
        )

        assert metrics.total_quotes == 2
        assert metrics.total_vendors == 2
        assert metrics.average_call_quality == 4.0

    def test_summary_proxy_without_summary(self):
        metrics = MetricsService.aggregate(
            make_event(summary=None), [], [], NOW, mode=QuoteMetricsMode.SUMMARY_PROXY
        )

        assert metrics.total_quotes == 0
        assert metrics.average_call_quality == 0.0

    def test_recent_calls_within_window(self):
        metrics = aggregate(make_event(updated_at=NOW - timedelta(days=6)), [], [], NOW)

        assert metrics.recent_calls == 1

    def test_recent_calls_outside_window(self):
        metrics = aggregate(make_event(updated_at=NOW - timedelta(days=8)), [], [], NOW)

        assert metrics.recent_calls == 0

    def test_zero_day_window_counts_nothing(self):
        event = make_event(updated_at=NOW - timedelta(hours=1))

        metrics = MetricsService.aggregate(event, [], [], NOW, recent_window_days=0)

        assert metrics.recent_calls == 0

    def test_custom_window(self):
        event = make_event(updated_at=NOW - timedelta(days=10))

        metrics = MetricsService.aggregate(event, [], [], NOW, recent_window_days=14)

        assert metrics.recent_calls == 1

    def test_naive_timestamps_treated_as_utc(self):
        event = make_event(updated_at=datetime(2026, 5, 31, 12, 0))
        metrics = aggregate(event, [], [], NOW)

        assert metrics.recent_calls == 1

    def test_aggregate_is_deterministic(self):
        event = make_event()
        quotes = [make_quote("q1")]

        assert aggregate(event, [], quotes, NOW) == aggregate(event, [], quotes, NOW)


class TestSummarizeCalls:
    """Tests for MetricsService.summarize_calls"""

    def test_empty_logs(self):
        stats = MetricsService.summarize_calls([])

        assert stats.total_calls == 0
        assert stats.average_duration == 0

    def test_call_stats(self):
        logs = [
            VoiceAgentLog(id="l1", call_status="completed", call_duration=180, agent_id="a1"),
            VoiceAgentLog(id="l2", call_status="failed", call_duration=60, agent_id="a1"),
            VoiceAgentLog(id="l3", call_status="in_progress", call_duration=30, agent_id="a2"),
            VoiceAgentLog(id="l4", call_status="in_progress", call_duration=31, agent_id="a2"),
        ]
        stats = MetricsService.summarize_calls(logs)

        assert stats.total_calls == 4
        assert stats.successful_calls == 1
        assert stats.average_duration == 75
        assert stats.active_agents == 1


class TestQuoteStatus:
    """Tests for the quote status lifecycle"""

    def test_pending_to_terminal(self):
        quote = make_quote("q1")

        confirmed = quote.with_status(QuoteStatus.CONFIRMED)

        assert confirmed.status == QuoteStatus.CONFIRMED
        assert quote.status == QuoteStatus.PENDING

    def test_terminal_cannot_move(self):
        quote = make_quote("q1", QuoteStatus.EXPIRED)

        with pytest.raises(InvalidStatusTransition):
            quote.with_status(QuoteStatus.CONFIRMED)

    def test_pending_to_pending_not_allowed(self):
        assert not QuoteStatus.PENDING.can_transition_to(QuoteStatus.PENDING)
        assert QuoteStatus.PENDING.can_transition_to(QuoteStatus.REJECTED)

    def test_status_cannot_be_assigned(self):
        """Status only changes through with_status"""
        confirmed = make_quote("q1").with_status(QuoteStatus.CONFIRMED)

        with pytest.raises(ValidationError):
            confirmed.status = QuoteStatus.PENDING

        assert confirmed.status == QuoteStatus.CONFIRMED

    def test_quote_fields_are_read_only(self):
        quote = make_quote("q1")

        with pytest.raises(ValidationError):
            quote.quote_amount = Decimal("-5")

        assert quote.quote_amount == Decimal("500")
        assert isinstance(quote.inclusions, tuple)
