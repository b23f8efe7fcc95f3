"""Pydantic models for dashboard records"""

import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, List, Tuple, Type, TypeVar, Iterable, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class VendorType(str, Enum):
    VENUE = "venue"
    CATERER = "caterer"
    DECORATOR = "decorator"
    PHOTOGRAPHER = "photographer"
    MUSIC = "music"
    TRANSPORTATION = "transportation"


class QuoteStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        return self is not QuoteStatus.PENDING

    def can_transition_to(self, target: "QuoteStatus") -> bool:
        """Only pending quotes move, and only into a terminal status"""
        return self is QuoteStatus.PENDING and target.is_terminal


class CallType(str, Enum):
    OUTBOUND = "outbound"
    INBOUND = "inbound"
    FOLLOW_UP = "follow_up"


class QuoteMetricsMode(str, Enum):
    """How total_quotes and average_call_quality are derived"""

    EXTRACTED = "extracted"
    SUMMARY_PROXY = "summary_proxy"


class InvalidStatusTransition(ValueError):
    """Raised when a quote status change is not pending -> terminal"""


class Record(BaseModel):
    """Immutable base for rows read from the database; unknown columns are ignored"""

    model_config = ConfigDict(extra="ignore", frozen=True)


class Event(Record):
    """Event model"""

    id: str
    user_id: str
    budget: Optional[Decimal] = None
    event_date: date
    summary: Optional[str] = None
    updated_at: datetime
    created_at: datetime


class Guest(Record):
    """Guest model (only counted by the dashboard)"""

    id: str
    event_id: str
    name: Optional[str] = None
    rsvp_status: Optional[str] = None


class VendorQuote(Record):
    """Vendor quote model"""

    id: str
    event_id: str
    vendor_type: VendorType
    vendor_name: str
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    quote_amount: Decimal = Field(ge=0)
    quote_currency: str = "USD"
    quote_valid_until: Optional[date] = None
    quote_notes: Optional[str] = None
    service_description: Optional[str] = None
    inclusions: Tuple[str, ...] = ()
    exclusions: Tuple[str, ...] = ()
    availability: bool = True
    capacity: Optional[int] = None
    agent_call_date: Optional[datetime] = None
    agent_notes: Optional[str] = None
    call_duration: int = Field(default=0, ge=0)  # seconds
    call_quality_score: Optional[float] = Field(default=None, ge=0, le=5)
    status: QuoteStatus = QuoteStatus.PENDING
    priority: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("inclusions", "exclusions", mode="before")
    @classmethod
    def none_to_empty(cls, value):
        return () if value is None else value

    def with_status(self, status: QuoteStatus) -> "VendorQuote":
        """Return a copy in the new status; only pending -> terminal is allowed"""
        if not self.status.can_transition_to(status):
            raise InvalidStatusTransition(
                f"Quote {self.id} cannot move from {self.status.value} to {status.value}"
            )
        return self.model_copy(update={"status": status})


class VoiceAgentLog(Record):
    """Voice agent call log model"""

    id: str
    event_id: Optional[str] = None
    vendor_quote_id: Optional[str] = None
    call_type: CallType = CallType.OUTBOUND
    call_status: str = "completed"  # completed, in_progress, failed, no_answer
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    call_start_time: Optional[datetime] = None
    call_end_time: Optional[datetime] = None
    call_duration: int = Field(default=0, ge=0)
    recording_url: Optional[str] = None
    agent_id: Optional[str] = None
    agent_name: Optional[str] = None
    conversation_summary: Optional[str] = None
    key_points: Tuple[str, ...] = ()
    action_items: Tuple[str, ...] = ()
    next_steps: Optional[str] = None
    call_quality_score: Optional[float] = Field(default=None, ge=0, le=5)
    customer_satisfaction: Optional[float] = None
    agent_notes: Optional[str] = None
    supervisor_notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("key_points", "action_items", mode="before")
    @classmethod
    def none_to_empty(cls, value):
        return () if value is None else value


class DashboardMetrics(BaseModel):
    """Derived KPI snapshot, recomputed on every aggregation"""

    model_config = ConfigDict(frozen=True)

    total_guests: int = 0
    total_vendors: int = 0
    total_budget: Decimal = Decimal("0")
    days_until_event: int = 0
    confirmed_vendors: int = 0
    total_quotes: int = 0
    average_call_quality: float = 0.0
    recent_calls: int = 0

    @classmethod
    def empty(cls) -> "DashboardMetrics":
        return cls()

    @property
    def event_is_today_or_past(self) -> bool:
        return self.days_until_event <= 0

    @property
    def timeline_label(self) -> str:
        if self.event_is_today_or_past:
            return "Today!"
        return f"{self.days_until_event} days"

    @property
    def success_rate(self) -> int:
        """Percentage of vendors confirmed, rounded"""
        if self.total_vendors <= 0:
            return 0
        return round(self.confirmed_vendors / self.total_vendors * 100)


class CallStats(BaseModel):
    """Voice agent call statistics"""

    model_config = ConfigDict(frozen=True)

    total_calls: int = 0
    successful_calls: int = 0
    average_duration: int = 0  # seconds
    active_agents: int = 0


class AgentActivity(BaseModel):
    """A single voice agent activity row"""

    model_config = ConfigDict(frozen=True)

    id: str
    status: str  # idle, calling, negotiating, completed, failed
    vendor_name: str
    vendor_type: VendorType
    progress: int = 0
    duration: int = 0
    agent_name: str
    last_update: Optional[datetime] = None


class DashboardSnapshot(BaseModel):
    """Everything the dashboard shows, replaced as a whole on each refresh"""

    model_config = ConfigDict(frozen=True)

    event: Optional[Event] = None
    guest_count: int = 0
    quotes: Tuple[VendorQuote, ...] = ()
    logs: Tuple[VoiceAgentLog, ...] = ()
    metrics: DashboardMetrics = Field(default_factory=DashboardMetrics.empty)
    call_stats: CallStats = Field(default_factory=CallStats)
    activities: Tuple[AgentActivity, ...] = ()
    refreshed_at: datetime


def parse_records(
    model: Type[RecordT], rows: Optional[Iterable[Dict[str, Any]]]
) -> List[RecordT]:
    """
    Validate raw database rows into typed records.

    Rows that fail validation are logged and dropped so that partial or
    malformed data never reaches the dashboard computations.

    Args:
        model: Record class to validate against
        rows: Raw rows as returned by Supabase (None is treated as empty)

    Returns:
        List of validated records, in input order
    """
    records = []
    for row in rows or []:
        try:
            records.append(model.model_validate(row))
        except ValidationError as e:
            row_id = row.get("id", "unknown") if isinstance(row, dict) else "unknown"
            logger.warning(
                f"Rejected {model.__name__} row {row_id}: {e.error_count()} validation error(s)"
            )
    return records
