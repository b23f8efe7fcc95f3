"""Database module for Supabase integration"""
from .client import SupabaseClient, DashboardRepository
from .models import (
    Event,
    Guest,
    VendorQuote,
    VoiceAgentLog,
    VendorType,
    QuoteStatus,
    CallType,
    QuoteMetricsMode,
    InvalidStatusTransition,
    DashboardMetrics,
    CallStats,
    AgentActivity,
    DashboardSnapshot,
    parse_records,
)

__all__ = [
    "SupabaseClient",
    "DashboardRepository",
    "Event",
    "Guest",
    "VendorQuote",
    "VoiceAgentLog",
    "VendorType",
    "QuoteStatus",
    "CallType",
    "QuoteMetricsMode",
    "InvalidStatusTransition",
    "DashboardMetrics",
    "CallStats",
    "AgentActivity",
    "DashboardSnapshot",
    "parse_records",
]
