"""Supabase client setup and read-only dashboard queries"""

import logging
from typing import Optional, List
from supabase import create_client, Client
from config import config
from .models import Event, Guest, VendorQuote, VoiceAgentLog, parse_records

logger = logging.getLogger(__name__)


class SupabaseClient:
    """Singleton Supabase client"""

    _instance: Optional[Client] = None

    @classmethod
    def get_client(
        cls, supabase_url: Optional[str] = None, supabase_key: Optional[str] = None
    ) -> Client:
        """
        Get or create Supabase client instance

        Args:
            supabase_url: Supabase project URL (required for first initialization)
            supabase_key: Supabase API key (required for first initialization)

        Returns:
            Client: Supabase client instance
        """
        if cls._instance is None:
            if not supabase_url or not supabase_key:
                raise ValueError(
                    "supabase_url and supabase_key are required for first initialization"
                )

            cls._instance = create_client(supabase_url, supabase_key)
            logger.info("Supabase client initialized")

        return cls._instance

    @classmethod
    def reset(cls):
        """Reset the client instance (useful for testing)"""
        cls._instance = None


class DashboardRepository:
    """
    Read events, guests, vendor quotes and call logs for the dashboard.

    Every row passes through parse_records(), so callers only ever see
    validated records.

    Methods:
    - fetch_current_event(): Most recently created event for a user
    - fetch_guests(): Guests of an event
    - fetch_vendor_quotes(): Stored quotes of an event, by priority
    - fetch_voice_agent_logs(): Latest call logs of an event
    """

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = SupabaseClient.get_client(
                config.supabase_url, config.supabase_key
            )
        return self._client

    def fetch_current_event(self, user_id: str) -> Optional[Event]:
        """Return the user's most recently created event, or None"""
        result = (
            self.client.table("events")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        events = parse_records(Event, result.data)
        return events[0] if events else None

    def fetch_guests(self, event_id: str) -> List[Guest]:
        result = self.client.table("guests").select("*").eq("event_id", event_id).execute()
        return parse_records(Guest, result.data)

    def fetch_vendor_quotes(self, event_id: str) -> List[VendorQuote]:
        result = (
            self.client.table("vendor_quotes")
            .select("*")
            .eq("event_id", event_id)
            .order("priority", desc=False)
            .execute()
        )
        return parse_records(VendorQuote, result.data)

    def fetch_voice_agent_logs(
        self, event_id: str, limit: Optional[int] = None
    ) -> List[VoiceAgentLog]:
        result = (
            self.client.table("voice_agent_logs")
            .select("*")
            .eq("event_id", event_id)
            .order("created_at", desc=True)
            .limit(limit or config.call_log_limit)
            .execute()
        )
        return parse_records(VoiceAgentLog, result.data)
