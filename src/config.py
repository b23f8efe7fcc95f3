import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv(".env.local")


@dataclass
class Config:
    """Configuration class for the vendor quote dashboard"""

    # Database
    supabase_url: str
    supabase_key: str

    # Dashboard refresh
    poll_interval_ms: int = 5000
    timezone: str = "UTC"
    quote_metrics_mode: str = "extracted"  # "extracted" or "summary_proxy"

    # Business Logic
    recent_call_window_days: int = 7
    call_log_limit: int = 10

    @classmethod
    def from_env(cls):
        """Create configuration from environment variables"""
        return cls(
            supabase_url=os.getenv("SUPABASE_URL", ""),
            supabase_key=os.getenv("SUPABASE_KEY", ""),
            poll_interval_ms=int(os.getenv("DASHBOARD_POLL_INTERVAL_MS", "5000")),
            timezone=os.getenv("DASHBOARD_TIMEZONE", "UTC"),
            quote_metrics_mode=os.getenv("QUOTE_METRICS_MODE", "extracted").lower(),
            recent_call_window_days=int(os.getenv("RECENT_CALL_WINDOW_DAYS", "7")),
            call_log_limit=int(os.getenv("CALL_LOG_LIMIT", "10")),
        )


# Global config instance
config = Config.from_env()
