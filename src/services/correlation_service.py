"""Service for joining voice agent call logs to vendor quotes."""

from typing import List, Optional, Sequence
from database.models import VendorQuote, VoiceAgentLog, VendorType


class Correlation:
    """
    Lookups over one set of quotes and call logs.

    Joins are exact foreign-key matches only; a key with no match is
    answered with None.
    """

    def __init__(self, quotes: Sequence[VendorQuote], logs: Sequence[VoiceAgentLog]):
        self._quotes = tuple(quotes)
        self._logs = tuple(logs)

    def log_for_vendor(self, vendor_quote_id: Optional[str]) -> Optional[VoiceAgentLog]:
        """First call log recorded against the given quote"""
        if vendor_quote_id is None:
            return None
        return next(
            (log for log in self._logs if log.vendor_quote_id == vendor_quote_id), None
        )

    def vendor_by_id(self, quote_id: Optional[str]) -> Optional[VendorQuote]:
        """First quote with the given id"""
        if quote_id is None:
            return None
        return next((quote for quote in self._quotes if quote.id == quote_id), None)

    def vendors_by_type(self, vendor_type: VendorType) -> List[VendorQuote]:
        """Quotes of one vendor type, in input order"""
        return [quote for quote in self._quotes if quote.vendor_type == vendor_type]


def correlate(
    quotes: Sequence[VendorQuote], logs: Sequence[VoiceAgentLog]
) -> Correlation:
    return Correlation(quotes, logs)
