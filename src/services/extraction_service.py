"""Service for extracting vendor quotes from free-text event summaries."""

import logging
import re
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Sequence, Tuple
from database.models import VendorQuote, VendorType, QuoteStatus

logger = logging.getLogger(__name__)

# "$" followed by comma-grouped digits, with optional cents
CURRENCY_PATTERN = re.compile(r"\$(\d+(?:,\d+)*(?:\.\d{1,2})?)")

# Ordered rule table; the first matching rule wins
VENDOR_TYPE_RULES: Tuple[Tuple[Tuple[str, ...], VendorType], ...] = (
    (("catering", "food", "vegetarian"), VendorType.CATERER),
    (("decor", "floral"), VendorType.DECORATOR),
    (("photographer", "photography"), VendorType.PHOTOGRAPHER),
    (("music", "musician", "live band"), VendorType.MUSIC),
    (("transportation", "shuttle", "limousine"), VendorType.TRANSPORTATION),
)
DEFAULT_VENDOR_TYPE = VendorType.VENUE

DIETARY_VOCABULARY: Tuple[Tuple[str, str], ...] = (
    ("vegetarian", "Vegetarian"),
    ("gluten-free", "Gluten-free"),
    ("kosher", "Kosher"),
)
DEFAULT_INCLUSIONS = ("Basic Service",)


def classify_vendor_type(
    text: Optional[str],
    rules: Sequence[Tuple[Sequence[str], VendorType]] = VENDOR_TYPE_RULES,
) -> VendorType:
    """
    Classify free text into a vendor type with a keyword rule table.

    Rules are checked in order (case-insensitive substring match) and the
    first rule with any keyword in the text wins; text matching no rule is
    a venue.

    Args:
        text: Free text to classify
        rules: Ordered (keywords, vendor type) pairs

    Returns:
        The matching VendorType
    """
    if not text:
        return DEFAULT_VENDOR_TYPE

    lowered = text.lower()
    for keywords, vendor_type in rules:
        if any(keyword in lowered for keyword in keywords):
            return vendor_type
    return DEFAULT_VENDOR_TYPE


def extract_inclusions(text: Optional[str]) -> List[str]:
    """Dietary tags found in the text, in vocabulary order, or the basic-service tag"""
    lowered = (text or "").lower()
    found = [label for keyword, label in DIETARY_VOCABULARY if keyword in lowered]
    return found or list(DEFAULT_INCLUSIONS)


def find_quote_amount(text: Optional[str]) -> Optional[Decimal]:
    """First dollar amount in the text with grouping commas removed, or None"""
    if not text:
        return None
    match = CURRENCY_PATTERN.search(text)
    if not match:
        return None
    try:
        return Decimal(match.group(1).replace(",", ""))
    except InvalidOperation:
        return None


class ExtractionService:
    """
    Turn an AI call agent's event summary into a structured VendorQuote.

    Methods:
    - extract(): Parse one summary into at most one quote

    Everything the summary does not state is filled with fixed placeholder
    values; the quote always starts out pending.
    """

    VENDOR_NAME = "Venue Contacted"
    CONTACT_PERSON = "Contact Person"
    PHONE = "+1-555-0000"
    EMAIL = "contact@venue.com"
    CURRENCY = "USD"
    VALIDITY_DAYS = 30
    DEFAULT_CAPACITY = 160
    DEFAULT_CALL_DURATION = 180  # seconds
    DEFAULT_CALL_QUALITY = 4.0
    DEFAULT_PRIORITY = 3
    DESCRIPTION_LENGTH = 100

    @staticmethod
    def parsed_quote_id(event_id: str) -> str:
        return f"parsed-{event_id}"

    @staticmethod
    def extract(
        summary: Optional[str], event_id: str, now: datetime
    ) -> Optional[VendorQuote]:
        """
        Extract a vendor quote from an event summary.

        Args:
            summary: Free-text summary written by the call agent (may be None)
            event_id: Event the quote belongs to
            now: Current time, used for validity window and timestamps

        Returns:
            VendorQuote, or None when the summary holds no dollar amount
        """
        quote_amount = find_quote_amount(summary)
        if quote_amount is None:
            return None

        cls = ExtractionService
        vendor_type = classify_vendor_type(summary)
        logger.debug(
            f"Extracted {vendor_type.value} quote of {quote_amount} for event {event_id}"
        )

        return VendorQuote(
            id=cls.parsed_quote_id(event_id),
            event_id=event_id,
            vendor_type=vendor_type,
            vendor_name=cls.VENDOR_NAME,
            contact_person=cls.CONTACT_PERSON,
            phone=cls.PHONE,
            email=cls.EMAIL,
            quote_amount=quote_amount,
            quote_currency=cls.CURRENCY,
            quote_valid_until=(now + timedelta(days=cls.VALIDITY_DAYS)).date(),
            service_description=summary[: cls.DESCRIPTION_LENGTH] + "...",
            inclusions=extract_inclusions(summary),
            exclusions=(),
            availability=True,
            capacity=cls.DEFAULT_CAPACITY,
            agent_call_date=now,
            agent_notes=summary,
            call_duration=cls.DEFAULT_CALL_DURATION,
            call_quality_score=cls.DEFAULT_CALL_QUALITY,
            status=QuoteStatus.PENDING,
            priority=cls.DEFAULT_PRIORITY,
            created_at=now,
            updated_at=now,
        )
