"""Dashboard pipeline: extraction, correlation, aggregation and polling"""

from .extraction_service import ExtractionService, classify_vendor_type
from .correlation_service import Correlation, correlate
from .metrics_service import MetricsService, aggregate
from .polling_service import Poller, start_polling
from .dashboard_service import DashboardService

extract = ExtractionService.extract

__all__ = [
    "extract",
    "correlate",
    "aggregate",
    "start_polling",
    "classify_vendor_type",
    "ExtractionService",
    "Correlation",
    "MetricsService",
    "Poller",
    "DashboardService",
]
