"""
Utilization analytics service
"""

from datetime import date
from typing import Callable, Dict, Optional

import structlog

from asset_tracker.analytics import aggregation
from asset_tracker.analytics.records import ACTIVE
from asset_tracker.analytics.rules import window_start
from asset_tracker.core.exceptions import InvalidActionError
from asset_tracker.repositories.utilization_repository import UtilizationRepository

logger = structlog.get_logger(__name__)


class AnalyticsService:
    """Read-only utilization views computed on demand"""

    ACTIONS = {
        "utilization-trends": "utilization_trends",
        "device-efficiency": "device_efficiency",
        "peak-usage": "peak_usage",
        "utilization-summary": "utilization_summary",
    }

    def __init__(
        self,
        repository: UtilizationRepository,
        window_days: int = 30,
        workday_hours: int = 8,
        peak_sample_size: int = 50,
        today: Callable[[], date] = date.today,
    ):
        self.repository = repository
        self.window_days = window_days
        self.workday_hours = workday_hours
        self.peak_sample_size = peak_sample_size
        self.today = today

    def run(self, action: Optional[str]) -> Dict:
        method = self.ACTIONS.get(action)
        if method is None:
            raise InvalidActionError(action)
        return getattr(self, method)()

    def utilization_trends(self) -> Dict:
        records = self.repository.fetch_logs(order="date")
        return {"trends": aggregation.utilization_trends(records)}

    def device_efficiency(self) -> Dict:
        records = self.repository.fetch_logs(start=window_start(self.today(), self.window_days))
        return {"devices": aggregation.device_efficiency(records, self.workday_hours)}

    def peak_usage(self) -> Dict:
        # only the largest logs overall are sampled
        records = self.repository.fetch_logs(order="hours_desc", limit=self.peak_sample_size)
        return {"peak_usage": aggregation.peak_usage_by_type(records)}

    def utilization_summary(self) -> Dict:
        records = self.repository.fetch_logs(start=window_start(self.today(), self.window_days))
        active_devices = self.repository.count_devices(status=ACTIVE)
        summary = aggregation.utilization_summary(records, active_devices)
        logger.info("Utilization summary computed", **summary)
        return {"summary": summary}

    def monthly_usage(self, months: int = 6) -> list:
        """Hours per calendar month for the current month and the ``months - 1`` before it"""
        today = self.today()
        records = self.repository.fetch_logs(start=aggregation.first_of_month(today, months - 1), end=today)
        return aggregation.monthly_usage(records)
