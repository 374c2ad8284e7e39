"""
Alert generation service
"""

from datetime import date
from typing import Callable, Dict, List, Optional

import structlog

from asset_tracker.analytics.records import AlertDraft, ACTIVE
from asset_tracker.analytics.rules import (
    AlertThresholds,
    DEFAULT_THRESHOLDS,
    evaluate_end_of_life,
    evaluate_maintenance,
    evaluate_utilization,
    window_start,
)
from asset_tracker.core.exceptions import InvalidActionError
from asset_tracker.repositories.utilization_repository import UtilizationRepository

logger = structlog.get_logger(__name__)


class AlertService:
    """Runs the alert rules against the data store and persists the results"""

    ACTIONS = {
        "check-utilization": "check_utilization",
        "check-maintenance": "check_maintenance",
        "check-end-of-life": "check_end_of_life",
        "generate-alerts": "generate_alerts",
    }

    def __init__(
        self,
        repository: UtilizationRepository,
        thresholds: AlertThresholds = DEFAULT_THRESHOLDS,
        deduplicate: bool = False,
        today: Callable[[], date] = date.today,
    ):
        self.repository = repository
        self.thresholds = thresholds
        self.deduplicate = deduplicate
        self.today = today

    def run(self, action: Optional[str]) -> Dict:
        """Dispatch an action name such as ``check-utilization``"""
        method = self.ACTIONS.get(action)
        if method is None:
            raise InvalidActionError(action)
        return getattr(self, method)()

    def check_utilization(self) -> Dict:
        today = self.today()
        devices = self.repository.fetch_active_devices_with_logs(
            since=window_start(today, self.thresholds.window_days)
        )
        drafts = []
        for device in devices:
            drafts.extend(evaluate_utilization(device, today, self.thresholds))

        count = self._persist(drafts)
        return {"message": f"Generated {count} utilization alerts", "alerts": count}

    def check_maintenance(self) -> Dict:
        today = self.today()
        drafts = []
        for device in self.repository.fetch_devices(status=ACTIVE):
            drafts.extend(evaluate_maintenance(device, today, self.thresholds))

        count = self._persist(drafts)
        return {"message": f"Generated {count} maintenance alerts", "alerts": count}

    def check_end_of_life(self) -> Dict:
        today = self.today()
        drafts = []
        for device in self.repository.fetch_devices(status=ACTIVE):
            drafts.extend(evaluate_end_of_life(device, today, self.thresholds))

        count = self._persist(drafts)
        return {"message": f"Generated {count} end-of-life alerts", "alerts": count}

    def generate_alerts(self) -> Dict:
        """All three checks over one fetch, written as a single batch"""
        today = self.today()
        devices = self.repository.fetch_active_devices_with_logs(
            since=window_start(today, self.thresholds.window_days)
        )

        utilization, maintenance, end_of_life = [], [], []
        for device in devices:
            utilization.extend(evaluate_utilization(device, today, self.thresholds))
            maintenance.extend(evaluate_maintenance(device, today, self.thresholds))
            end_of_life.extend(evaluate_end_of_life(device, today, self.thresholds))

        if self.deduplicate:
            open_keys = self.repository.find_open_alert_keys()
            utilization = self._drop_open(utilization, open_keys)
            maintenance = self._drop_open(maintenance, open_keys)
            end_of_life = self._drop_open(end_of_life, open_keys)

        self.repository.insert_alerts(utilization + maintenance + end_of_life)

        total = len(utilization) + len(maintenance) + len(end_of_life)
        logger.info("Alert generation complete", devices=len(devices), total=total)
        return {
            "message": f"Generated {total} total alerts",
            "utilization_alerts": len(utilization),
            "maintenance_alerts": len(maintenance),
            "end_of_life_alerts": len(end_of_life),
            "total_alerts": total,
        }

    def _persist(self, drafts: List[AlertDraft]) -> int:
        if self.deduplicate:
            drafts = self._drop_open(drafts, self.repository.find_open_alert_keys())
        return self.repository.insert_alerts(drafts)

    @staticmethod
    def _drop_open(drafts: List[AlertDraft], open_keys) -> List[AlertDraft]:
        return [draft for draft in drafts if draft.key not in open_keys]
