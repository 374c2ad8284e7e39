"""
Data access for the alerting and analytics services
"""

from datetime import date
from typing import Iterable, List, Optional, Set

import structlog
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from asset_tracker.analytics.records import AlertDraft, DeviceSnapshot, UsageRecord, ACTIVE
from asset_tracker.core.exceptions import DataAccessError
from asset_tracker.models.device import Device
from asset_tracker.models.system_alert import SystemAlert
from asset_tracker.models.utilization_log import UtilizationLog

logger = structlog.get_logger(__name__)


def _usage_record(log: UtilizationLog, device: Device) -> UsageRecord:
    return UsageRecord(
        log_id=log.id,
        device_id=log.device_id,
        hours_used=log.hours_used,
        date=log.date,
        device_name=device.device_name,
        device_type=device.type,
        device_status=device.status,
    )


def _device_snapshot(device: Device, logs: Iterable[UtilizationLog] = ()) -> DeviceSnapshot:
    return DeviceSnapshot(
        id=device.id,
        device_name=device.device_name,
        type=device.type,
        status=device.status,
        model=device.model,
        purchase_date=device.purchase_date,
        logs=tuple(_usage_record(log, device) for log in logs),
    )


class UtilizationRepository:
    """Reads devices and logs, writes alert batches"""

    def __init__(self, db: Session):
        self.db = db

    def fetch_active_devices_with_logs(self, since: Optional[date] = None) -> List[DeviceSnapshot]:
        """Active devices with their logs, optionally only logs dated on or after ``since``"""
        logs = Device.utilization_logs
        if since is not None:
            logs = logs.and_(UtilizationLog.date >= since)
        try:
            devices = (
                self.db.query(Device)
                .options(selectinload(logs))
                .filter(Device.status == ACTIVE)
                .order_by(Device.id)
                .populate_existing()
                .all()
            )
        except SQLAlchemyError as e:
            logger.error("Failed to fetch active devices", error=str(e))
            raise DataAccessError("Failed to fetch active devices") from e

        return [_device_snapshot(device, device.utilization_logs) for device in devices]

    def fetch_devices(self, status: Optional[str] = None) -> List[DeviceSnapshot]:
        """Devices without logs, optionally filtered by status"""
        try:
            query = self.db.query(Device)
            if status:
                query = query.filter(Device.status == status)
            devices = query.order_by(Device.id).all()
        except SQLAlchemyError as e:
            logger.error("Failed to fetch devices", error=str(e), status=status)
            raise DataAccessError("Failed to fetch devices") from e

        return [_device_snapshot(device) for device in devices]

    def fetch_logs(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
        order: str = "date",
        limit: Optional[int] = None,
    ) -> List[UsageRecord]:
        """
        Utilization logs joined with their device.

        ``order`` is "date" (oldest first) or "hours_desc" (largest first).
        """
        try:
            query = self.db.query(UtilizationLog, Device).join(Device, UtilizationLog.device_id == Device.id)
            if start is not None:
                query = query.filter(UtilizationLog.date >= start)
            if end is not None:
                query = query.filter(UtilizationLog.date <= end)

            if order == "hours_desc":
                query = query.order_by(desc(UtilizationLog.hours_used), UtilizationLog.id)
            else:
                query = query.order_by(UtilizationLog.date, UtilizationLog.id)

            if limit is not None:
                query = query.limit(limit)
            rows = query.all()
        except SQLAlchemyError as e:
            logger.error("Failed to fetch utilization logs", error=str(e))
            raise DataAccessError("Failed to fetch utilization logs") from e

        return [_usage_record(log, device) for log, device in rows]

    def count_devices(self, status: Optional[str] = None) -> int:
        try:
            query = self.db.query(Device)
            if status:
                query = query.filter(Device.status == status)
            return query.count()
        except SQLAlchemyError as e:
            logger.error("Failed to count devices", error=str(e))
            raise DataAccessError("Failed to count devices") from e

    def find_open_alert_keys(self) -> Set[tuple]:
        """(device_id, type, alert) of every unresolved alert"""
        try:
            rows = (
                self.db.query(SystemAlert.device_id, SystemAlert.type, SystemAlert.alert)
                .filter(SystemAlert.status == ACTIVE)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error("Failed to fetch open alerts", error=str(e))
            raise DataAccessError("Failed to fetch open alerts") from e

        return {(device_id, alert_type, title) for device_id, alert_type, title in rows}

    def insert_alerts(self, drafts: List[AlertDraft]) -> int:
        """Insert all drafts in one transaction; nothing is kept if any insert fails"""
        if not drafts:
            return 0

        try:
            self.db.add_all([SystemAlert(**draft.to_dict()) for draft in drafts])
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to insert alerts", error=str(e), count=len(drafts))
            raise DataAccessError("Failed to insert alerts") from e

        logger.info("Alerts inserted", count=len(drafts))
        return len(drafts)
