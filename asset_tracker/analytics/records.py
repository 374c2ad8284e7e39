"""
Plain records exchanged between the data store and the analytics core.

The rule evaluator and aggregator never see ORM objects; the repository maps
rows into these frozen dataclasses so both stay pure and easy to test.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from asset_tracker.core.exceptions import MalformedRecordError

ACTIVE = "Active"


def coerce_date(value: Any, record_id: Any = None) -> date:
    """Return ``value`` as a calendar date or raise MalformedRecordError."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError as exc:
            raise MalformedRecordError(f"Invalid date {value!r}", record_id) from exc
    raise MalformedRecordError(f"Invalid date {value!r}", record_id)


@dataclass(frozen=True)
class UsageRecord:
    """One utilization log joined with the device it belongs to."""
    device_id: int
    hours_used: int
    date: Any
    log_id: Optional[int] = None
    device_name: Optional[str] = None
    device_type: Optional[str] = None
    device_status: Optional[str] = None


@dataclass(frozen=True)
class DeviceSnapshot:
    id: int
    device_name: str
    type: str
    status: str
    model: Optional[str] = None
    purchase_date: Any = None
    logs: tuple[UsageRecord, ...] = field(default_factory=tuple)

    @property
    def is_active(self) -> bool:
        return self.status == ACTIVE


@dataclass(frozen=True)
class AlertDraft:
    """An alert produced by rule evaluation, not yet persisted."""
    device_id: Optional[int]
    alert: str
    description: str
    type: str
    severity: str
    status: str = ACTIVE

    @property
    def key(self) -> tuple:
        return (self.device_id, self.type, self.alert)

    def to_dict(self) -> dict:
        return {
            "device_id": self.device_id,
            "alert": self.alert,
            "description": self.description,
            "type": self.type,
            "severity": self.severity,
            "status": self.status,
        }
