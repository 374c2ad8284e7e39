"""
Alert rule evaluation.

Each rule family maps one device snapshot to zero or more AlertDraft records
"as of" a given day:

  - utilization: average daily hours over the trailing window, always divided
    by the full window length (not by days with data)
  - maintenance: completed calendar months since purchase
  - end of life: completed years since purchase

Rules are independent, so one device can raise several alerts in one pass.
Only devices whose status is Active are evaluated.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

import structlog

from asset_tracker.analytics.records import AlertDraft, DeviceSnapshot, UsageRecord, coerce_date
from asset_tracker.core.exceptions import MalformedRecordError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AlertThresholds:
    window_days: int = 30
    low_utilization_hours: float = 2.0
    high_utilization_hours: float = 20.0
    annual_maintenance_months: int = 12
    warranty_months: int = 36
    end_of_life_years: int = 5
    critical_end_of_life_years: int = 7

    @classmethod
    def from_settings(cls, settings) -> "AlertThresholds":
        return cls(
            window_days=settings.trailing_window_days,
            low_utilization_hours=settings.low_utilization_hours,
            high_utilization_hours=settings.high_utilization_hours,
            annual_maintenance_months=settings.annual_maintenance_months,
            warranty_months=settings.warranty_months,
            end_of_life_years=settings.end_of_life_years,
            critical_end_of_life_years=settings.critical_end_of_life_years,
        )


DEFAULT_THRESHOLDS = AlertThresholds()


def window_start(today: date, window_days: int) -> date:
    return today - timedelta(days=window_days)


def months_in_service(purchase_date: date, today: date) -> int:
    """
    Completed calendar months between purchase and today.

    A device bought on 2025-10-17 has 12 months on 2026-10-17 and 11 on
    2026-10-16.
    """
    months = (today.year - purchase_date.year) * 12 + (today.month - purchase_date.month)
    if today.day < purchase_date.day:
        months -= 1
    return months


def years_in_service(purchase_date: date, today: date) -> int:
    return months_in_service(purchase_date, today) // 12


def average_daily_hours(logs: Iterable[UsageRecord], today: date, window_days: int = 30) -> float:
    """Sum of hours logged since ``today - window_days`` divided by ``window_days``."""
    start = window_start(today, window_days)
    total = 0
    for log in logs:
        try:
            log_date = coerce_date(log.date, log.log_id)
        except MalformedRecordError as exc:
            logger.warning("Skipping utilization log", log_id=log.log_id, reason=str(exc))
            continue
        if log.hours_used is None or log.hours_used < 0:
            logger.warning("Skipping utilization log", log_id=log.log_id, reason="negative hours")
            continue
        if log_date >= start:
            total += log.hours_used
    return total / window_days if window_days > 0 else 0.0


def evaluate_utilization(
    device: DeviceSnapshot,
    today: date,
    thresholds: AlertThresholds = DEFAULT_THRESHOLDS,
) -> list[AlertDraft]:
    if not device.is_active:
        return []

    average = average_daily_hours(device.logs, today, thresholds.window_days)
    days = thresholds.window_days
    alerts = []

    if average < thresholds.low_utilization_hours:
        alerts.append(AlertDraft(
            device_id=device.id,
            alert=f"Low Utilization - {device.device_name}",
            description=(
                f"{device.device_name} has been underutilized with an average of "
                f"{average:.1f} hours per day over the last {days} days."
            ),
            type="maintenance",
            severity="low",
        ))

    if average > thresholds.high_utilization_hours:
        alerts.append(AlertDraft(
            device_id=device.id,
            alert=f"High Utilization - {device.device_name}",
            description=(
                f"{device.device_name} has been heavily utilized with an average of "
                f"{average:.1f} hours per day over the last {days} days. Consider maintenance."
            ),
            type="maintenance",
            severity="high",
        ))

    return alerts


def _purchase_date(device: DeviceSnapshot):
    """Parsed purchase date, or None when it is missing or malformed."""
    try:
        return coerce_date(device.purchase_date, device.id)
    except MalformedRecordError as exc:
        logger.warning("Skipping date-based rules", device_id=device.id, reason=str(exc))
        return None


def evaluate_maintenance(
    device: DeviceSnapshot,
    today: date,
    thresholds: AlertThresholds = DEFAULT_THRESHOLDS,
) -> list[AlertDraft]:
    if not device.is_active:
        return []
    purchased = _purchase_date(device)
    if purchased is None:
        return []

    months = months_in_service(purchased, today)
    alerts = []

    if months >= thresholds.annual_maintenance_months:
        alerts.append(AlertDraft(
            device_id=device.id,
            alert=f"Annual Maintenance Due - {device.device_name}",
            description=(
                f"{device.device_name} has been in service for {months} months "
                f"and is due for annual maintenance."
            ),
            type="maintenance",
            severity="medium",
        ))

    if months >= thresholds.warranty_months:
        alerts.append(AlertDraft(
            device_id=device.id,
            alert=f"Warranty Expired - {device.device_name}",
            description=(
                f"{device.device_name} warranty has expired. "
                f"Consider replacement or extended support."
            ),
            type="end_of_life",
            severity="high",
        ))

    return alerts


def evaluate_end_of_life(
    device: DeviceSnapshot,
    today: date,
    thresholds: AlertThresholds = DEFAULT_THRESHOLDS,
) -> list[AlertDraft]:
    if not device.is_active:
        return []
    purchased = _purchase_date(device)
    if purchased is None:
        return []

    years = years_in_service(purchased, today)
    alerts = []

    if years >= thresholds.end_of_life_years:
        alerts.append(AlertDraft(
            device_id=device.id,
            alert=f"End of Life - {device.device_name}",
            description=(
                f"{device.device_name} ({device.model}) has been in service for {years} years "
                f"and may be approaching end of life. Consider replacement planning."
            ),
            type="end_of_life",
            severity="critical",
        ))

    if years >= thresholds.critical_end_of_life_years:
        alerts.append(AlertDraft(
            device_id=device.id,
            alert=f"Critical End of Life - {device.device_name}",
            description=(
                f"{device.device_name} ({device.model}) has been in service for {years} years "
                f"and should be replaced immediately."
            ),
            type="end_of_life",
            severity="critical",
        ))

    return alerts


def evaluate_device(
    device: DeviceSnapshot,
    today: date,
    thresholds: AlertThresholds = DEFAULT_THRESHOLDS,
) -> list[AlertDraft]:
    """All rule families for one device, in utilization/maintenance/end-of-life order."""
    return (
        evaluate_utilization(device, today, thresholds)
        + evaluate_maintenance(device, today, thresholds)
        + evaluate_end_of_life(device, today, thresholds)
    )
