"""
Utilization aggregation.

Turns a flat list of UsageRecord into the summary shapes served by the
analytics endpoints. All functions are single-pass and side-effect free.

Zero denominators (no logs, no active devices, no distinct days) yield 0.0
instead of NaN or infinity.
"""
from __future__ import annotations

from datetime import date
from typing import Iterable

import structlog

from asset_tracker.analytics.records import UsageRecord, coerce_date
from asset_tracker.core.exceptions import MalformedRecordError

logger = structlog.get_logger(__name__)

HOURS_PER_DAY = 24


def safe_divide(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


def valid_records(records: Iterable[UsageRecord]) -> list[tuple[date, UsageRecord]]:
    """
    Pair each record with its parsed date, dropping malformed ones.

    A record with an unparseable date or negative hours is logged and
    skipped; it never aborts the aggregation.
    """
    valid = []
    for record in records:
        try:
            log_date = coerce_date(record.date, record.log_id)
            if record.hours_used is None or record.hours_used < 0:
                raise MalformedRecordError("Negative hours", record.log_id)
        except MalformedRecordError as exc:
            logger.warning("Skipping utilization log", log_id=exc.record_id, reason=str(exc))
            continue
        valid.append((log_date, record))
    return valid


def utilization_trends(records: Iterable[UsageRecord]) -> list[dict]:
    """Group logs by calendar date, oldest first."""
    trends: dict[date, dict] = {}
    for log_date, record in valid_records(records):
        entry = trends.setdefault(log_date, {
            "date": log_date,
            "total_hours": 0,
            "device_count": 0,
            "devices": [],
        })
        entry["total_hours"] += record.hours_used
        # one log per device per day is the norm, so each log counts once
        entry["device_count"] += 1
        entry["devices"].append({
            "name": record.device_name,
            "type": record.device_type,
            "hours": record.hours_used,
        })

    result = []
    for log_date in sorted(trends):
        entry = trends[log_date]
        entry["average_hours"] = safe_divide(entry["total_hours"], entry["device_count"])
        result.append(entry)
    return result


def device_efficiency(records: Iterable[UsageRecord], workday_hours: int = 8) -> list[dict]:
    """
    Per-device usage metrics over whatever window ``records`` covers.

    utilization_rate compares usage to a 24h day, efficiency_score to a
    ``workday_hours`` day; both are capped at 100.
    """
    devices: dict[int, dict] = {}
    for log_date, record in valid_records(records):
        entry = devices.setdefault(record.device_id, {
            "device_id": record.device_id,
            "device_name": record.device_name,
            "type": record.device_type,
            "status": record.device_status,
            "total_hours": 0,
            "days_active": set(),
        })
        entry["total_hours"] += record.hours_used
        entry["days_active"].add(log_date)

    result = []
    for entry in devices.values():
        days = len(entry.pop("days_active"))
        total = entry["total_hours"]
        entry["average_daily_hours"] = safe_divide(total, days)
        entry["utilization_rate"] = min(safe_divide(total, days * HOURS_PER_DAY), 1) * 100
        entry["efficiency_score"] = min(safe_divide(total, days * workday_hours), 1) * 100
        result.append(entry)
    return result


def peak_usage_by_type(records: Iterable[UsageRecord]) -> list[dict]:
    """Highest single log per device type plus the average over that type's logs."""
    peaks: dict[str, dict] = {}
    for log_date, record in valid_records(records):
        entry = peaks.setdefault(record.device_type, {
            "type": record.device_type,
            "peak_hours": 0,
            "peak_date": None,
            "total_usage": 0,
            "usage_count": 0,
        })
        # strict comparison keeps the first log seen on ties
        if entry["peak_date"] is None or record.hours_used > entry["peak_hours"]:
            entry["peak_hours"] = record.hours_used
            entry["peak_date"] = log_date
        entry["total_usage"] += record.hours_used
        entry["usage_count"] += 1

    for entry in peaks.values():
        entry["average_usage"] = safe_divide(entry["total_usage"], entry["usage_count"])
    return list(peaks.values())


def utilization_summary(records: Iterable[UsageRecord], active_devices: int) -> dict:
    """Single aggregate over the window, rates rounded to two decimals."""
    total_hours = 0
    days = set()
    for log_date, record in valid_records(records):
        total_hours += record.hours_used
        days.add(log_date)
    total_days = len(days)

    rate = safe_divide(total_hours, active_devices * total_days * HOURS_PER_DAY) * 100
    return {
        "total_hours": total_hours,
        "total_days": total_days,
        "active_devices": active_devices,
        "average_daily_usage": round(safe_divide(total_hours, total_days), 2),
        "average_device_usage": round(safe_divide(total_hours, active_devices), 2),
        "utilization_rate": round(min(rate, 100.0), 2),
    }


def first_of_month(today: date, months_back: int = 0) -> date:
    """First day of the month ``months_back`` calendar months before ``today``."""
    index = today.year * 12 + (today.month - 1) - months_back
    return date(index // 12, index % 12 + 1, 1)


def monthly_usage(records: Iterable[UsageRecord]) -> list[dict]:
    """Total hours per calendar month, chronological."""
    months: dict[tuple[int, int], int] = {}
    for log_date, record in valid_records(records):
        key = (log_date.year, log_date.month)
        months[key] = months.get(key, 0) + record.hours_used

    return [
        {
            "month": date(year, month, 1).strftime("%b"),
            "year": year,
            "usage_hours": hours,
        }
        for (year, month), hours in sorted(months.items())
    ]
