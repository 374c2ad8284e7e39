"""
Dashboard statistics endpoints
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func, desc
import structlog

from asset_tracker.api.dependencies import get_analytics_service
from asset_tracker.core.config import settings
from asset_tracker.database.connection import get_database
from asset_tracker.models.device import Device
from asset_tracker.models.location import Location
from asset_tracker.models.system_alert import SystemAlert
from asset_tracker.services.analytics_service import AnalyticsService

logger = structlog.get_logger(__name__)
router = APIRouter()

@router.get("/dashboard/stats")
async def get_dashboard_stats(db: Session = Depends(get_database)):
    """Device counts by status, open alerts and number of locations"""
    
    status_counts = dict(
        db.query(Device.status, func.count(Device.id)).group_by(Device.status).all()
    )
    active_alerts = db.query(func.count(SystemAlert.id)).filter(SystemAlert.status == "Active").scalar() or 0
    locations = db.query(func.count(Location.id)).scalar() or 0
    
    return {
        "total_devices": sum(status_counts.values()),
        "available_devices": status_counts.get("Active", 0),
        "in_use_devices": status_counts.get("Inactive", 0),
        "maintenance_devices": status_counts.get("Maintenance", 0),
        "decommissioned_devices": status_counts.get("Decommissioned", 0),
        "active_alerts": active_alerts,
        "locations": locations
    }

@router.get("/dashboard/device-types")
async def get_device_type_stats(db: Session = Depends(get_database)):
    """Number of devices per type, largest first"""
    
    count = func.count(Device.id).label("count")
    rows = db.query(Device.type, count).group_by(Device.type).order_by(desc(count), Device.type).all()
    return [{"type": device_type, "count": total} for device_type, total in rows]

@router.get("/dashboard/monthly-usage")
async def get_monthly_usage(service: AnalyticsService = Depends(get_analytics_service)):
    """Hours used per calendar month over the trailing months"""
    
    return service.monthly_usage(settings.monthly_usage_months)
