"""
Utilization analytics endpoints
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
import structlog

from asset_tracker.api.dependencies import get_analytics_service
from asset_tracker.services.analytics_service import AnalyticsService

logger = structlog.get_logger(__name__)
router = APIRouter()

@router.get("/device-utilization")
async def run_analytics_action(
    action: Optional[str] = Query(None),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """Compute a utilization view: utilization-trends, device-efficiency, peak-usage or utilization-summary"""
    return service.run(action)
