"""
Request-scoped collaborators for route handlers
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from asset_tracker.analytics.rules import AlertThresholds
from asset_tracker.core.config import settings
from asset_tracker.database.connection import get_database
from asset_tracker.repositories.utilization_repository import UtilizationRepository
from asset_tracker.services.alert_service import AlertService
from asset_tracker.services.analytics_service import AnalyticsService

def get_repository(db: Session = Depends(get_database)) -> UtilizationRepository:
    return UtilizationRepository(db)

def get_alert_service(repository: UtilizationRepository = Depends(get_repository)) -> AlertService:
    return AlertService(
        repository,
        thresholds=AlertThresholds.from_settings(settings),
        deduplicate=settings.deduplicate_alerts,
    )

def get_analytics_service(repository: UtilizationRepository = Depends(get_repository)) -> AnalyticsService:
    return AnalyticsService(
        repository,
        window_days=settings.trailing_window_days,
        workday_hours=settings.workday_hours,
        peak_sample_size=settings.peak_usage_sample_size,
    )
