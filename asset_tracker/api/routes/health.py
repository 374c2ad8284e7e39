"""
Health check endpoints
"""

from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import structlog

from asset_tracker.database.connection import get_database
from asset_tracker.models import Device, Location, SystemAlert, UtilizationLog

logger = structlog.get_logger(__name__)
router = APIRouter()

SERVICE_NAME = "Telecom Asset Tracker API"
VERSION = "1.0.0"

TRACKED_TABLES = (Device, Location, UtilizationLog, SystemAlert)

@router.get("/health")
async def health_check():
    """Liveness only, no database access"""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }

@router.get("/health/detailed")
async def detailed_health_check(db: Session = Depends(get_database)):
    """Row counts per tracked table; any failing query marks the service unhealthy"""
    tables = {}
    active_alerts = None
    try:
        for model in TRACKED_TABLES:
            tables[model.__tablename__] = db.query(model).count()
        active_alerts = db.query(SystemAlert).filter(SystemAlert.status == "Active").count()
        db_status = "connected"
    except SQLAlchemyError as e:
        logger.error("Database health check failed", error=str(e))
        db_status = "disconnected"
    
    return {
        "status": "healthy" if db_status == "connected" else "unhealthy",
        "database": db_status,
        "tables": tables,
        "active_alerts": active_alerts,
        "service": SERVICE_NAME,
        "version": VERSION
    }
