"""
Alert endpoints: listing, manual alerts and rule-driven alert checks
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from sqlalchemy import desc
from typing import List, Optional
import structlog

from asset_tracker.api.dependencies import get_alert_service
from asset_tracker.database.connection import get_database
from asset_tracker.models.device import Device
from asset_tracker.models.system_alert import SystemAlert
from asset_tracker.schemas.alert import AlertCreate, AlertUpdate, AlertResponse
from asset_tracker.services.alert_service import AlertService

logger = structlog.get_logger(__name__)
router = APIRouter()

def _to_response(alert: SystemAlert) -> AlertResponse:
    response = AlertResponse.from_orm(alert)
    if alert.device is not None:
        response.device_name = alert.device.device_name
        response.device_type = alert.device.type
    return response

def _check_device(db: Session, device_id: Optional[int]):
    if device_id is not None and not db.query(Device).filter(Device.id == device_id).first():
        raise HTTPException(status_code=400, detail="Device not found")

@router.get("/alerts", response_model=List[AlertResponse])
async def get_alerts(
    status: Optional[str] = Query(None),
    severity: Optional[str] = Query(None),
    db: Session = Depends(get_database)
):
    """Get alerts, newest first"""
    query = db.query(SystemAlert)
    if status:
        query = query.filter(SystemAlert.status == status)
    if severity:
        query = query.filter(SystemAlert.severity == severity)
    alerts = query.order_by(desc(SystemAlert.created_at), desc(SystemAlert.id)).all()
    return [_to_response(alert) for alert in alerts]

@router.post("/alerts", response_model=AlertResponse)
async def create_alert(alert_data: AlertCreate, db: Session = Depends(get_database)):
    """Raise an alert manually"""
    _check_device(db, alert_data.device_id)
    alert = SystemAlert(**alert_data.dict())
    db.add(alert)
    db.commit()
    db.refresh(alert)
    
    logger.info("Alert created", alert_id=alert.id, severity=alert.severity)
    return _to_response(alert)

@router.put("/alerts/{alert_id}", response_model=AlertResponse)
async def update_alert(alert_id: int, alert_data: AlertUpdate, db: Session = Depends(get_database)):
    """Update an alert, e.g. mark it Resolved"""
    alert = db.query(SystemAlert).filter(SystemAlert.id == alert_id).first()
    if not alert:
        raise HTTPException(status_code=404, detail="Alert not found")
    
    update_data = alert_data.dict(exclude_unset=True)
    if "device_id" in update_data:
        _check_device(db, update_data["device_id"])
    for field, value in update_data.items():
        setattr(alert, field, value)
    
    db.commit()
    db.refresh(alert)
    
    logger.info("Alert updated", alert_id=alert.id, status=alert.status)
    return _to_response(alert)

@router.post("/device-alerts")
async def run_alert_action(
    action: Optional[str] = Query(None),
    service: AlertService = Depends(get_alert_service)
):
    """Run an alert check: check-utilization, check-maintenance, check-end-of-life or generate-alerts"""
    result = service.run(action)
    logger.info("Alert action completed", action=action, result=result)
    return result
