"""
Utilization log endpoints
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy import desc
from typing import List, Optional
import structlog

from asset_tracker.database.connection import get_database
from asset_tracker.models.device import Device
from asset_tracker.models.user import User
from asset_tracker.models.utilization_log import UtilizationLog
from asset_tracker.schemas.utilization import (
    UtilizationLogCreate,
    UtilizationLogUpdate,
    UtilizationLogResponse,
)

logger = structlog.get_logger(__name__)
router = APIRouter()

DEFAULT_USER_EMAIL = "admin@telecom.demo"

def _to_response(log: UtilizationLog) -> UtilizationLogResponse:
    response = UtilizationLogResponse.from_orm(log)
    if log.device is not None:
        response.device_name = log.device.device_name
        response.device_type = log.device.type
    if log.user is not None:
        response.logged_by_email = log.user.email
    return response

def resolve_user(db: Session, email: Optional[str]) -> User:
    """Find the operator by email, creating a technician if unknown.

    Without an email the first user is used, or a default admin is created.
    """
    if email:
        user = db.query(User).filter(User.email == email).first()
        if user is None:
            user = User(email=email, role="technician")
            db.add(user)
            db.flush()
            logger.info("User created for utilization log", email=email)
        return user
    
    user = db.query(User).order_by(User.id).first()
    if user is None:
        user = User(email=DEFAULT_USER_EMAIL, role="admin")
        db.add(user)
        db.flush()
        logger.info("Default user created", email=DEFAULT_USER_EMAIL)
    return user

def _check_device(db: Session, device_id: int):
    if not db.query(Device).filter(Device.id == device_id).first():
        raise HTTPException(status_code=400, detail="Device not found")

def _get_log_or_404(db: Session, log_id: int) -> UtilizationLog:
    log = db.query(UtilizationLog).filter(UtilizationLog.id == log_id).first()
    if not log:
        raise HTTPException(status_code=404, detail="Utilization log not found")
    return log

@router.get("/utilization-logs", response_model=List[UtilizationLogResponse])
async def get_utilization_logs(device_id: Optional[int] = None, db: Session = Depends(get_database)):
    """Get utilization logs, newest first"""
    query = db.query(UtilizationLog)
    if device_id is not None:
        query = query.filter(UtilizationLog.device_id == device_id)
    logs = query.order_by(desc(UtilizationLog.created_at), desc(UtilizationLog.id)).all()
    return [_to_response(log) for log in logs]

@router.post("/utilization-logs", response_model=UtilizationLogResponse)
async def create_utilization_log(log_data: UtilizationLogCreate, db: Session = Depends(get_database)):
    """Record device usage for a day"""
    _check_device(db, log_data.device_id)
    user = resolve_user(db, log_data.logged_by)
    
    log = UtilizationLog(
        device_id=log_data.device_id,
        hours_used=log_data.hours_used,
        date=log_data.date,
        notes=log_data.notes,
        logged_by=user.id
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    
    logger.info("Utilization log created", log_id=log.id, device_id=log.device_id, hours=log.hours_used)
    return _to_response(log)

@router.put("/utilization-logs/{log_id}", response_model=UtilizationLogResponse)
async def update_utilization_log(
    log_id: int,
    log_data: UtilizationLogUpdate,
    db: Session = Depends(get_database)
):
    """Update a utilization log"""
    log = _get_log_or_404(db, log_id)
    
    update_data = log_data.dict(exclude_unset=True)
    if "device_id" in update_data:
        _check_device(db, update_data["device_id"])
    if "logged_by" in update_data:
        update_data["logged_by"] = resolve_user(db, update_data["logged_by"]).id
    for field, value in update_data.items():
        setattr(log, field, value)
    
    db.commit()
    db.refresh(log)
    
    logger.info("Utilization log updated", log_id=log.id)
    return _to_response(log)

@router.delete("/utilization-logs/{log_id}")
async def delete_utilization_log(log_id: int, db: Session = Depends(get_database)):
    """Delete a utilization log"""
    log = _get_log_or_404(db, log_id)
    db.delete(log)
    db.commit()
    
    logger.info("Utilization log deleted", log_id=log_id)
    return {"message": "Utilization log deleted successfully"}
