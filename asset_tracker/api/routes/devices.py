"""
Device management endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from sqlalchemy import desc
from typing import List, Optional
import structlog

from asset_tracker.database.connection import get_database
from asset_tracker.models.device import Device
from asset_tracker.models.location import Location
from asset_tracker.schemas.device import DeviceCreate, DeviceUpdate, DeviceResponse

logger = structlog.get_logger(__name__)
router = APIRouter()

def _to_response(device: Device) -> DeviceResponse:
    response = DeviceResponse.from_orm(device)
    if device.location is not None:
        response.location_name = device.location.location_name
        response.city = device.location.city
        response.country = device.location.country
    return response

def _get_device_or_404(db: Session, device_id: int) -> Device:
    device = db.query(Device).filter(Device.id == device_id).first()
    if not device:
        raise HTTPException(status_code=404, detail="Device not found")
    return device

def _check_location(db: Session, location_id: Optional[int]):
    if location_id is not None and not db.query(Location).filter(Location.id == location_id).first():
        raise HTTPException(status_code=400, detail="Location not found")

@router.get("/devices", response_model=List[DeviceResponse])
async def get_devices(
    status: Optional[str] = Query(None),
    device_type: Optional[str] = Query(None),
    db: Session = Depends(get_database)
):
    """Get devices with their location, newest first"""
    
    query = db.query(Device)
    
    # Apply filters
    if status:
        query = query.filter(Device.status == status)
    if device_type:
        query = query.filter(Device.type == device_type)
    
    devices = query.order_by(desc(Device.created_at), desc(Device.id)).all()
    return [_to_response(device) for device in devices]

@router.get("/devices/{device_id}", response_model=DeviceResponse)
async def get_device(device_id: int, db: Session = Depends(get_database)):
    """Get a specific device"""
    
    return _to_response(_get_device_or_404(db, device_id))

@router.post("/devices", response_model=DeviceResponse)
async def create_device(device_data: DeviceCreate, db: Session = Depends(get_database)):
    """Create a new device"""
    
    # Check if serial number is already registered
    existing_device = db.query(Device).filter(Device.serial_number == device_data.serial_number).first()
    if existing_device:
        raise HTTPException(status_code=400, detail="Device with this serial number already exists")
    _check_location(db, device_data.location_id)
    
    device = Device(**device_data.dict())
    db.add(device)
    db.commit()
    db.refresh(device)
    
    logger.info("Device created", device_id=device.id, name=device.device_name)
    return _to_response(device)

@router.put("/devices/{device_id}", response_model=DeviceResponse)
async def update_device(
    device_id: int, 
    device_data: DeviceUpdate, 
    db: Session = Depends(get_database)
):
    """Update a device"""
    
    device = _get_device_or_404(db, device_id)
    
    update_data = device_data.dict(exclude_unset=True)
    if "serial_number" in update_data:
        conflict = db.query(Device).filter(
            Device.serial_number == update_data["serial_number"],
            Device.id != device_id
        ).first()
        if conflict:
            raise HTTPException(status_code=400, detail="Device with this serial number already exists")
    if "location_id" in update_data:
        _check_location(db, update_data["location_id"])
    for field, value in update_data.items():
        setattr(device, field, value)
    
    db.commit()
    db.refresh(device)
    
    logger.info("Device updated", device_id=device.id)
    return _to_response(device)

@router.delete("/devices/{device_id}")
async def delete_device(device_id: int, db: Session = Depends(get_database)):
    """Delete a device"""
    
    device = _get_device_or_404(db, device_id)
    db.delete(device)
    db.commit()
    
    logger.info("Device deleted", device_id=device_id)
    return {"success": True}
