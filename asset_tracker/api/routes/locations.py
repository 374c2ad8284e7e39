"""
Location management endpoints
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy import desc
from typing import List
import structlog

from asset_tracker.database.connection import get_database
from asset_tracker.models.location import Location
from asset_tracker.schemas.location import LocationCreate, LocationUpdate, LocationResponse

logger = structlog.get_logger(__name__)
router = APIRouter()

def _get_location_or_404(db: Session, location_id: int) -> Location:
    location = db.query(Location).filter(Location.id == location_id).first()
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    return location

@router.get("/locations", response_model=List[LocationResponse])
async def get_locations(db: Session = Depends(get_database)):
    """Get all locations, newest first"""
    locations = db.query(Location).order_by(desc(Location.created_at), desc(Location.id)).all()
    return [LocationResponse.from_orm(location) for location in locations]

@router.post("/locations", response_model=LocationResponse)
async def create_location(location_data: LocationCreate, db: Session = Depends(get_database)):
    """Create a new location"""
    location = Location(**location_data.dict())
    db.add(location)
    db.commit()
    db.refresh(location)
    
    logger.info("Location created", location_id=location.id, name=location.location_name)
    return LocationResponse.from_orm(location)

@router.put("/locations/{location_id}", response_model=LocationResponse)
async def update_location(
    location_id: int,
    location_data: LocationUpdate,
    db: Session = Depends(get_database)
):
    """Update a location"""
    location = _get_location_or_404(db, location_id)
    
    for field, value in location_data.dict(exclude_unset=True).items():
        setattr(location, field, value)
    
    db.commit()
    db.refresh(location)
    
    logger.info("Location updated", location_id=location.id)
    return LocationResponse.from_orm(location)

@router.delete("/locations/{location_id}")
async def delete_location(location_id: int, db: Session = Depends(get_database)):
    """Delete a location; its devices are kept with no location"""
    location = _get_location_or_404(db, location_id)
    db.delete(location)
    db.commit()
    
    logger.info("Location deleted", location_id=location_id)
    return {"success": True}
