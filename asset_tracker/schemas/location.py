"""
Location Pydantic schemas
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

class LocationBase(BaseModel):
    """Base location schema"""
    location_name: str = Field(..., min_length=1, description="Site name")
    address: str = Field(..., description="Street address")
    city: str = Field(..., description="City")
    country: str = Field("USA", description="Country")

class LocationCreate(LocationBase):
    """Schema for creating a location"""
    pass

class LocationUpdate(BaseModel):
    """Schema for updating a location"""
    location_name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None

    @field_validator("location_name", "address", "city", "country")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

class LocationResponse(LocationBase):
    """Schema for location response"""
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True
