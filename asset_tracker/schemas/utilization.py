"""
Utilization log Pydantic schemas
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
import datetime as dt

class UtilizationLogCreate(BaseModel):
    """Schema for recording device usage"""
    device_id: int = Field(..., description="Device the hours belong to")
    hours_used: int = Field(..., ge=0, le=24, description="Hours the device was in use")
    date: dt.date = Field(..., description="Day of use")
    notes: Optional[str] = Field(None, description="Free text notes")
    logged_by: Optional[str] = Field(None, description="Email of the operator recording the log")

class UtilizationLogUpdate(BaseModel):
    """Schema for updating a log"""
    device_id: Optional[int] = None
    hours_used: Optional[int] = Field(None, ge=0, le=24)
    date: Optional[dt.date] = None
    notes: Optional[str] = None
    logged_by: Optional[str] = None

    @field_validator("device_id", "hours_used", "date")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

class UtilizationLogResponse(BaseModel):
    """Schema for log response"""
    id: int
    device_id: int
    hours_used: int
    date: dt.date
    notes: Optional[str] = None
    logged_by: int
    device_name: Optional[str] = None
    device_type: Optional[str] = None
    logged_by_email: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    
    class Config:
        from_attributes = True
