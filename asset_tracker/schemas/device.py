"""
Device Pydantic schemas
"""

from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional
from datetime import date, datetime

DeviceType = Literal["router", "switch", "modem", "cable", "server", "other"]
DeviceStatus = Literal["Active", "Inactive", "Maintenance", "Decommissioned"]

class DeviceBase(BaseModel):
    """Base device schema"""
    device_name: str = Field(..., min_length=1, description="Device name")
    type: DeviceType = Field(..., description="Type of device")
    status: DeviceStatus = Field("Active", description="Device status")
    serial_number: str = Field(..., min_length=1, description="Unique serial number")
    model: str = Field(..., description="Hardware model")
    purchase_date: date = Field(..., description="Date the device was purchased")
    location_id: Optional[int] = Field(None, description="Location the device is installed at")

class DeviceCreate(DeviceBase):
    """Schema for creating a device"""
    pass

class DeviceUpdate(BaseModel):
    """Schema for updating a device"""
    device_name: Optional[str] = None
    type: Optional[DeviceType] = None
    status: Optional[DeviceStatus] = None
    serial_number: Optional[str] = None
    model: Optional[str] = None
    purchase_date: Optional[date] = None
    location_id: Optional[int] = None

    @field_validator("device_name", "type", "status", "serial_number", "model", "purchase_date")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

class DeviceResponse(DeviceBase):
    """Schema for device response"""
    id: int
    location_name: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True
