"""
System alert Pydantic schemas
"""

from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional
from datetime import datetime

AlertType = Literal["maintenance", "low_stock", "end_of_life", "system"]
AlertSeverity = Literal["low", "medium", "high", "critical"]
AlertStatus = Literal["Active", "Resolved"]

class AlertBase(BaseModel):
    """Base alert schema"""
    alert: str = Field(..., min_length=1, description="Alert title")
    description: str = Field(..., description="Alert details")
    type: AlertType = Field(..., description="Alert category")
    severity: AlertSeverity = Field(..., description="Alert severity")
    status: AlertStatus = Field("Active", description="Alert status")
    device_id: Optional[int] = Field(None, description="Device the alert concerns, if any")

class AlertCreate(AlertBase):
    """Schema for an operator-raised alert"""
    pass

class AlertUpdate(BaseModel):
    """Schema for updating an alert"""
    alert: Optional[str] = None
    description: Optional[str] = None
    type: Optional[AlertType] = None
    severity: Optional[AlertSeverity] = None
    status: Optional[AlertStatus] = None
    device_id: Optional[int] = None

    @field_validator("alert", "description", "type", "severity", "status")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

class AlertResponse(AlertBase):
    """Schema for alert response"""
    id: int
    device_name: Optional[str] = None
    device_type: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True
