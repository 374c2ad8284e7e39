"""
Device model for telecom equipment
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from asset_tracker.database.connection import Base

class Device(Base):
    """Device model representing tracked telecom equipment"""
    
    __tablename__ = "devices"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    device_name = Column(String(255), nullable=False)
    type = Column(String(100), nullable=False, index=True)  # router, switch, modem, cable, server, other
    status = Column(String(50), nullable=False, default="Active", index=True)  # Active, Inactive, Maintenance, Decommissioned
    serial_number = Column(String(255), unique=True, nullable=False)
    model = Column(String(255), nullable=False)
    purchase_date = Column(Date, nullable=False)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="SET NULL"), index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    # Relationships
    location = relationship("Location", back_populates="devices")
    utilization_logs = relationship("UtilizationLog", back_populates="device", cascade="all, delete-orphan")
    alerts = relationship("SystemAlert", back_populates="device")
    
    def __repr__(self):
        return f"<Device(id={self.id}, name={self.device_name}, status={self.status})>"
