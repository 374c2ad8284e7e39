"""
Utilization log model for daily usage hours
"""

from sqlalchemy import Column, Integer, Date, DateTime, Text, ForeignKey, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from asset_tracker.database.connection import Base

class UtilizationLog(Base):
    """Hours a device was in use on a given date"""
    
    __tablename__ = "utilization_logs"
    __table_args__ = (
        CheckConstraint("hours_used >= 0", name="ck_utilization_logs_hours_used"),
    )
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    device_id = Column(Integer, ForeignKey("devices.id", ondelete="CASCADE"), nullable=False, index=True)
    hours_used = Column(Integer, nullable=False)
    date = Column(Date, nullable=False, index=True)
    notes = Column(Text)
    logged_by = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    # Relationships
    device = relationship("Device", back_populates="utilization_logs")
    user = relationship("User", back_populates="utilization_logs")
    
    def __repr__(self):
        return f"<UtilizationLog(device_id={self.device_id}, date={self.date}, hours={self.hours_used})>"
