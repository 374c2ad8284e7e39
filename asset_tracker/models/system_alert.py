"""
System alert model
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from asset_tracker.database.connection import Base

class SystemAlert(Base):
    """Alert raised by rule evaluation or by an operator"""
    
    __tablename__ = "system_alerts"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    alert = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(String(50), nullable=False, index=True)  # maintenance, low_stock, end_of_life, system
    severity = Column(String(20), nullable=False)  # low, medium, high, critical
    status = Column(String(20), nullable=False, default="Active", index=True)  # Active, Resolved
    device_id = Column(Integer, ForeignKey("devices.id", ondelete="SET NULL"), index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    device = relationship("Device", back_populates="alerts")
    
    def __repr__(self):
        return f"<SystemAlert(id={self.id}, alert={self.alert}, severity={self.severity})>"
