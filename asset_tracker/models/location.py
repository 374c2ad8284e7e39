"""
Location model for equipment sites
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from asset_tracker.database.connection import Base

class Location(Base):
    """Site where devices are installed"""
    
    __tablename__ = "locations"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    location_name = Column(String(255), nullable=False)
    address = Column(Text, nullable=False)
    city = Column(String(100), nullable=False)
    country = Column(String(100), nullable=False, default="USA")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    devices = relationship("Device", back_populates="location")
    
    def __repr__(self):
        return f"<Location(id={self.id}, name={self.location_name}, city={self.city})>"
