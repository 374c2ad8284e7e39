"""
User model for operators who record utilization
"""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from asset_tracker.database.connection import Base

class User(Base):
    """Operator account"""
    
    __tablename__ = "users"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role = Column(String(20), nullable=False, default="technician")  # admin, manager, technician
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    utilization_logs = relationship("UtilizationLog", back_populates="user")
    
    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
