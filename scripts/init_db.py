#!/usr/bin/env python3
"""
Initialize the database with sample data
"""

import sys
import os
from datetime import date, timedelta
import random

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from asset_tracker.database.connection import init_database, engine
from asset_tracker.models.device import Device
from asset_tracker.models.location import Location
from asset_tracker.models.user import User
from asset_tracker.models.utilization_log import UtilizationLog
from sqlalchemy.orm import sessionmaker

SAMPLE_LOCATIONS = [
    {"location_name": "Central Office", "address": "100 Main St", "city": "Denver", "country": "USA"},
    {"location_name": "North Exchange", "address": "2200 Ridge Rd", "city": "Boulder", "country": "USA"},
]

# (serial, name, type, status, model, years in service, typical daily hours)
SAMPLE_DEVICES = [
    ("RTR-0001", "Core Router 1", "router", "Active", "Cisco ASR 9000", 8, (20, 24)),
    ("SW-0001", "Access Switch 1", "switch", "Active", "Juniper EX4300", 4, (8, 16)),
    ("MDM-0001", "Backup Modem", "modem", "Active", "Arris SB8200", 2, (0, 2)),
    ("CBL-0001", "Fiber Trunk A", "cable", "Maintenance", "Corning SMF-28", 6, (10, 20)),
    ("SRV-0001", "NMS Server", "server", "Active", "Dell R740", 1, (12, 24)),
    ("OTH-0001", "Spare Patch Panel", "other", "Decommissioned", "Panduit CP48", 10, (0, 1)),
]

def create_sample_data(days: int = 30):
    """Create sample data for a demo installation"""
    
    init_database()
    
    Session = sessionmaker(bind=engine)
    session = Session()
    
    try:
        admin = session.query(User).filter(User.email == "admin@telecom.demo").first()
        if not admin:
            admin = User(email="admin@telecom.demo", role="admin")
            session.add(admin)
        
        locations = []
        for location_data in SAMPLE_LOCATIONS:
            location = session.query(Location).filter(
                Location.location_name == location_data["location_name"]
            ).first()
            if not location:
                location = Location(**location_data)
                session.add(location)
            locations.append(location)
        session.commit()
        print("✅ Sample users and locations created")
        
        today = date.today()
        for index, (serial, name, device_type, status, model, years, hours) in enumerate(SAMPLE_DEVICES):
            if session.query(Device).filter(Device.serial_number == serial).first():
                continue
            device = Device(
                device_name=name,
                type=device_type,
                status=status,
                serial_number=serial,
                model=model,
                purchase_date=today.replace(year=today.year - years, day=1),
                location_id=locations[index % len(locations)].id
            )
            session.add(device)
            session.flush()
            
            for offset in range(days):
                session.add(UtilizationLog(
                    device_id=device.id,
                    hours_used=random.randint(*hours),
                    date=today - timedelta(days=offset),
                    logged_by=admin.id
                ))
        
        session.commit()
        print("✅ Sample devices and utilization logs created")
        print("\n🎉 Database initialization complete!")
        
    except Exception as e:
        print(f"❌ Error initializing database: {e}")
        session.rollback()
        raise
    finally:
        session.close()

if __name__ == "__main__":
    create_sample_data()
