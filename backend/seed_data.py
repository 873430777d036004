"""
Database seeding script for local development.

Creates one rider, one driver and a Requested trip so the web client has
something to show. Run this after the database is reachable.
"""

import asyncio
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from backend.app.db.session import AsyncSessionLocal, engine, Base
from backend.app.models.rider import Rider
from backend.app.models.driver import Driver
from backend.app.models.trip import Trip
from backend.app.models.enums import AccountStatus, DriverStatus, LocationStatus, RideStatus
from sqlalchemy import select

RIDER_EMAIL = "rider@example.com"
DRIVER_EMAIL = "driver@example.com"


async def seed_data():
    """
    Seed demo accounts and a trip.
    
    Skips everything if the demo rider already exists.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    async with AsyncSessionLocal() as db:
        print("🌱 Starting demo data seeding...")
        
        result = await db.execute(select(Rider).where(Rider.email == RIDER_EMAIL))
        if result.scalar_one_or_none():
            print("ℹ️  Demo rider already exists, skipping seeding")
            return
        
        db.add(Rider(
            first_name="Riley",
            last_name="Rider",
            date_of_birth=date(1990, 5, 17),
            phone_number="555-0100",
            email=RIDER_EMAIL,
            street_address="100 Main St",
            city="Springfield",
            state="IL",
            zip_code="62701",
            location_status=LocationStatus.ON,
            account_status=AccountStatus.ACTIVE
        ))
        print(f"✅ Created rider ({RIDER_EMAIL})")
        
        db.add(Driver(
            first_name="Dana",
            last_name="Driver",
            date_of_birth=date(1985, 2, 3),
            phone_number="555-0200",
            email=DRIVER_EMAIL,
            city="Springfield",
            state="IL",
            license_number="D123-4567-8901",
            vehicle_color="Blue",
            vehicle_make="Toyota",
            vehicle_model="Prius",
            vehicle_license_plate="RIDE 42",
            status=DriverStatus.ACTIVE
        ))
        print(f"✅ Created driver ({DRIVER_EMAIL})")
        
        db.add(Trip(
            pickup_location="100 Main St, Springfield",
            dropoff_location="Springfield Airport",
            estimated_time=18,
            fare=Decimal("24.50"),
            tip=Decimal("0"),
            ride_status=RideStatus.REQUESTED,
            rider_email=RIDER_EMAIL
        ))
        print("✅ Created a Requested trip")
        
        await db.commit()
        
        print("\n🎉 Demo data seeding completed successfully!")
        print("\nSign in at the identity provider with these e-mails to see the data:")
        print(f"  - rider:  {RIDER_EMAIL}")
        print(f"  - driver: {DRIVER_EMAIL}")
    
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_data())
