"""
Driver database model.
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, Enum
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.enums import DriverStatus, enum_values


class Driver(Base):
    """
    Driver account with licence, vehicle and payout references.
    
    Insurance, bank and vehicle ids point at records held by other systems
    and are stored as plain integers.
    """
    __tablename__ = "drivers"
    
    id = Column("driver_id", Integer, primary_key=True, index=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    phone_number = Column(String(15), nullable=True)
    email = Column(String(100), unique=True, index=True, nullable=False)
    
    # Address
    street_address = Column(String(200), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    zip_code = Column(String(20), nullable=True)
    
    # Licence, insurance and payouts
    license_number = Column(String(50), nullable=True)
    insurance_id = Column(Integer, nullable=True)
    bank_id = Column(Integer, nullable=True)
    
    # Vehicle
    vehicle_id = Column(Integer, nullable=True)
    vehicle_color = Column(String(50), nullable=True)
    vehicle_make = Column(String(50), nullable=True)
    vehicle_model = Column(String(50), nullable=True)
    vehicle_license_plate = Column(String(20), nullable=True)
    
    status = Column(
        Enum(DriverStatus, name="driver_status", values_callable=enum_values),
        default=DriverStatus.ACTIVE,
        nullable=False,
        index=True
    )
    
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    @property
    def is_active(self) -> bool:
        return self.status == DriverStatus.ACTIVE
    
    def __repr__(self):
        return f"<Driver(id={self.id}, email='{self.email}', status='{self.status.value}')>"
