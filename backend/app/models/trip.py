"""
Trip database model.

Riders and drivers are referenced by e-mail address, the identifier the web
client gets from the identity provider, not by foreign key.
"""

from sqlalchemy import Column, Integer, String, Numeric, DateTime, Enum, CheckConstraint
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.enums import RideStatus, enum_values


class Trip(Base):
    """
    Trip model.
    
    A trip is requested by a rider, accepted by exactly one driver and then
    either completed or cancelled.
    """
    __tablename__ = "trips"
    __table_args__ = (
        CheckConstraint("fare >= 0", name="ck_trips_fare_non_negative"),
        CheckConstraint("tip >= 0", name="ck_trips_tip_non_negative"),
    )
    
    id = Column("ride_id", Integer, primary_key=True, index=True, autoincrement=True)
    
    pickup_location = Column(String(255), nullable=False)
    dropoff_location = Column(String(255), nullable=False)
    estimated_time = Column(Integer, default=0, nullable=False)  # minutes
    fare = Column(Numeric(10, 2), default=0, nullable=False)
    tip = Column(Numeric(10, 2), default=0, nullable=False)
    
    # Status
    ride_status = Column(
        Enum(RideStatus, name="ride_status", values_callable=enum_values),
        default=RideStatus.REQUESTED,
        nullable=False,
        index=True
    )
    
    # Participants (e-mail addresses)
    rider_email = Column(String(100), nullable=False, index=True)
    driver_email = Column(String(100), nullable=True, index=True)
    
    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    accepted_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    
    def __repr__(self):
        return f"<Trip(id={self.id}, rider='{self.rider_email}', status='{self.ride_status.value}')>"
