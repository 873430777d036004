"""
Rider database model.
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, Enum
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.enums import AccountStatus, LocationStatus, enum_values


class Rider(Base):
    """
    Rider account.
    
    Created on registration, edited from the account page and never
    physically deleted: deactivation flips ``account_status`` to inactive.
    """
    __tablename__ = "riders"
    
    id = Column("rider_id", Integer, primary_key=True, index=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    phone_number = Column(String(15), nullable=True)
    email = Column(String(100), unique=True, index=True, nullable=False)
    
    # Address
    street_address = Column(String(200), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    zip_code = Column(String(20), nullable=False)
    
    location_status = Column(
        Enum(LocationStatus, name="rider_location_status", values_callable=enum_values),
        default=LocationStatus.OFF,
        nullable=False
    )
    account_status = Column(
        Enum(AccountStatus, name="rider_account_status", values_callable=enum_values),
        default=AccountStatus.ACTIVE,
        nullable=False,
        index=True
    )
    
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    @property
    def is_active(self) -> bool:
        return self.account_status == AccountStatus.ACTIVE
    
    def __repr__(self):
        return f"<Rider(id={self.id}, email='{self.email}', status='{self.account_status.value}')>"
