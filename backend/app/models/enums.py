"""
Enumerations shared by the rider, driver and trip models.
"""

import enum


class UserRole(str, enum.Enum):
    """
    Roles granted by the identity provider.
    
    Roles:
        RIDER: Requests trips and manages a rider account
        DRIVER: Accepts and completes trips, manages a driver account
    """
    RIDER = "rider"
    DRIVER = "driver"


class AccountStatus(str, enum.Enum):
    """Rider account status. Deactivation is a soft delete."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class LocationStatus(str, enum.Enum):
    """Whether a rider shares location."""
    ON = "on"
    OFF = "off"


class DriverStatus(str, enum.Enum):
    """Driver account status. Deactivation is a soft delete."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class RideStatus(str, enum.Enum):
    """
    Trip lifecycle.
    
    Requested -> InProgress -> Completed
    Requested | InProgress -> Cancelled
    """
    REQUESTED = "Requested"  # Created by a rider, waiting for a driver
    IN_PROGRESS = "InProgress"  # Accepted by a driver
    COMPLETED = "Completed"  # Driver marked the trip done
    CANCELLED = "Cancelled"  # Withdrawn before completion


def enum_values(enum_cls):
    """Persist enum values rather than member names."""
    return [member.value for member in enum_cls]
