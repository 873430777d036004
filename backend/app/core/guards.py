"""
Security guards for role-based and ownership-based access control.

Roles come from the identity provider (``rider``, ``driver``) and are copied
into the service token when it is issued.
"""

from typing import List, Optional
from fastapi import Depends
from backend.app.core.exceptions import InsufficientPermissionsError
from backend.app.models.enums import UserRole
from backend.app.core.dependencies import get_current_user


def token_roles(current_user: dict) -> List[str]:
    """Return the role names carried by a decoded token."""
    roles = current_user.get("roles")
    if isinstance(roles, str):
        return [roles]
    return list(roles or [])


def require_role(allowed_roles: List[UserRole]):
    """
    Dependency factory for role-based access control.
    
    Usage:
        @router.get("/riders/{rider_id}")
        async def get_rider(current_user: dict = Depends(require_role([UserRole.RIDER]))):
            ...
    
    Raises:
        InsufficientPermissionsError if the token carries none of the allowed roles
    """
    async def role_checker(current_user: dict = Depends(get_current_user)) -> dict:
        roles = token_roles(current_user)
        
        if not roles:
            raise InsufficientPermissionsError("Role information missing from token")
        
        if not any(role.value in roles for role in allowed_roles):
            required = ", ".join(role.value for role in allowed_roles)
            raise InsufficientPermissionsError(f"Access denied. Required role: {required}")
        
        return current_user
    
    return role_checker


class OwnershipGuard:
    """
    Ownership guard for account resources.
    
    The service token carries ``rider_id`` / ``driver_id`` claims; a caller may
    only touch the account whose primary key matches the claim.
    """
    
    def __init__(self, claim: str):
        self.claim = claim
    
    def check(self, resource_id: int, current_user: dict) -> bool:
        owner_id: Optional[int] = current_user.get(self.claim)
        return owner_id is not None and int(owner_id) == int(resource_id)
    
    def enforce(self, resource_id: int, current_user: dict) -> None:
        """
        Raises:
            InsufficientPermissionsError if the caller does not own the account
        """
        if not self.check(resource_id, current_user):
            raise InsufficientPermissionsError("You can only access your own account")


rider_ownership = OwnershipGuard("rider_id")
driver_ownership = OwnershipGuard("driver_id")
