"""
Authentication API endpoints.

Sign-in happens at the external identity provider. The web client exchanges
its ID token here for a service token that the protected routes accept.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from backend.app.db.session import get_db
from backend.app.models.rider import Rider
from backend.app.models.driver import Driver
from backend.app.models.enums import AccountStatus, DriverStatus, UserRole
from backend.app.schemas.auth import TokenExchangeRequest, TokenResponse, CurrentUserResponse
from backend.app.schemas.common import MessageResponse
from backend.app.core.config import settings
from backend.app.core.identity import IdentityProvider, get_identity_provider, extract_identity
from backend.app.core.jwt import create_access_token
from backend.app.core.dependencies import get_current_user, get_bearer_token
from backend.app.core.guards import token_roles
from backend.app.core.token_revocation import revoke_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/token", response_model=TokenResponse)
async def exchange_token(
    request: TokenExchangeRequest,
    provider: IdentityProvider = Depends(get_identity_provider),
    db: AsyncSession = Depends(get_db)
):
    """
    Exchange an identity-provider ID token for a service token.
    
    The service token carries the signed-in e-mail, the provider's roles and
    the ids of the caller's active rider/driver accounts, if any.
    """
    claims = await provider.verify_id_token(request.id_token)
    identity = extract_identity(claims)
    email = identity["email"]
    roles = identity["roles"]
    
    if not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="ID token has no email or subject"
        )
    
    rider_id = None
    if UserRole.RIDER.value in roles:
        result = await db.execute(
            select(Rider.id).where(
                func.lower(Rider.email) == email.lower(),
                Rider.account_status == AccountStatus.ACTIVE
            )
        )
        rider_id = result.scalar_one_or_none()
    
    driver_id = None
    if UserRole.DRIVER.value in roles:
        result = await db.execute(
            select(Driver.id).where(
                func.lower(Driver.email) == email.lower(),
                Driver.status == DriverStatus.ACTIVE
            )
        )
        driver_id = result.scalar_one_or_none()
    
    access_token = create_access_token(data={
        "sub": email,
        "roles": roles,
        "rider_id": rider_id,
        "driver_id": driver_id,
    })
    
    logger.info("Issued service token for %s with roles %s", email, roles)
    
    return TokenResponse(
        access_token=access_token,
        email=email,
        roles=roles,
        rider_id=rider_id,
        driver_id=driver_id,
        expires_in=settings.access_token_expire_minutes * 60
    )


@router.get("/me", response_model=CurrentUserResponse)
async def read_current_user(current_user: dict = Depends(get_current_user)):
    """Return the identity carried by the presented service token."""
    return CurrentUserResponse(
        email=current_user["sub"],
        roles=token_roles(current_user),
        rider_id=current_user.get("rider_id"),
        driver_id=current_user.get("driver_id")
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    token: str = Depends(get_bearer_token),
    current_user: dict = Depends(get_current_user)
):
    """
    Revoke the presented service token.
    
    Returns 503 when the revocation store is unavailable, so the client does
    not assume the token is dead.
    """
    if not await revoke_token(token, current_user["sub"]):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not revoke token"
        )
    return MessageResponse(message="Logged out successfully")
