"""
Authentication Pydantic schemas.

Defines request and response schemas for the token exchange endpoints.
"""

from pydantic import BaseModel, Field
from typing import List, Optional


class TokenExchangeRequest(BaseModel):
    """
    Schema for POST /api/auth/token.
    
    Carries the ID token the web client received from the identity provider.
    """
    id_token: str = Field(..., min_length=1, description="OpenID Connect ID token")


class TokenResponse(BaseModel):
    """
    Schema for the service token response.
    
    ``rider_id`` / ``driver_id`` are set when an active account with the
    signed-in e-mail exists.
    """
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    email: str = Field(..., description="Email address")
    roles: List[str] = Field(default_factory=list, description="Roles granted by the identity provider")
    rider_id: Optional[int] = Field(default=None, description="Rider account ID")
    driver_id: Optional[int] = Field(default=None, description="Driver account ID")
    expires_in: int = Field(..., description="Token lifetime in seconds")


class CurrentUserResponse(BaseModel):
    """Schema for GET /api/auth/me."""
    email: str
    roles: List[str]
    rider_id: Optional[int] = None
    driver_id: Optional[int] = None
