"""
OpenID Connect identity provider integration.

Verifies ID tokens issued to the web client so they can be exchanged for a
service bearer token.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from jose import JWTError, jwt

from backend.app.core.config import settings
from backend.app.core.exceptions import AuthenticationError, ExternalServiceError

logger = logging.getLogger(__name__)


class IdentityProvider:
    """
    Thin client for an OIDC provider's signing keys.
    
    The JWKS document is fetched lazily and cached for the life of the
    process; it is refetched once when a token names an unknown key id.
    """
    
    def __init__(
        self,
        base_url: Optional[str],
        client_id: Optional[str],
        algorithms: List[str],
        timeout: float = 5.0,
    ):
        self.base_url = base_url.rstrip("/") if base_url else None
        self.client_id = client_id
        self.algorithms = algorithms
        self.timeout = timeout
        self._jwks: Optional[Dict[str, Any]] = None
    
    @property
    def jwks_url(self) -> str:
        return f"{self.base_url}/oauth2/jwks"
    
    async def fetch_jwks(self) -> Dict[str, Any]:
        if not self.base_url:
            raise ExternalServiceError("identity provider", "Identity provider is not configured")
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.jwks_url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Failed to fetch JWKS from %s: %s", self.jwks_url, e)
            raise ExternalServiceError("identity provider") from e
        self._jwks = response.json()
        return self._jwks
    
    async def _signing_keys(self, token: str) -> Dict[str, Any]:
        try:
            kid = jwt.get_unverified_header(token).get("kid")
        except JWTError as e:
            raise AuthenticationError("Malformed ID token") from e
        
        jwks = self._jwks or await self.fetch_jwks()
        known = {key.get("kid") for key in jwks.get("keys", [])}
        if kid and kid not in known:
            # Provider may have rotated its keys
            jwks = await self.fetch_jwks()
        return jwks
    
    async def verify_id_token(self, id_token: str) -> Dict[str, Any]:
        """
        Verify signature, audience and expiry of an ID token.
        
        Returns:
            The token's claims
        
        Raises:
            AuthenticationError: token is invalid
            ExternalServiceError: provider is unreachable or unconfigured
        """
        jwks = await self._signing_keys(id_token)
        try:
            return jwt.decode(
                id_token,
                jwks,
                algorithms=self.algorithms,
                audience=self.client_id,
                options={"verify_at_hash": False},
            )
        except JWTError as e:
            logger.info("Rejected ID token: %s", e)
            raise AuthenticationError("Invalid ID token") from e


def extract_identity(claims: Dict[str, Any]) -> Dict[str, Any]:
    """
    Pull e-mail and roles out of ID token claims.
    
    Providers put roles either in a ``roles`` list or a single ``role``
    value; e-mail falls back to ``sub``.
    """
    email = claims.get("email") or claims.get("sub")
    roles = claims.get("roles")
    if roles is None:
        roles = claims.get("role") or []
    if isinstance(roles, str):
        roles = [roles]
    return {"email": email, "roles": [str(role).lower() for role in roles]}


identity_provider = IdentityProvider(
    base_url=settings.identity_base_url,
    client_id=settings.identity_client_id,
    algorithms=settings.identity_algorithms,
)


async def get_identity_provider() -> IdentityProvider:
    """FastAPI dependency returning the shared identity provider client."""
    return identity_provider
