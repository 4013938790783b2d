"""
Access gate for the write endpoints.

Token verification is deliberately small: ``authenticate`` decodes a
signed JWT (PyJWT) and returns an ``Identity`` or raises. Who issued the
token doesn't matter here; ``create_access_token`` only exists so tests
and operators can mint one with the shared secret.

Authorization is single-tier today: every authenticated identity gets
the ``manuals:write`` capability. The gate still checks for it, so a
real role check later means changing ``capabilities_for`` and nothing
in the routers.

Usage in a route:
    @router.post("")
    async def create(identity: Identity = Depends(require_writer)):
        ...
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from manual_api.config import settings

logger = logging.getLogger(__name__)

WRITE_CAPABILITY = "manuals:write"


@dataclass(frozen=True)
class Identity:
    """Who is calling, and what they may do."""
    subject: str
    capabilities: frozenset[str] = field(default_factory=frozenset)

    def can(self, capability: str) -> bool:
        return capability in self.capabilities


class Unauthenticated(HTTPException):
    """No credential, or one we couldn't verify."""

    def __init__(self, detail: str = "Unauthenticated."):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class Forbidden(HTTPException):
    """Authenticated, but missing the required capability."""

    def __init__(self, detail: str = "This action is unauthorized."):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def create_access_token(subject: str, expires_minutes: Optional[int] = None) -> str:
    """Mint a signed bearer token for ``subject``."""
    now = datetime.now(timezone.utc)
    lifetime = timedelta(
        minutes=expires_minutes
        if expires_minutes is not None
        else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    payload = {"sub": subject, "iat": now, "exp": now + lifetime}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def capabilities_for(claims: dict) -> frozenset[str]:
    """Capabilities granted to a verified token.

    Every authenticated caller may write. Role-based grants go here.
    """
    return frozenset({WRITE_CAPABILITY})


def authenticate(token: str) -> Identity:
    """Verify a bearer token. Raises Unauthenticated on any failure."""
    try:
        claims = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Token expired")
        raise Unauthenticated()
    except jwt.InvalidTokenError as e:
        logger.debug("Invalid token: %s", e)
        raise Unauthenticated()

    subject = claims.get("sub")
    if not subject:
        logger.debug("Token has no subject")
        raise Unauthenticated()

    return Identity(subject=str(subject), capabilities=capabilities_for(claims))


class AccessGate:
    """Maps an inbound credential to an Identity, or refuses it."""

    def __init__(self, required_capability: str = WRITE_CAPABILITY):
        self.required_capability = required_capability

    def authorize(self, credential: Optional[str]) -> Identity:
        if not credential:
            raise Unauthenticated()
        identity = authenticate(credential)
        if not identity.can(self.required_capability):
            raise Forbidden()
        return identity


security = HTTPBearer(auto_error=False)
write_gate = AccessGate()


async def require_writer(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Identity:
    """FastAPI dependency guarding every mutating endpoint."""
    return write_gate.authorize(credentials.credentials if credentials else None)
