"""
Identity resolution from JWTs.

Tokens are issued by the platform's auth service; this module only decodes
them. The token is read from the ``Authorization: Bearer`` header or, for
browser clients, from the ``token`` cookie.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Annotated, Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from clinic_booking.config.settings import Settings, get_settings
from clinic_booking.core.domain import AuthenticationException
from clinic_booking.domains.scheduling.application.identity import Identity
from clinic_booking.domains.scheduling.domain.value_objects import UserRole

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

TOKEN_COOKIE = "token"


class TokenService:
    """Encode and decode identity tokens."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def create_access_token(self, identity: Identity, expires_delta: timedelta | None = None) -> str:
        """
        Create a signed token for an identity.

        Used by development tooling and tests; production tokens come from
        the auth service with the same claims.
        """
        expire = datetime.now(UTC) + (expires_delta or timedelta(hours=1))
        claims: dict[str, Any] = {
            "sub": identity.user_id,
            "role": identity.role.value,
            "admin_id": identity.admin_id,
            "doctor_id": identity.doctor_id,
            "patient_id": identity.patient_id,
            "exp": expire,
            "iat": datetime.now(UTC),
        }
        return jwt.encode(claims, self.settings.JWT_SECRET_KEY, algorithm=self.settings.JWT_ALGORITHM)

    def decode(self, token: str) -> Identity:
        """
        Decode and verify a token.

        Raises:
            AuthenticationException: bad signature, expired, or missing claims
        """
        try:
            claims = jwt.decode(token, self.settings.JWT_SECRET_KEY, algorithms=[self.settings.JWT_ALGORITHM])
        except JWTError as e:
            logger.info(f"Rejected token: {e}")
            raise AuthenticationException("Invalid or expired token") from e

        subject = claims.get("sub")
        if not subject:
            raise AuthenticationException("Token has no subject")
        try:
            role = UserRole.from_string(str(claims.get("role", "")))
        except ValueError as e:
            raise AuthenticationException("Token has an unknown role") from e

        return Identity(
            user_id=str(subject),
            role=role,
            admin_id=_optional_int(claims.get("admin_id")),
            doctor_id=_optional_int(claims.get("doctor_id")),
            patient_id=_optional_int(claims.get("patient_id")),
        )


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise AuthenticationException("Token carries a malformed id claim") from e


def get_token_service() -> TokenService:
    return TokenService(get_settings())


async def get_optional_identity(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> Identity | None:
    """Identity when a token is present; None for anonymous requests."""
    token = credentials.credentials if credentials else request.cookies.get(TOKEN_COOKIE)
    if not token:
        return None
    return token_service.decode(token)


async def get_current_identity(
    identity: Annotated[Identity | None, Depends(get_optional_identity)],
) -> Identity:
    """Identity required; anonymous requests get 401."""
    if identity is None:
        raise AuthenticationException()
    return identity


OptionalIdentity = Annotated[Identity | None, Depends(get_optional_identity)]
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
