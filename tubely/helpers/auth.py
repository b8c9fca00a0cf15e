from datetime import datetime, timedelta, timezone
from typing import Mapping, Optional
from uuid import UUID

import jwt

from tubely.config.auth import AuthConfig
from tubely.models.errors import AuthError


def get_bearer_token(headers: Mapping[str, str]) -> str:
    """Extract the token from an 'Authorization: Bearer <token>' header"""
    auth_header = headers.get("authorization") or headers.get("Authorization")
    if not auth_header:
        raise AuthError("Couldn't find bearer token")

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        raise AuthError("Malformed authorization header")
    return parts[1]


def validate_jwt(token: str, config: AuthConfig) -> UUID:
    """Validate an access token and return the user ID held in its subject"""
    try:
        claims = jwt.decode(
            token,
            config.jwt_secret,
            algorithms=[config.jwt_algorithm],
            issuer=config.jwt_issuer,
            leeway=config.leeway_seconds,
            options={"require": ["exp", "sub", "iss"]},
        )
    except jwt.PyJWTError as e:
        raise AuthError("Couldn't validate JWT", e) from e

    try:
        return UUID(claims["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise AuthError("Couldn't validate JWT", e) from e


def make_jwt(user_id: UUID, config: AuthConfig, expires_in: timedelta = timedelta(hours=1),
             now: Optional[datetime] = None) -> str:
    """Issue an access token; used by tooling and tests"""
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "iss": config.jwt_issuer,
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + expires_in,
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)
