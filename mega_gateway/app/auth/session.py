"""
Session Verification Module
===========================

Issues and verifies the session JWTs that front-end clients present to the
gateway, either in the session cookie or as a Bearer token.

Verification never raises for a bad token: it returns a Session value,
either Authenticated (with the caller's UserContext) or Unauthenticated
(with the reason), and the route decides how to answer.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Request
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from ..config import Settings, get_settings
from ..models import Authenticated, Session, Unauthenticated, UserContext

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================

class SessionError(Exception):
    """Raised when a session JWT cannot be issued"""
    pass


# =============================================================================
# Token Creation
# =============================================================================

def create_session_jwt(
    claims: Dict[str, Any],
    expires_in_minutes: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> str:
    """
    Create a session JWT with the provided claims.

    Args:
        claims: Claims to include in the JWT. 'sub' (user ID) is required;
                'email' and 'name' are picked up by the verifier if present.
        expires_in_minutes: Optional custom expiry (overrides settings)
        settings: Settings to use instead of the cached singleton

    Returns:
        Encoded JWT string

    Raises:
        SessionError: If the 'sub' claim is missing

    Example:
        >>> token = create_session_jwt({'sub': 'user123', 'email': 'user@example.com'})
    """
    settings = settings or get_settings()

    if not claims.get('sub'):
        raise SessionError("Missing required claim: 'sub' (subject/user ID)")

    # Create a copy to avoid mutating the input
    payload = claims.copy()

    now = datetime.now(timezone.utc)
    expiry = expires_in_minutes or settings.SESSION_JWT_EXPIRY_MINUTES
    payload.update({
        'iat': now,
        'exp': now + timedelta(minutes=expiry),
    })
    if settings.SESSION_JWT_ISSUER:
        payload['iss'] = settings.SESSION_JWT_ISSUER

    token = jwt.encode(
        payload,
        settings.SESSION_JWT_SECRET,
        algorithm=settings.SESSION_JWT_ALGORITHM,
    )

    logger.debug(
        "Created session JWT",
        extra={"user_id": payload['sub'], "expires_in_minutes": expiry},
    )

    return token


# =============================================================================
# Token Verification
# =============================================================================

def verify_session(token: Optional[str], settings: Optional[Settings] = None) -> Session:
    """
    Verify a session JWT and describe the caller.

    Args:
        token: JWT string, or None when the request carried no session
        settings: Settings to use instead of the cached singleton

    Returns:
        Authenticated with the caller's UserContext, or Unauthenticated
    """
    if not token:
        return Unauthenticated(reason="no session token")

    settings = settings or get_settings()

    options = {'require': ['exp', 'sub']}
    if settings.SESSION_JWT_ISSUER:
        options['require'].append('iss')

    try:
        decoded = jwt.decode(
            token,
            settings.SESSION_JWT_SECRET,
            algorithms=[settings.SESSION_JWT_ALGORITHM],
            issuer=settings.SESSION_JWT_ISSUER,
            options=options,
        )
    except ExpiredSignatureError:
        logger.info("Session JWT expired")
        return Unauthenticated(reason="session expired")
    except InvalidTokenError as e:
        logger.warning(f"Invalid session JWT: {e}")
        return Unauthenticated(reason=f"invalid token: {e}")

    user = UserContext(
        user_id=str(decoded['sub']),
        email=decoded.get('email'),
        name=decoded.get('name'),
        claims=decoded,
    )

    logger.debug("Session verified", extra={"user_id": user.user_id})

    return Authenticated(user=user)


# =============================================================================
# Helper Functions
# =============================================================================

def extract_token_from_header(authorization: Optional[str]) -> Optional[str]:
    """
    Extract Bearer token from Authorization header.

    Returns:
        The token, or None if the header is absent or not a Bearer header
    """
    if not authorization:
        return None

    parts = authorization.split()

    if len(parts) != 2 or parts[0].lower() != 'bearer':
        return None

    return parts[1]


def extract_session_token(request: Request, settings: Settings) -> Optional[str]:
    """Session cookie first, then the Authorization header."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token
    return extract_token_from_header(request.headers.get("Authorization"))


# =============================================================================
# FastAPI Dependencies
# =============================================================================

async def get_session(request: Request) -> Session:
    """
    FastAPI dependency resolving the caller's session.

    Usage in routes:
        @router.post("/thing")
        async def route(session: Session = Depends(get_session)):
            if isinstance(session, Unauthenticated):
                ...
    """
    settings = get_settings()
    return verify_session(extract_session_token(request, settings), settings)


__all__ = [
    "create_session_jwt",
    "verify_session",
    "extract_token_from_header",
    "extract_session_token",
    "get_session",
    "SessionError",
]
