"""
Authentication Package

Session verification for the gateway. The gateway does not log users in
itself; it only checks the session JWT issued by the front-end and turns it
into an Authenticated or Unauthenticated session value.

Modules:
- session: Session JWT creation and verification, FastAPI dependency
"""

from .session import create_session_jwt, get_session, verify_session

__all__ = [
    "create_session_jwt",
    "get_session",
    "verify_session",
]
