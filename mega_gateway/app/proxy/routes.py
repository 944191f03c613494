"""
Proxy Routes - Internal API Request Forwarding
==============================================

Authenticated endpoints that forward requests from web clients to the
internal Mega API.

Security Model:
---------------
1. Every request must carry a valid session (cookie or Bearer token)
2. Requests without one are answered 401 with an empty body, and nothing
   is forwarded
3. The inbound Authorization header and cookies are never forwarded

Endpoints:
----------
- POST /api/mr/comment/{id}/delete: delete a merge-request comment
"""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from ..auth.session import get_session
from ..config import get_settings
from ..models import CommentDeleteEnvelope, Session, Unauthenticated
from .client import delete_comment

logger = logging.getLogger(__name__)

proxy_router = APIRouter()


# ============================================================================
# Dependencies
# ============================================================================

def get_backend_client(request: Request) -> httpx.AsyncClient:
    """
    Dependency to get the internal API HTTP client from app state.

    Raises:
        HTTPException: 503 if the client was not created at startup
    """
    app_state = getattr(request.app.state, "app_state", None)
    client = getattr(app_state, "backend_client", None)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Backend client not available"
        )

    return client


# ============================================================================
# Proxy Endpoints
# ============================================================================

@proxy_router.post(
    "/api/mr/comment/{id}/delete",
    response_model=CommentDeleteEnvelope,
    responses={401: {"description": "No valid session; empty body"}},
)
async def proxy_comment_delete(
    id: str,
    session: Session = Depends(get_session),
    backend_client: httpx.AsyncClient = Depends(get_backend_client),
):
    """
    Delete a merge-request comment through the internal API.

    Flow:
    1. Resolve the caller's session (dependency)
    2. Without a session, answer 401 with an empty body
    3. POST {MEGA_INTERNAL_HOST}/api/v1/mr/comment/{id}/delete, no body
    4. Relay the backend JSON as {"data": ...}

    Backend failures are not translated here; they propagate as
    BackendError and end up in the global exception handler.
    """
    if isinstance(session, Unauthenticated):
        logger.info(
            "Rejected comment delete without session",
            extra={"comment_id": id, "reason": session.reason},
        )
        return Response(status_code=status.HTTP_401_UNAUTHORIZED)

    settings = get_settings()

    logger.info(
        "Proxying comment delete to internal API",
        extra={"comment_id": id, "user_id": session.user.user_id},
    )

    data = await delete_comment(
        backend_client,
        settings.MEGA_INTERNAL_HOST,
        id,
        timeout=settings.MEGA_INTERNAL_TIMEOUT_SECONDS,
    )

    return CommentDeleteEnvelope(data=data)
