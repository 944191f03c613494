"""
Internal Mega API client helpers.

Builds outbound URLs and performs the calls the proxy routes forward. The
backend's answer is decoded as JSON and handed back untouched; failures are
raised as BackendError subclasses and left for the application's global
exception handler.
"""

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class BackendError(RuntimeError):
    """Base class for failures talking to the internal Mega API."""


class BackendUnavailableError(BackendError):
    """Raised when the internal API cannot be reached."""


class BackendResponseError(BackendError):
    """Raised when the internal API answers with a body that is not JSON."""

    def __init__(self, message: str, status_code: int, body: str):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def build_comment_delete_url(host: str, comment_id: str) -> str:
    # Plain concatenation: the id is neither validated nor escaped.
    return f"{host}/api/v1/mr/comment/{comment_id}/delete"


async def delete_comment(
    client: httpx.AsyncClient,
    host: str,
    comment_id: str,
    timeout: Optional[float] = None,
) -> Any:
    """
    Ask the internal API to delete a merge-request comment.

    Args:
        client: Shared HTTP client
        host: MEGA_INTERNAL_HOST
        comment_id: Comment identifier taken from the inbound path
        timeout: Seconds to wait, None to wait indefinitely

    Returns:
        The decoded JSON body of the backend response

    Raises:
        BackendUnavailableError: Transport failure (connection, timeout)
        BackendResponseError: Body is not valid JSON
    """
    url = build_comment_delete_url(host, comment_id)

    try:
        response = await client.post(url, timeout=timeout)
    except httpx.HTTPError as e:
        logger.error(
            f"Internal API unreachable: {e}",
            extra={"comment_id": comment_id, "url": url},
        )
        raise BackendUnavailableError(f"Cannot reach internal API at {url}") from e

    if not response.is_success:
        logger.warning(
            f"Internal API answered {response.status_code} to comment delete",
            extra={"comment_id": comment_id, "status_code": response.status_code},
        )

    try:
        return response.json()
    except ValueError as e:
        logger.error(
            "Internal API returned a non-JSON body",
            extra={"comment_id": comment_id, "status_code": response.status_code},
        )
        raise BackendResponseError(
            f"Internal API returned invalid JSON for comment {comment_id}",
            status_code=response.status_code,
            body=response.text,
        ) from e
