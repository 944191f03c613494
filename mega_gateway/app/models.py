"""
Data Models Module

This module defines Pydantic models for request/response validation
and data serialization throughout the gateway.

Models are organized by functional area:
- Session models (verified user context and the session outcome)
- Proxy models (the response envelope relayed to the caller)
- System models (health check and error responses)
"""

from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field


# ============================================================================
# Session Models
# ============================================================================

class UserContext(BaseModel):
    """Identity extracted from a verified session JWT."""
    user_id: str = Field(..., description="Subject of the session token ('sub' claim)")
    email: Optional[str] = Field(None, description="User email address, if present in the token")
    name: Optional[str] = Field(None, description="User display name, if present in the token")
    claims: Dict[str, Any] = Field(default_factory=dict, description="All decoded claims")


class Authenticated(BaseModel):
    """Session outcome for a caller holding a valid session."""
    kind: Literal["authenticated"] = "authenticated"
    user: UserContext


class Unauthenticated(BaseModel):
    """Session outcome for a caller without a valid session."""
    kind: Literal["unauthenticated"] = "unauthenticated"
    reason: str = Field(..., description="Why the session was rejected (for logs only)")


Session = Union[Authenticated, Unauthenticated]


# ============================================================================
# Proxy Models
# ============================================================================

class CommentDeleteEnvelope(BaseModel):
    """Envelope around the internal API's answer to a comment deletion."""
    data: Any = Field(..., description="Backend JSON response, relayed unchanged")


# ============================================================================
# System Models
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service health status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")


class ErrorResponse(BaseModel):
    """Standardized error response model."""
    error: str = Field(..., description="Error type or code")
    message: str = Field(..., description="Human-readable error message")
    detail: Optional[str] = Field(None, description="Exception text, only exposed in DEBUG")
