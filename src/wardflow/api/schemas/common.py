"""
Shared API schemas.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body rendered by the global exception handlers."""

    error: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable message")
    details: Dict[str, Any] = Field(default_factory=dict)
