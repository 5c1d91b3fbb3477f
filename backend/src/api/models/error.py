"""
Error body returned by every failing procedure.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str = Field(..., description="Error category, e.g. 'Validation Error'")
    message: str = Field(..., description="Human-readable failure description")
    details: Optional[Dict[str, Any]] = None
