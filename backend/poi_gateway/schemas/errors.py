"""
Error body shared by every endpoint.
"""
from pydantic import BaseModel
from typing import Optional


class ErrorResponse(BaseModel):
    """Schema for error responses."""
    error: str
    details: Optional[str] = None


def error_responses(*status_codes: int) -> dict:
    """Build a FastAPI `responses` mapping declaring ErrorResponse for each status."""
    return {code: {"model": ErrorResponse} for code in status_codes}
