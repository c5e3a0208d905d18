"""
Pydantic schemas for API request/response validation.
"""
from poi_gateway.schemas.errors import ErrorResponse, error_responses
from poi_gateway.schemas.uploads import (
    InitiateRequest,
    InitiateResponse,
    CompleteRequest,
    CompleteResponse,
)
from poi_gateway.schemas.sync import (
    SyncRequest,
    SyncResponse,
)

__all__ = [
    "ErrorResponse",
    "error_responses",
    "InitiateRequest",
    "InitiateResponse",
    "CompleteRequest",
    "CompleteResponse",
    "SyncRequest",
    "SyncResponse",
]
