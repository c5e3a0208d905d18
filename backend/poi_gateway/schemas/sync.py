"""
Pydantic schemas for the batch sync endpoint.
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from poi_gateway.storage.models import SyncResult


class SyncRequest(BaseModel):
    """Request schema for promoting pending objects."""
    addresses: Optional[List[str]] = Field(None, description="Identifiers to promote; only the first 50 are processed")

    class Config:
        json_schema_extra = {
            "example": {
                "addresses": ["ADDR1", "ADDR2"]
            }
        }


class MovedItem(BaseModel):
    identifier: str
    from_path: str = Field(..., alias="from")
    to_path: str = Field(..., alias="to")

    class Config:
        populate_by_name = True


class SkippedItem(BaseModel):
    identifier: str
    reason: str


class ErrorItem(BaseModel):
    identifier: str
    error: str


class SyncResponse(BaseModel):
    """
    Response schema for a batch sync.

    Always returned with 200; partial failure shows up in errors.
    """
    success: bool = True
    moved: List[MovedItem] = Field(default_factory=list)
    skipped: List[SkippedItem] = Field(default_factory=list)
    errors: List[ErrorItem] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: SyncResult) -> "SyncResponse":
        return cls(
            moved=[
                MovedItem(identifier=m.identifier, from_path=m.from_path, to_path=m.to_path)
                for m in result.moved
            ],
            skipped=[SkippedItem(identifier=s.identifier, reason=s.reason) for s in result.skipped],
            errors=[ErrorItem(identifier=e.identifier, error=e.error) for e in result.errors],
        )
