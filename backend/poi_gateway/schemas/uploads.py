"""
Pydantic schemas for upload endpoints.

Field presence is checked by UploadSessionManager rather than by pydantic,
so a missing field comes back as a 400 with the gateway's error body.
"""
from pydantic import BaseModel, Field
from typing import Optional


class InitiateRequest(BaseModel):
    """Request schema for opening an upload session."""
    file_name: Optional[str] = Field(None, alias="fileName", description="Target file name, e.g. '<address>.jpg'")
    content_type: Optional[str] = Field(None, alias="contentType", description="MIME type the file will be PUT with")
    directory_path: Optional[str] = Field(None, alias="directoryPath", description="Target folder: pending, approved or rejected")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "fileName": "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY.jpg",
                "contentType": "image/jpeg",
                "directoryPath": "pending"
            }
        }


class InitiateResponse(BaseModel):
    """Response schema for an opened upload session."""
    success: bool = True
    session_uuid: str = Field(..., alias="sessionUuid", description="Session UUID for the complete endpoint")
    upload_url: str = Field(..., alias="uploadUrl", description="Signed PUT URL for direct upload")
    file_uuid: Optional[str] = Field(None, alias="fileUuid", description="Backend UUID of the file")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "success": True,
                "sessionUuid": "c6e1a1d2-0f2b-4c6e-9d1a-7b3f5e2a9c10",
                "uploadUrl": "https://s3.eu-west-1.amazonaws.com/...",
                "fileUuid": "0b2f6f7e-1c3d-4a5b-8e9f-0a1b2c3d4e5f"
            }
        }


class CompleteRequest(BaseModel):
    """Request schema for finalizing an upload session."""
    session_uuid: Optional[str] = Field(None, alias="sessionUuid", description="Session UUID from initiate")

    class Config:
        populate_by_name = True


class CompleteResponse(BaseModel):
    """Response schema for a completed upload session."""
    success: bool = True
    message: str
