"""
Models for storing dynamic form submissions
"""
from pydantic import AliasChoices, BaseModel, Field
from typing import Dict, Any, List, Optional
from datetime import datetime


class UploadResult(BaseModel):
    success: Optional[bool] = None
    url: str
    fileName: str
    size: int
    type: str


class SubmissionCreate(BaseModel):
    formId: str = Field(..., min_length=1)
    data: Dict[str, Any]
    files: Optional[List[UploadResult]] = None


class SubmissionResult(BaseModel):
    id: str
    message: str = "Form submitted successfully"
    submittedAt: datetime
    sheetsRange: Optional[str] = None


class SubmissionResponse(BaseModel):
    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    formId: str = Field(validation_alias=AliasChoices("formId", "form_id"))
    userId: Optional[str] = Field(None, validation_alias=AliasChoices("userId", "user_id"))
    data: Dict[str, Any]
    files: Optional[List[UploadResult]] = None
    created_at: datetime
