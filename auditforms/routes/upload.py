"""
Upload route - form images go to Cloud Storage under <fieldId>/<uuid>.<ext>
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from typing import Optional
import logging
import os
import re
import uuid
from auditforms.services.container import Services, get_services
from auditforms.services.google_clients import GoogleApiError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Uploads"])

# fieldId becomes the object prefix, so it must be a single path segment
FIELD_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


def object_name_for(field_id: str, filename: str) -> str:
    """Unique object path keeping the original extension"""
    file_ext = os.path.splitext(filename or "")[1].lstrip(".")
    name = str(uuid.uuid4())
    return f"{field_id}/{name}.{file_ext}" if file_ext else f"{field_id}/{name}"


@router.post("/upload")
async def upload_file(
    file: Optional[UploadFile] = File(None),
    fieldId: Optional[str] = Form(None),
    services: Services = Depends(get_services),
):
    """Upload a file and return its public URL"""
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided")
    if not fieldId:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fieldId provided")
    if not FIELD_ID_PATTERN.fullmatch(fieldId):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid fieldId")

    content = await file.read()
    object_name = object_name_for(fieldId, file.filename)
    try:
        url = await services.storage.upload(object_name, content, file.content_type)
    except GoogleApiError as e:
        logger.error("❌ Upload error: %s", e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Upload failed")

    return {
        "success": True,
        "url": url,
        "fileName": object_name,
        "size": len(content),
        "type": file.content_type,
    }
