"""
Submission routes - public submit endpoint and authorised listings
"""
from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from auditforms.config.settings import settings
from auditforms.models.form_submission import SubmissionCreate, SubmissionResponse, SubmissionResult
from auditforms.services.container import Services, get_services
from auditforms.utils.auth import get_current_user, get_optional_user
from auditforms.utils.helpers import serialize_doc, serialize_docs

router = APIRouter(prefix="/submissions", tags=["Submissions"])


@router.post("", response_model=SubmissionResult, status_code=status.HTTP_201_CREATED)
async def submit_form(
    submission: SubmissionCreate,
    current_user: Optional[dict] = Depends(get_optional_user),
    services: Services = Depends(get_services),
):
    """Submit a form response (no authentication required)"""
    return await services.submissions.submit_with_deadline(
        submission, current_user, settings.SUBMISSION_TIMEOUT_SECONDS
    )


@router.get("", response_model=List[SubmissionResponse])
async def list_submissions(
    formId: Optional[str] = None,
    skip: int = 0,
    limit: int = Query(50, le=200),
    current_user: dict = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Submissions the caller authored, submissions to forms they own, or everything for admins"""
    subs = await services.submissions.list_visible(current_user, formId, skip=skip, limit=limit)
    return serialize_docs(subs)


@router.get("/{submission_id}", response_model=SubmissionResponse)
async def get_submission(
    submission_id: str,
    current_user: dict = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Get one submission if the caller may see it"""
    return serialize_doc(await services.submissions.get_visible(current_user, submission_id))
