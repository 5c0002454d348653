"""
Submission pipeline

formId resolution decides the sink; a submission is written to exactly one:
* built-in store audit slug -> schema decode, normalize, spreadsheet row
* stored form (ObjectId)    -> schema decode, normalize, MongoDB record
* anything else             -> normalize, spreadsheet row in the default layout
"""
import asyncio
import logging
import pytz
from datetime import datetime, timezone
from typing import Dict, List, Optional

from auditforms.config.database import Collections
from auditforms.database.db_operations import to_object_id
from auditforms.models.form_submission import SubmissionCreate, SubmissionResult
from auditforms.services.access import can_view_submission, submission_filter, user_id
from auditforms.services.builtin_forms import get_builtin_form
from auditforms.services.row_layouts import DEFAULT_LAYOUT
from auditforms.services.schema_validator import SchemaValidator
from auditforms.utils.errors import NotFoundError, PermissionDeniedError, SubmissionTimeout
from auditforms.utils.helpers import generate_submission_id

logger = logging.getLogger(__name__)


class SubmissionService:
    def __init__(self, db_ops, normalizer, spreadsheet_sink, record_sink):
        self.db_ops = db_ops
        self.normalizer = normalizer
        self.spreadsheet_sink = spreadsheet_sink
        self.record_sink = record_sink

    async def _to_sheet(self, data: Dict, form_title: str, layout) -> SubmissionResult:
        logger.info("📝 Writing submission directly to Google Sheets...")
        written = await self.spreadsheet_sink.write(data, form_title, layout)
        return SubmissionResult(
            id=generate_submission_id(),
            submittedAt=datetime.now(timezone.utc),
            sheetsRange=written,
        )

    async def submit(self, payload: SubmissionCreate, user: Optional[Dict] = None) -> SubmissionResult:
        builtin = get_builtin_form(payload.formId)
        if builtin is not None:
            data = SchemaValidator(builtin.schema.fields).decode(payload.data)
            data = await self.normalizer.normalize(data)
            return await self._to_sheet(data, builtin.title, builtin.layout)

        if to_object_id(payload.formId) is not None:
            form = await self.db_ops.get_by_id(Collections.FORMS, payload.formId)
            if not form or not form.get("isActive", True):
                raise NotFoundError("Form not found or is inactive")
            data = SchemaValidator.from_schema(form.get("schema")).decode(payload.data)
            data = await self.normalizer.normalize(data)
            files = [f.model_dump() for f in payload.files or []]
            created = await self.record_sink.write(payload.formId, data, files, user_id(user))
            logger.info("✅ Stored submission %s for form %s", created["_id"], payload.formId)
            return SubmissionResult(id=str(created["_id"]), submittedAt=pytz.utc.localize(created["created_at"]))

        data = await self.normalizer.normalize(payload.data)
        return await self._to_sheet(data, payload.formId or "Form Submission", DEFAULT_LAYOUT)

    async def submit_with_deadline(self, payload: SubmissionCreate, user: Optional[Dict],
                                   timeout: float) -> SubmissionResult:
        """Run submit() under a deadline; on expiry the pipeline task is cancelled"""
        try:
            return await asyncio.wait_for(self.submit(payload, user), timeout)
        except asyncio.TimeoutError:
            logger.error("❌ Submission for form %s timed out after %ss", payload.formId, timeout)
            raise SubmissionTimeout()

    async def _owned_form_ids(self, user: Dict) -> List[str]:
        ids = await self.db_ops.distinct(Collections.FORMS, "_id", {"createdById": user_id(user)})
        return [str(i) for i in ids]

    async def list_visible(self, user: Dict, form_id: Optional[str] = None,
                           skip: int = 0, limit: int = 50) -> List[Dict]:
        if form_id:
            form = await self.db_ops.get_by_id(Collections.FORMS, form_id)
            if not form:
                raise NotFoundError("Form not found")
        query = submission_filter(user, form_id, await self._owned_form_ids(user))
        return await self.db_ops.get_all(
            Collections.SUBMISSIONS, query, skip=skip, limit=limit, sort=[("created_at", -1)]
        )

    async def get_visible(self, user: Dict, submission_id: str) -> Dict:
        submission = await self.db_ops.get_by_id(Collections.SUBMISSIONS, submission_id)
        if not submission:
            raise NotFoundError("Submission not found")
        form = await self.db_ops.get_by_id(Collections.FORMS, submission.get("form_id", ""))
        if not can_view_submission(user, submission, form):
            raise PermissionDeniedError("You do not have access to this submission")
        return submission
