"""
Submission Writer

Two sinks:
* SpreadsheetSink appends one row per submission to a Google Sheet. When the
  target sheet is missing it creates it, writes the header and the row, and
  stops there. There is no retry loop.
* RecordSink stores the submission document in MongoDB next to its form.
"""
import logging
from typing import Any, Dict, List, Optional

from auditforms.config.database import Collections
from auditforms.config.settings import settings
from auditforms.services.google_clients import GoogleApiError
from auditforms.services.row_layouts import RowLayout
from auditforms.utils.errors import ConfigurationError, UpstreamError
from auditforms.utils.helpers import localized_timestamp, utcnow

logger = logging.getLogger(__name__)


def is_missing_sheet_error(error: GoogleApiError) -> bool:
    return error.status_code == 400 or "Unable to parse range" in error.message


class SpreadsheetSink:
    def __init__(self, sheets_client, spreadsheet_id: str, timezone_name: Optional[str] = None):
        self.sheets = sheets_client
        self.spreadsheet_id = spreadsheet_id
        self.timezone_name = timezone_name or settings.SHEETS_TIMEZONE

    async def _create_and_write(self, layout: RowLayout, row: List[Any]) -> str:
        logger.info("📝 Creating sheet '%s' with headers...", layout.sheet_name)
        await self.sheets.add_sheet(self.spreadsheet_id, layout.sheet_name)
        ranges = await self.sheets.batch_update_values(
            self.spreadsheet_id,
            [
                (layout.row_range(1), [layout.headers]),
                (layout.row_range(2), [row]),
            ],
        )
        return ranges[-1] if ranges and ranges[-1] else layout.row_range(2)

    async def write(self, record: Dict[str, Any], form_title: str, layout: RowLayout) -> str:
        """Write one row; returns the range the sheet reports as written"""
        if not self.spreadsheet_id:
            logger.error("❌ Google Sheets ID not configured")
            raise ConfigurationError("Google Sheets configuration missing")

        meta = {
            "timestamp": localized_timestamp(self.timezone_name),
            "form_title": form_title,
        }
        row = layout.build_row(record, meta)

        try:
            written = await self.sheets.append_row(self.spreadsheet_id, layout.append_range(), row)
        except GoogleApiError as e:
            if not is_missing_sheet_error(e):
                logger.error("❌ Error adding to Google Sheets: %s", e)
                raise UpstreamError("Failed to save submission") from e
            try:
                written = await self._create_and_write(layout, row)
            except GoogleApiError as retry_error:
                logger.error("❌ Error creating sheet '%s': %s", layout.sheet_name, retry_error)
                raise UpstreamError("Failed to save submission") from retry_error

        logger.info("✅ Successfully added to Google Sheets: %s", written)
        return written


class RecordSink:
    def __init__(self, db_ops):
        self.db_ops = db_ops

    async def write(
        self,
        form_id: str,
        data: Dict[str, Any],
        files: Optional[List[Dict[str, Any]]] = None,
        user_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        document = {
            "form_id": form_id,
            "user_id": user_id,
            "data": data,
            "files": files or [],
            "created_at": utcnow(),
        }
        created = await self.db_ops.create(Collections.SUBMISSIONS, document)
        await self.db_ops.increment(Collections.FORMS, form_id, "submissions")
        return created
