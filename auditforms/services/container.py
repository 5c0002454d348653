"""
Application-scoped service container

Built once in the app lifespan (or handed to create_app by tests) and reached
from routes through the get_services dependency.
"""
from typing import Optional

import httpx
from fastapi import Request

from auditforms.config.settings import settings
from auditforms.database.db_operations import DBOperations
from auditforms.services.google_clients import (
    SHEETS_SCOPES,
    STORAGE_SCOPES,
    ServiceAccountAuth,
    SheetsClient,
    StorageClient,
)
from auditforms.services.normalizer import SubmissionNormalizer
from auditforms.services.reference_data import ReferenceDataGateway
from auditforms.services.submission_service import SubmissionService
from auditforms.services.submission_writer import RecordSink, SpreadsheetSink


class Services:
    def __init__(self, db_ops: DBOperations, sheets, storage, spreadsheet_id: str,
                 timezone_name: Optional[str] = None, http: Optional[httpx.AsyncClient] = None):
        self.db_ops = db_ops
        self.sheets = sheets
        self.storage = storage
        self.gateway = ReferenceDataGateway(sheets, spreadsheet_id)
        self.normalizer = SubmissionNormalizer(self.gateway)
        self.spreadsheet_sink = SpreadsheetSink(sheets, spreadsheet_id, timezone_name)
        self.record_sink = RecordSink(db_ops)
        self.submissions = SubmissionService(
            db_ops, self.normalizer, self.spreadsheet_sink, self.record_sink
        )
        self._http = http

    async def aclose(self):
        if self._http is not None:
            await self._http.aclose()


def build_services(database) -> Services:
    """Real Google clients from environment configuration"""
    http = httpx.AsyncClient(timeout=settings.UPSTREAM_TIMEOUT_SECONDS)
    sheets_auth = ServiceAccountAuth(
        settings.GOOGLE_SHEETS_CLIENT_EMAIL,
        settings.GOOGLE_SHEETS_PRIVATE_KEY,
        SHEETS_SCOPES,
        settings.GCS_PROJECT_ID,
    )
    storage_auth = ServiceAccountAuth(
        settings.GCS_CLIENT_EMAIL,
        settings.GCS_PRIVATE_KEY,
        STORAGE_SCOPES,
        settings.GCS_PROJECT_ID,
    )
    return Services(
        db_ops=DBOperations(database),
        sheets=SheetsClient(sheets_auth, http),
        storage=StorageClient(storage_auth, http, settings.GCS_BUCKET_NAME, settings.GCS_PUBLIC_HOST),
        spreadsheet_id=settings.GOOGLE_SPREADSHEET_ID,
        timezone_name=settings.SHEETS_TIMEZONE,
        http=http,
    )


def get_services(request: Request) -> Services:
    return request.app.state.services
