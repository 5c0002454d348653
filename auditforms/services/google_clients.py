"""
Google Sheets and Cloud Storage REST clients

Both clients talk to the JSON APIs through a shared httpx.AsyncClient so that
cancelling the calling task aborts the request. Service account tokens come
from google-auth and are refreshed in a worker thread.
"""
import asyncio
import logging
from typing import Dict, List, Optional, Sequence, Tuple
from urllib.parse import quote

import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account

from auditforms.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
STORAGE_SCOPES = ["https://www.googleapis.com/auth/devstorage.read_write"]
TOKEN_URI = "https://oauth2.googleapis.com/token"


class GoogleApiError(Exception):
    """Non-2xx answer (or transport failure, status_code 0) from a Google API"""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ServiceAccountAuth:
    """Bearer tokens for one service account"""

    def __init__(self, client_email: str, private_key: str, scopes: List[str], project_id: str = ""):
        self.client_email = client_email
        self.private_key = private_key
        self.scopes = scopes
        self.project_id = project_id
        self._credentials = None
        self._lock = asyncio.Lock()

    def _build_credentials(self):
        if not self.client_email or not self.private_key:
            raise ConfigurationError("Google service account credentials are not configured")
        info = {
            "type": "service_account",
            "project_id": self.project_id,
            "client_email": self.client_email,
            "private_key": self.private_key,
            "token_uri": TOKEN_URI,
        }
        try:
            return service_account.Credentials.from_service_account_info(info, scopes=self.scopes)
        except (ValueError, GoogleAuthError) as e:
            raise ConfigurationError(f"Invalid Google service account credentials: {e}") from e

    async def headers(self) -> Dict[str, str]:
        async with self._lock:
            if self._credentials is None:
                self._credentials = self._build_credentials()
            if not self._credentials.valid:
                try:
                    await asyncio.to_thread(self._credentials.refresh, GoogleAuthRequest())
                except GoogleAuthError as e:
                    raise GoogleApiError(401, f"Token refresh failed: {e}") from e
        return {"Authorization": f"Bearer {self._credentials.token}"}


async def _send(http: httpx.AsyncClient, auth: ServiceAccountAuth, method: str, url: str, **kwargs) -> Dict:
    headers = await auth.headers()
    headers.update(kwargs.pop("headers", {}))
    try:
        response = await http.request(method, url, headers=headers, **kwargs)
    except httpx.HTTPError as e:
        raise GoogleApiError(0, str(e)) from e
    if response.is_error:
        try:
            message = response.json().get("error", {}).get("message", response.text)
        except ValueError:
            message = response.text
        raise GoogleApiError(response.status_code, message)
    return response.json() if response.content else {}


class SheetsClient:
    """Subset of the Sheets v4 API used by the reference gateway and the spreadsheet sink"""

    BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets"

    def __init__(self, auth: ServiceAccountAuth, http: httpx.AsyncClient):
        self.auth = auth
        self.http = http

    def _url(self, spreadsheet_id: str, suffix: str = "") -> str:
        return f"{self.BASE_URL}/{quote(spreadsheet_id, safe='')}{suffix}"

    async def get_sheet_titles(self, spreadsheet_id: str) -> List[str]:
        body = await _send(
            self.http, self.auth, "GET", self._url(spreadsheet_id),
            params={"fields": "sheets.properties.title"},
        )
        return [s["properties"]["title"] for s in body.get("sheets", [])]

    async def get_values(self, spreadsheet_id: str, range_: str) -> List[List[str]]:
        body = await _send(
            self.http, self.auth, "GET",
            self._url(spreadsheet_id, f"/values/{quote(range_, safe='')}"),
        )
        return body.get("values", [])

    async def append_row(self, spreadsheet_id: str, range_: str, row: Sequence) -> str:
        """Append one row; returns the range the API reports as written"""
        body = await _send(
            self.http, self.auth, "POST",
            self._url(spreadsheet_id, f"/values/{quote(range_, safe='')}:append"),
            params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
            json={"values": [list(row)]},
        )
        return body.get("updates", {}).get("updatedRange", range_)

    async def add_sheet(self, spreadsheet_id: str, title: str) -> None:
        await _send(
            self.http, self.auth, "POST", self._url(spreadsheet_id, ":batchUpdate"),
            json={"requests": [{"addSheet": {"properties": {"title": title}}}]},
        )

    async def batch_update_values(self, spreadsheet_id: str, data: List[Tuple[str, List[Sequence]]]) -> List[str]:
        """Write several ranges in one call; returns the updated ranges in order"""
        body = await _send(
            self.http, self.auth, "POST", self._url(spreadsheet_id, "/values:batchUpdate"),
            json={
                "valueInputOption": "RAW",
                "data": [{"range": r, "values": [list(v) for v in values]} for r, values in data],
            },
        )
        return [resp.get("updatedRange", "") for resp in body.get("responses", [])]


class StorageClient:
    """Uploads objects to one Cloud Storage bucket with uniform public read access"""

    UPLOAD_URL = "https://storage.googleapis.com/upload/storage/v1/b/{bucket}/o"

    def __init__(self, auth: ServiceAccountAuth, http: httpx.AsyncClient, bucket: str,
                 public_host: str = "https://storage.googleapis.com"):
        self.auth = auth
        self.http = http
        self.bucket = bucket
        self.public_host = public_host.rstrip("/")

    def public_url(self, object_name: str) -> str:
        return f"{self.public_host}/{self.bucket}/{object_name}"

    async def upload(self, object_name: str, content: bytes, content_type: Optional[str]) -> str:
        if not self.bucket:
            raise ConfigurationError("GCS_BUCKET_NAME is not configured")
        await _send(
            self.http, self.auth, "POST", self.UPLOAD_URL.format(bucket=quote(self.bucket, safe="")),
            params={"uploadType": "media", "name": object_name},
            headers={"Content-Type": content_type or "application/octet-stream"},
            content=content,
        )
        logger.info("✅ Uploaded %s (%d bytes)", object_name, len(content))
        return self.public_url(object_name)
