import asyncio

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from auditforms.database.db_operations import DBOperations
from auditforms.main import create_app
from auditforms.services.container import Services
from auditforms.services.google_clients import GoogleApiError
from auditforms.services.reference_data import ReferenceDataGateway
from auditforms.utils.auth import create_access_token

SPREADSHEET_ID = "sheet-123"


def reference_tabs():
    return {
        "Employees": [
            ["employee_id", "name"],
            ["E001", "Jane Doe"],
            ["E002", "Budi Santoso"],
            ["E003", ""],
        ],
        "Stores": [
            ["store_id", "name", "location", "region", "manager"],
            ["S001", "Store A", "Jakarta", "West", "Rina"],
            ["S002", "Store B", "Surabaya"],
        ],
    }


class FakeSheetsClient:
    """In-memory spreadsheet keyed by tab title"""

    def __init__(self, tabs=None, append_delay=0.0, append_error=None):
        self.tabs = reference_tabs() if tabs is None else tabs
        self.append_delay = append_delay
        self.append_error = append_error
        self.added_sheets = []
        self.append_calls = 0

    async def get_sheet_titles(self, spreadsheet_id):
        return list(self.tabs)

    async def get_values(self, spreadsheet_id, range_):
        return [list(r) for r in self.tabs.get(range_.split("!")[0], [])]

    async def append_row(self, spreadsheet_id, range_, row):
        self.append_calls += 1
        if self.append_delay:
            await asyncio.sleep(self.append_delay)
        if self.append_error is not None:
            raise self.append_error
        sheet = range_.split("!")[0]
        if sheet not in self.tabs:
            raise GoogleApiError(400, f"Unable to parse range: {range_}")
        self.tabs[sheet].append(list(row))
        n = len(self.tabs[sheet])
        last = range_.split(":")[-1]
        return f"{sheet}!A{n}:{last}{n}"

    async def add_sheet(self, spreadsheet_id, title):
        self.added_sheets.append(title)
        self.tabs[title] = []

    async def batch_update_values(self, spreadsheet_id, data):
        ranges = []
        for range_, rows in data:
            self.tabs[range_.split("!")[0]].extend(list(r) for r in rows)
            ranges.append(range_)
        return ranges


class FakeStorageClient:
    def __init__(self, error=None):
        self.error = error
        self.objects = {}

    async def upload(self, object_name, content, content_type):
        if self.error is not None:
            raise self.error
        self.objects[object_name] = (content, content_type)
        return f"https://storage.googleapis.com/test-bucket/{object_name}"


@pytest.fixture
def database():
    return AsyncMongoMockClient()["auditforms_test"]


@pytest.fixture
def db_ops(database):
    return DBOperations(database)


@pytest.fixture
def sheets():
    return FakeSheetsClient()


@pytest.fixture
def storage():
    return FakeStorageClient()


@pytest.fixture
def gateway(sheets):
    return ReferenceDataGateway(sheets, SPREADSHEET_ID)


@pytest.fixture
def services(db_ops, sheets, storage):
    return Services(db_ops, sheets, storage, SPREADSHEET_ID, timezone_name="Asia/Jakarta")


@pytest.fixture
def client(services):
    return TestClient(create_app(services=services))


def make_token(sub, role="USER", **claims):
    return create_access_token({"sub": sub, "role": role, **claims})


def auth_header(sub, role="USER", **claims):
    return {"Authorization": f"Bearer {make_token(sub, role, **claims)}"}


@pytest.fixture
def owner_headers():
    return auth_header("user-owner", email="owner@example.com", name="Owner")


@pytest.fixture
def author_headers():
    return auth_header("user-author", email="author@example.com", name="Author")


@pytest.fixture
def stranger_headers():
    return auth_header("user-stranger")


@pytest.fixture
def admin_headers():
    return auth_header("user-admin", role="ADMIN")


FEEDBACK_FORM = {
    "title": "Customer Feedback",
    "description": "Tell us how we did",
    "schema": {
        "fields": [
            {"id": "full_name", "type": "text", "label": "Full Name", "required": True},
            {"id": "email", "type": "email", "label": "Email", "required": True},
            {"id": "rating", "type": "number", "label": "Rating"},
            {"id": "channel", "type": "select", "label": "Channel",
             "options": ["Store", "Online"]},
        ],
        "settings": {"showProgressBar": True},
    },
}


@pytest.fixture
def feedback_form(client, owner_headers):
    response = client.post("/api/forms/", json=FEEDBACK_FORM, headers=owner_headers)
    assert response.status_code == 201, response.text
    return response.json()
