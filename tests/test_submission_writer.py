from datetime import datetime

import pytest
import pytz

from auditforms.config.database import Collections
from auditforms.services.google_clients import GoogleApiError
from auditforms.services.row_layouts import (
    MERCHANDISING_VOL_2_LAYOUT,
    STORE_AUDIT_LAYOUT,
    column_letter,
)
from auditforms.services.submission_writer import RecordSink, SpreadsheetSink
from auditforms.utils.errors import ConfigurationError, UpstreamError
from auditforms.utils.helpers import flatten_file_url, localized_timestamp

from tests.conftest import FakeSheetsClient, SPREADSHEET_ID

RECORD = {
    "audit_date": "2026-10-17",
    "employee_name": "Jane Doe",
    "store_location": "Store A - Jakarta",
    "before_image": [{"url": "https://cdn/before.jpg"}],
    "after_image": "https://cdn/after.jpg",
    "out_of_stock": ["Product A", "Product B"],
    "notes": "ok",
}


@pytest.mark.parametrize("value, expected", [
    ("https://cdn/a.jpg", "https://cdn/a.jpg"),
    (["https://cdn/a.jpg", "https://cdn/b.jpg"], "https://cdn/a.jpg"),
    ([{"url": "https://cdn/a.jpg", "size": 1}], "https://cdn/a.jpg"),
    ({"url": "https://cdn/a.jpg"}, "https://cdn/a.jpg"),
    ({"fileName": "a.jpg"}, ""),
    ([], ""),
    (None, ""),
    (42, ""),
])
def test_flatten_file_url(value, expected):
    assert flatten_file_url(value) == expected


def test_column_letters():
    assert [column_letter(i) for i in (1, 9, 26, 27, 52)] == ["A", "I", "Z", "AA", "AZ"]


def test_store_audit_row_layout():
    row = STORE_AUDIT_LAYOUT.build_row(RECORD, {"timestamp": "ts", "form_title": "Store Audit Form"})
    assert row == [
        "ts", "2026-10-17", "Jane Doe", "Store A - Jakarta",
        "https://cdn/before.jpg", "https://cdn/after.jpg",
        "Product A, Product B", "ok", "Store Audit Form",
    ]
    assert STORE_AUDIT_LAYOUT.append_range() == "Submissions!A:I"
    assert len(MERCHANDISING_VOL_2_LAYOUT.headers) == 10
    assert MERCHANDISING_VOL_2_LAYOUT.row_range(1) == "Merchandising Day Vol 2!A1:J1"


def test_localized_timestamp():
    now = pytz.utc.localize(datetime(2026, 1, 2, 20, 5, 9))
    assert localized_timestamp("Asia/Jakarta", now) == "01/03/2026, 03:05:09 AM"
    afternoon = pytz.utc.localize(datetime(2026, 10, 17, 7, 3, 9))
    assert localized_timestamp("Asia/Jakarta", afternoon) == "10/17/2026, 02:03:09 PM"


async def test_missing_sheet_is_created_once_with_header():
    sheets = FakeSheetsClient(tabs={})
    sink = SpreadsheetSink(sheets, SPREADSHEET_ID, "Asia/Jakarta")

    first = await sink.write(RECORD, "Store Audit Form", STORE_AUDIT_LAYOUT)
    second = await sink.write(RECORD, "Store Audit Form", STORE_AUDIT_LAYOUT)

    assert sheets.added_sheets == ["Submissions"]
    rows = sheets.tabs["Submissions"]
    assert rows[0] == STORE_AUDIT_LAYOUT.headers
    assert len(rows) == 3
    assert first == "Submissions!A2:I2"
    assert second == "Submissions!A3:I3"


async def test_other_upstream_errors_are_not_retried():
    sheets = FakeSheetsClient(append_error=GoogleApiError(403, "The caller does not have permission"))
    sink = SpreadsheetSink(sheets, SPREADSHEET_ID)
    with pytest.raises(UpstreamError):
        await sink.write(RECORD, "Store Audit Form", STORE_AUDIT_LAYOUT)
    assert sheets.append_calls == 1
    assert sheets.added_sheets == []


async def test_failed_recovery_is_an_upstream_error():
    sheets = FakeSheetsClient(tabs={})

    async def refuse(spreadsheet_id, title):
        raise GoogleApiError(403, "forbidden")

    sheets.add_sheet = refuse
    with pytest.raises(UpstreamError):
        await SpreadsheetSink(sheets, SPREADSHEET_ID).write(RECORD, "t", STORE_AUDIT_LAYOUT)


async def test_missing_spreadsheet_id():
    with pytest.raises(ConfigurationError):
        await SpreadsheetSink(FakeSheetsClient(), "").write(RECORD, "t", STORE_AUDIT_LAYOUT)


async def test_record_sink_stores_document_and_bumps_counter(db_ops):
    form = await db_ops.create(Collections.FORMS, {"title": "F", "submissions": 0})
    form_id = str(form["_id"])

    created = await RecordSink(db_ops).write(form_id, {"a": 1}, [], "user-1")

    stored = await db_ops.get_by_id(Collections.SUBMISSIONS, str(created["_id"]))
    assert stored["form_id"] == form_id
    assert stored["user_id"] == "user-1"
    assert stored["data"] == {"a": 1}
    assert (await db_ops.get_by_id(Collections.FORMS, form_id))["submissions"] == 1
