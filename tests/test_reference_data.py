import pytest

from auditforms.services.google_clients import GoogleApiError
from auditforms.services.reference_data import ReferenceDataGateway, rows_to_records
from auditforms.utils.errors import ConfigurationError, ReferenceSheetNotFound

from tests.conftest import FakeSheetsClient, SPREADSHEET_ID, reference_tabs


def test_rows_to_records_pads_short_rows():
    records = rows_to_records([["store_id", "name", "location"], ["S1", " Store A "]])
    assert records == [{"store_id": "S1", "name": "Store A", "location": ""}]
    assert rows_to_records([]) == []


async def test_fetch_both_lists(gateway):
    data = await gateway.fetch()
    assert [e.name for e in data.employees] == ["Jane Doe", "Budi Santoso"]
    assert data.employees[0].id == "E001"
    store_b = data.stores[1]
    assert store_b.location == "Surabaya"
    assert store_b.region is None
    assert data.stores[0].display_name == "Store A - Jakarta"


async def test_unrequested_list_stays_empty(gateway):
    data = await gateway.fetch(employees=False, stores=True)
    assert data.employees == []
    assert len(data.stores) == 2


async def test_nothing_requested_makes_no_call():
    class Exploding:
        async def get_sheet_titles(self, spreadsheet_id):
            raise AssertionError("no call expected")

    data = await ReferenceDataGateway(Exploding(), SPREADSHEET_ID).fetch(employees=False, stores=False)
    assert data.employees == [] and data.stores == []


async def test_missing_tab():
    tabs = reference_tabs()
    del tabs["Stores"]
    gateway = ReferenceDataGateway(FakeSheetsClient(tabs), SPREADSHEET_ID)
    with pytest.raises(ReferenceSheetNotFound) as exc_info:
        await gateway.fetch()
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Stores sheet not found"


async def test_missing_configuration(sheets):
    with pytest.raises(ConfigurationError):
        await ReferenceDataGateway(sheets, "").fetch()


def test_api_returns_requested_lists(client):
    both = client.get("/api/reference-data").json()
    assert set(both) == {"employees", "stores"}

    employees = client.get("/api/reference-data", params={"type": "employees"})
    assert employees.status_code == 200
    assert list(employees.json()) == ["employees"]
    assert employees.json()["employees"][0] == {"id": "E001", "name": "Jane Doe"}


def test_api_rejects_unknown_type(client):
    response = client.get("/api/reference-data", params={"type": "managers"})
    assert response.status_code == 400


def test_api_missing_tab_is_404(client, sheets):
    del sheets.tabs["Employees"]
    response = client.get("/api/reference-data", params={"type": "employees"})
    assert response.status_code == 404
    assert response.json() == {"error": "Employees sheet not found"}


def test_api_upstream_failure_is_500(client, sheets):
    async def broken(spreadsheet_id):
        raise GoogleApiError(503, "unavailable")

    sheets.get_sheet_titles = broken
    response = client.get("/api/reference-data")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch data from sheets"}
