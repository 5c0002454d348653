"""
Reference Data Gateway

Reads the employee and store allow-lists from the organisation spreadsheet.
Nothing is cached: every call goes to the Sheets API.
"""
import logging
from typing import Dict, List

from auditforms.models.reference import Employee, ReferenceData, Store
from auditforms.utils.errors import ConfigurationError, ReferenceSheetNotFound

logger = logging.getLogger(__name__)

EMPLOYEES_SHEET = "Employees"
STORES_SHEET = "Stores"


def rows_to_records(values: List[List[str]]) -> List[Dict[str, str]]:
    """First row is the header; short rows are padded with empty strings"""
    if not values:
        return []
    header = [str(h).strip() for h in values[0]]
    records = []
    for row in values[1:]:
        padded = list(row) + [""] * (len(header) - len(row))
        records.append({name: str(value).strip() for name, value in zip(header, padded)})
    return records


class ReferenceDataGateway:
    def __init__(self, sheets_client, spreadsheet_id: str):
        self.sheets = sheets_client
        self.spreadsheet_id = spreadsheet_id

    async def _read_tab(self, title: str, available: List[str]) -> List[Dict[str, str]]:
        if title not in available:
            logger.error("❌ Reference sheet '%s' not found in spreadsheet", title)
            raise ReferenceSheetNotFound(title)
        values = await self.sheets.get_values(self.spreadsheet_id, title)
        return [r for r in rows_to_records(values) if r.get("name")]

    async def fetch(self, employees: bool = True, stores: bool = True) -> ReferenceData:
        """Fetch the requested allow-lists; unrequested lists stay empty"""
        data = ReferenceData()
        if not employees and not stores:
            return data
        if not self.spreadsheet_id:
            logger.error("❌ GOOGLE_SPREADSHEET_ID is not configured")
            raise ConfigurationError("Google Sheets configuration missing")

        available = await self.sheets.get_sheet_titles(self.spreadsheet_id)
        if employees:
            data.employees = [
                Employee(id=r.get("employee_id") or None, name=r["name"])
                for r in await self._read_tab(EMPLOYEES_SHEET, available)
            ]
        if stores:
            data.stores = [
                Store(
                    id=r.get("store_id") or None,
                    name=r["name"],
                    location=r.get("location") or None,
                    region=r.get("region") or None,
                    manager=r.get("manager") or None,
                )
                for r in await self._read_tab(STORES_SHEET, available)
            ]
        return data
