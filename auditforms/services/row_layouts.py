"""
Spreadsheet row layouts

A layout fixes the sheet a form writes to and the ordered columns of each
row. The header row written on sheet creation comes from the same list, so
header and data can never drift apart.
"""
from typing import Any, Callable, Dict, List, Tuple

from auditforms.utils.helpers import flatten_file_url

# extractor(record, meta) -> cell value; meta carries "timestamp" and "form_title"
Extractor = Callable[[Dict[str, Any], Dict[str, str]], Any]


def column_letter(index: int) -> str:
    """1 -> A, 26 -> Z, 27 -> AA"""
    letters = ""
    while index > 0:
        index, rem = divmod(index - 1, 26)
        letters = chr(65 + rem) + letters
    return letters


def text(key: str) -> Extractor:
    return lambda record, meta: record.get(key) or ""


def file_url(key: str) -> Extractor:
    return lambda record, meta: flatten_file_url(record.get(key))


def joined(key: str) -> Extractor:
    def extract(record, meta):
        value = record.get(key)
        if isinstance(value, (list, tuple)):
            return ", ".join(str(v) for v in value)
        return value or ""
    return extract


def timestamp(record, meta):
    return meta["timestamp"]


def form_title(record, meta):
    return meta["form_title"]


class RowLayout:
    def __init__(self, name: str, sheet_name: str, columns: List[Tuple[str, Extractor]]):
        self.name = name
        self.sheet_name = sheet_name
        self.columns = columns

    @property
    def headers(self) -> List[str]:
        return [header for header, _ in self.columns]

    @property
    def last_column(self) -> str:
        return column_letter(len(self.columns))

    def append_range(self) -> str:
        return f"{self.sheet_name}!A:{self.last_column}"

    def row_range(self, row_number: int) -> str:
        return f"{self.sheet_name}!A{row_number}:{self.last_column}{row_number}"

    def build_row(self, record: Dict[str, Any], meta: Dict[str, str]) -> List[Any]:
        return [extract(record, meta) for _, extract in self.columns]


STORE_AUDIT_LAYOUT = RowLayout(
    "store-audit",
    "Submissions",
    [
        ("Timestamp", timestamp),
        ("Audit Date", text("audit_date")),
        ("Employee Name", text("employee_name")),
        ("Store Location", text("store_location")),
        ("Before Image", file_url("before_image")),
        ("After Image", file_url("after_image")),
        ("Out of Stock Items", joined("out_of_stock")),
        ("Notes", text("notes")),
        ("Form Title", form_title),
    ],
)

MERCHANDISING_VOL_2_LAYOUT = RowLayout(
    "merchandising-day-vol-2",
    "Merchandising Day Vol 2",
    [
        ("Timestamp", timestamp),
        ("Audit Date", text("audit_date")),
        ("Employee Name", text("employee_name")),
        ("Store Location", text("store_location")),
        ("Visibility", text("visibility")),
        ("Before Image", file_url("before_image")),
        ("After Image", file_url("after_image")),
        ("Out of Stock Items", joined("out_of_stock")),
        ("Notes", text("notes")),
        ("Form Title", form_title),
    ],
)

DEFAULT_LAYOUT = STORE_AUDIT_LAYOUT
