"""Export format table.

Every format is a ``FormatSpec``: its column list (header and extractor), whether
records without a street address are dropped, an optional row sort, and how the
file is served. Adding a format is adding a row to ``FORMAT_SPECS``.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from cardulary.guests.dtos import GuestExportRecord

CSV_CONTENT_TYPE = "text/csv"
XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
DEFAULT_COUNTRY = "US"


class ExportFormat(str, Enum):
    CSV = "csv"
    EXCEL = "excel"
    MINTED = "minted"
    SHUTTERFLY = "shutterfly"
    VISTAPRINT = "vistaprint"
    AVERY = "avery"


class StatusFilter(str, Enum):
    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"
    NOT_SENT = "not_sent"
    BOUNCED = "bounced"


Column = tuple[str, Callable[[GuestExportRecord], str]]


@dataclass(frozen=True)
class FormatSpec:
    columns: list[Column]
    address_required: bool
    extension: str
    content_type: str
    # rows are ordered by this key, compared as plain strings
    sort_key: Callable[[GuestExportRecord], str] | None = None

    @property
    def headers(self) -> list[str]:
        return [header for header, _ in self.columns]


def format_submitted_at(record: GuestExportRecord) -> str:
    if record.submitted_at is None:
        return ""
    submitted = record.submitted_at
    return f"{submitted.month}/{submitted.day}/{submitted.year}"


def _field(name: str) -> Callable[[GuestExportRecord], str]:
    return lambda record: getattr(record, name) or ""


def _country(record: GuestExportRecord) -> str:
    return record.country or DEFAULT_COUNTRY


def _full_name(record: GuestExportRecord) -> str:
    return f"{record.first_name} {record.last_name}"


def _city_state_zip(record: GuestExportRecord) -> str:
    return f"{record.city or ''}, {record.state or ''} {record.zip or ''}".strip()


GENERIC_COLUMNS: list[Column] = [
    ("First Name", _field("first_name")),
    ("Last Name", _field("last_name")),
    ("Email", _field("email")),
    ("Phone", _field("phone")),
    ("Address Line 1", _field("address_line1")),
    ("Address Line 2", _field("address_line2")),
    ("City", _field("city")),
    ("State", _field("state")),
    ("ZIP", _field("zip")),
    ("Country", _field("country")),
    ("Status", lambda record: record.status.value),
    ("Submitted At", format_submitted_at),
]

FORMAT_SPECS: dict[ExportFormat, FormatSpec] = {
    ExportFormat.CSV: FormatSpec(
        columns=GENERIC_COLUMNS,
        address_required=False,
        extension="csv",
        content_type=CSV_CONTENT_TYPE,
    ),
    ExportFormat.EXCEL: FormatSpec(
        columns=GENERIC_COLUMNS,
        address_required=False,
        extension="xlsx",
        content_type=XLSX_CONTENT_TYPE,
    ),
    ExportFormat.MINTED: FormatSpec(
        columns=[
            ("First Name", _field("first_name")),
            ("Last Name", _field("last_name")),
            ("Street Address", _field("address_line1")),
            ("Street Address 2", _field("address_line2")),
            ("City", _field("city")),
            ("State", _field("state")),
            ("ZIP Code", _field("zip")),
            ("Country", _country),
        ],
        address_required=True,
        extension="csv",
        content_type=CSV_CONTENT_TYPE,
    ),
    ExportFormat.SHUTTERFLY: FormatSpec(
        columns=[
            ("FirstName", _field("first_name")),
            ("LastName", _field("last_name")),
            ("Address1", _field("address_line1")),
            ("Address2", _field("address_line2")),
            ("City", _field("city")),
            ("State", _field("state")),
            ("PostalCode", _field("zip")),
            ("Country", _country),
        ],
        address_required=True,
        extension="csv",
        content_type=CSV_CONTENT_TYPE,
    ),
    ExportFormat.VISTAPRINT: FormatSpec(
        columns=[
            ("Recipient Name", _full_name),
            ("Company", lambda record: ""),
            ("Address Line 1", _field("address_line1")),
            ("Address Line 2", _field("address_line2")),
            ("City", _field("city")),
            ("State/Province", _field("state")),
            ("Postal Code", _field("zip")),
            ("Country", _country),
        ],
        address_required=True,
        extension="csv",
        content_type=CSV_CONTENT_TYPE,
    ),
    ExportFormat.AVERY: FormatSpec(
        columns=[
            ("Name", _full_name),
            ("Address Line 1", _field("address_line1")),
            ("Address Line 2", _field("address_line2")),
            ("City, State ZIP", _city_state_zip),
            ("Country", _country),
        ],
        address_required=True,
        extension="csv",
        content_type=CSV_CONTENT_TYPE,
        sort_key=_field("zip"),
    ),
}
