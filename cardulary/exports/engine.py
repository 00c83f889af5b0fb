import csv
import io
import logging
import re
from dataclasses import dataclass
from datetime import UTC, date, datetime

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from cardulary.exports.formats import FORMAT_SPECS, ExportFormat, FormatSpec, StatusFilter
from cardulary.guests.dtos import GuestExportRecord

logger = logging.getLogger(__name__)

SHEET_TITLE = "Addresses"
NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")


@dataclass(frozen=True)
class ExportPayload:
    content: bytes
    content_type: str
    filename: str


def export_filename(event_name: str, export_format: ExportFormat, today: date | None = None) -> str:
    today = today or datetime.now(UTC).date()
    sanitized = NON_ALPHANUMERIC.sub("_", event_name).lower()
    extension = FORMAT_SPECS[export_format].extension
    return f"{sanitized}_addresses_{today.isoformat()}.{extension}"


def select_records(
    records: list[GuestExportRecord], spec: FormatSpec, status_filter: StatusFilter
) -> list[GuestExportRecord]:
    """Status filter, then the address requirement, then the format's ordering."""
    if status_filter != StatusFilter.ALL:
        records = [r for r in records if r.status.value == status_filter.value]
    if spec.address_required:
        records = [r for r in records if r.address_line1]
    if spec.sort_key is not None:
        # stable, so equal ZIPs keep their incoming order
        records = sorted(records, key=spec.sort_key)
    return records


def build_rows(records: list[GuestExportRecord], spec: FormatSpec) -> list[list[str]]:
    return [[extract(record) for _, extract in spec.columns] for record in records]


def to_csv(headers: list[str], rows: list[list[str]]) -> str:
    buffer = io.StringIO()
    # bare header names; only a name containing a comma gets quoted
    csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n").writerow(headers)
    csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n").writerows(rows)
    return buffer.getvalue().removesuffix("\n")


def to_xlsx(headers: list[str], rows: list[list[str]]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_TITLE
    sheet.append(headers)
    for row in rows:
        # addresses stored before input cleaning may still hold control characters
        sheet.append([ILLEGAL_CHARACTERS_RE.sub("", value) for value in row])

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def export_addresses(
    records: list[GuestExportRecord],
    export_format: ExportFormat,
    status_filter: StatusFilter,
    event_name: str,
    today: date | None = None,
) -> ExportPayload:
    spec = FORMAT_SPECS[export_format]
    selected = select_records(records, spec, status_filter)
    rows = build_rows(selected, spec)

    if spec.extension == "xlsx":
        content = to_xlsx(spec.headers, rows)
    else:
        content = to_csv(spec.headers, rows).encode("utf-8")

    logger.info(
        f"Exported {len(rows)} of {len(records)} guests as {export_format.value} "
        f"(status={status_filter.value})"
    )
    return ExportPayload(
        content=content,
        content_type=spec.content_type,
        filename=export_filename(event_name, export_format, today),
    )
