"""Tests for the export transform engine."""

import csv
import io
from datetime import UTC, date, datetime

from openpyxl import load_workbook

from cardulary.exports.engine import export_addresses, export_filename
from cardulary.exports.formats import ExportFormat, StatusFilter
from cardulary.guests.dtos import GuestExportRecord, GuestStatus

TODAY = date(2026, 10, 19)


def completed(first_name, last_name, zip_code, **overrides) -> GuestExportRecord:
    fields = {
        "first_name": first_name,
        "last_name": last_name,
        "status": GuestStatus.COMPLETED,
        "email": f"{first_name.lower()}@example.com",
        "address_line1": "1 Main St",
        "city": "Springfield",
        "state": "IL",
        "zip": zip_code,
        "country": "US",
        "submitted_at": datetime(2026, 3, 7, 15, 30, tzinfo=UTC),
    }
    fields.update(overrides)
    return GuestExportRecord(**fields)


def pending(first_name, last_name) -> GuestExportRecord:
    return GuestExportRecord(
        first_name=first_name,
        last_name=last_name,
        status=GuestStatus.PENDING,
        email=f"{first_name.lower()}@example.com",
    )


def csv_lines(payload) -> list[str]:
    return payload.content.decode("utf-8").split("\n")


def test_generic_csv_keeps_guests_without_address():
    records = [completed("Ada", "Lovelace", "62704"), pending("Bob", "Smith")]

    payload = export_addresses(records, ExportFormat.CSV, StatusFilter.ALL, "Smith Wedding", TODAY)

    lines = csv_lines(payload)
    assert lines[0] == (
        "First Name,Last Name,Email,Phone,Address Line 1,Address Line 2,"
        "City,State,ZIP,Country,Status,Submitted At"
    )
    assert lines[1] == (
        '"Ada","Lovelace","ada@example.com","","1 Main St","","Springfield","IL",'
        '"62704","US","completed","3/7/2026"'
    )
    assert lines[2] == '"Bob","Smith","bob@example.com","","","","","","","","pending",""'
    assert len(lines) == 3
    assert payload.content_type == "text/csv"


def test_csv_has_no_trailing_newline():
    payload = export_addresses(
        [completed("Ada", "Lovelace", "62704")], ExportFormat.CSV, StatusFilter.ALL, "E", TODAY
    )

    assert not payload.content.endswith(b"\n")


def test_embedded_quotes_are_doubled():
    record = completed("Ada", "O\"Brien", "62704", address_line1='12 "Rose" Cottage')

    payload = export_addresses([record], ExportFormat.MINTED, StatusFilter.ALL, "E", TODAY)

    assert csv_lines(payload)[1] == (
        '"Ada","O""Brien","12 ""Rose"" Cottage","","Springfield","IL","62704","US"'
    )


def test_minted_drops_guests_without_address_and_defaults_country():
    records = [
        completed("Ada", "Lovelace", "62704", country=None),
        pending("Bob", "Smith"),
    ]

    payload = export_addresses(records, ExportFormat.MINTED, StatusFilter.ALL, "E", TODAY)

    lines = csv_lines(payload)
    assert lines[0] == (
        "First Name,Last Name,Street Address,Street Address 2,City,State,ZIP Code,Country"
    )
    assert lines[1:] == ['"Ada","Lovelace","1 Main St","","Springfield","IL","62704","US"']


def test_shutterfly_columns():
    payload = export_addresses(
        [completed("Ada", "Lovelace", "62704", address_line2="Apt 2")],
        ExportFormat.SHUTTERFLY,
        StatusFilter.ALL,
        "E",
        TODAY,
    )

    assert csv_lines(payload) == [
        "FirstName,LastName,Address1,Address2,City,State,PostalCode,Country",
        '"Ada","Lovelace","1 Main St","Apt 2","Springfield","IL","62704","US"',
    ]


def test_vistaprint_joins_name_and_leaves_company_empty():
    payload = export_addresses(
        [completed("Ada", "Lovelace", "62704")], ExportFormat.VISTAPRINT, StatusFilter.ALL, "E", TODAY
    )

    assert csv_lines(payload)[1] == (
        '"Ada Lovelace","","1 Main St","","Springfield","IL","62704","US"'
    )


def test_avery_sorts_zip_codes_as_strings():
    records = [
        completed("Cy", "Young", "90210"),
        completed("Ada", "Lovelace", "10001-1234"),
        completed("Bob", "Smith", "10001"),
        pending("Dee", "Nope"),
    ]

    payload = export_addresses(records, ExportFormat.AVERY, StatusFilter.ALL, "E", TODAY)

    lines = csv_lines(payload)
    assert lines[0] == 'Name,Address Line 1,Address Line 2,"City, State ZIP",Country'
    assert lines[1:] == [
        '"Bob Smith","1 Main St","","Springfield, IL 10001","US"',
        '"Ada Lovelace","1 Main St","","Springfield, IL 10001-1234","US"',
        '"Cy Young","1 Main St","","Springfield, IL 90210","US"',
    ]


def test_status_filter_runs_before_format_mapping():
    records = [completed("Ada", "Lovelace", "62704"), pending("Bob", "Smith")]

    only_completed = export_addresses(records, ExportFormat.CSV, StatusFilter.COMPLETED, "E", TODAY)
    only_pending = export_addresses(records, ExportFormat.CSV, StatusFilter.PENDING, "E", TODAY)
    not_sent = export_addresses(records, ExportFormat.CSV, StatusFilter.NOT_SENT, "E", TODAY)

    assert len(csv_lines(only_completed)) == 2
    assert csv_lines(only_completed)[1].startswith('"Ada"')
    assert csv_lines(only_pending)[1].startswith('"Bob"')
    assert len(csv_lines(not_sent)) == 1


def test_excel_has_single_addresses_sheet():
    records = [completed("Ada", "Lovelace", "62704"), pending("Bob", "Smith")]

    payload = export_addresses(records, ExportFormat.EXCEL, StatusFilter.ALL, "Smith Wedding", TODAY)

    assert payload.content_type == (
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    assert payload.filename == "smith_wedding_addresses_2026-10-19.xlsx"

    workbook = load_workbook(io.BytesIO(payload.content))
    assert workbook.sheetnames == ["Addresses"]
    rows = list(workbook["Addresses"].iter_rows(values_only=True))
    assert rows[0][0] == "First Name"
    assert rows[0][-1] == "Submitted At"
    assert rows[1][:2] == ("Ada", "Lovelace")
    assert rows[1][-1] == "3/7/2026"
    assert len(rows) == 3


def test_filename_is_sanitized():
    assert (
        export_filename("Mom & Dad's 40th!", ExportFormat.AVERY, TODAY)
        == "mom___dad_s_40th__addresses_2026-10-19.csv"
    )
    assert export_filename("Reunion", ExportFormat.EXCEL, TODAY).endswith(".xlsx")


def test_avery_header_parses_to_one_field_per_column():
    payload = export_addresses(
        [completed("Ada", "Lovelace", "62704")], ExportFormat.AVERY, StatusFilter.ALL, "E", TODAY
    )

    header, row = csv.reader(io.StringIO(payload.content.decode("utf-8")))

    assert header == ["Name", "Address Line 1", "Address Line 2", "City, State ZIP", "Country"]
    assert len(row) == len(header)


def test_excel_drops_control_characters_from_stored_addresses():
    records = [
        completed("Ada", "Lovelace", "62704", address_line1="1 Main\x0bSt", city="Spring\x00field")
    ]

    payload = export_addresses(records, ExportFormat.EXCEL, StatusFilter.ALL, "E", TODAY)

    rows = list(load_workbook(io.BytesIO(payload.content))["Addresses"].iter_rows(values_only=True))
    assert rows[1][4] == "1 MainSt"
    assert rows[1][6] == "Springfield"
