"""Tests for the export endpoint."""

from uuid import uuid4

from cardulary.exports.router import get_export_log_write_model, get_export_read_model
from cardulary.exports.write_model import ExportLogWriteModel
from cardulary.guests.dtos import EventDTO, GuestExportRecord, GuestStatus
from cardulary.guests.repository.read_models import EventReadModel
from cardulary.guests.urls import EXPORT_URL


class InMemoryExportReadModel(EventReadModel):
    def __init__(self, event: EventDTO, records: list[GuestExportRecord]):
        self.event = event
        self.records = records

    async def list_events(self, organizer_id):
        return [self.event]

    async def get_event(self, event_id, organizer_id):
        if event_id == self.event.id and organizer_id == self.event.organizer_id:
            return self.event
        return None

    async def list_guests(self, event_id, organizer_id):
        return None

    async def get_export_records(self, event_id, organizer_id):
        if await self.get_event(event_id, organizer_id) is None:
            return None
        return self.records


class InMemoryExportLog(ExportLogWriteModel):
    def __init__(self):
        self.entries: list[dict] = []

    async def record_export(self, event_id, organizer_id, export_format, status_filter):
        self.entries.append(
            {"event_id": event_id, "format": export_format.value, "status": status_filter.value}
        )


def make_overrides(organizer_id):
    event = EventDTO(id=uuid4(), organizer_id=organizer_id, name="Smith Wedding")
    records = [
        GuestExportRecord(
            first_name="Ada",
            last_name="Lovelace",
            status=GuestStatus.COMPLETED,
            address_line1="1 Main St",
            city="Springfield",
            state="IL",
            zip="62704",
            country="US",
        ),
        GuestExportRecord(first_name="Bob", last_name="Smith", status=GuestStatus.PENDING),
    ]
    export_log = InMemoryExportLog()
    overrides = {
        get_export_read_model: lambda: InMemoryExportReadModel(event, records),
        get_export_log_write_model: lambda: export_log,
    }
    return event, export_log, overrides


async def test_export_minted_download(client_factory, organizer_id):
    event, export_log, overrides = make_overrides(organizer_id)

    async with client_factory(overrides) as client:
        response = await client.get(
            EXPORT_URL.format(event_id=event.id), params={"format": "minted"}
        )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="smith_wedding_addresses_')
    assert disposition.endswith('.csv"')
    lines = response.text.split("\n")
    assert len(lines) == 2
    assert export_log.entries == [{"event_id": event.id, "format": "minted", "status": "all"}]


async def test_export_defaults_to_generic_csv(client_factory, organizer_id):
    event, export_log, overrides = make_overrides(organizer_id)

    async with client_factory(overrides) as client:
        response = await client.get(EXPORT_URL.format(event_id=event.id))

    assert response.status_code == 200
    assert len(response.text.split("\n")) == 3
    assert export_log.entries[0]["format"] == "csv"


async def test_export_with_status_filter(client_factory, organizer_id):
    event, export_log, overrides = make_overrides(organizer_id)

    async with client_factory(overrides) as client:
        response = await client.get(
            EXPORT_URL.format(event_id=event.id), params={"status": "pending"}
        )

    assert response.status_code == 200
    assert response.text.split("\n")[1].startswith('"Bob"')
    assert export_log.entries[0]["status"] == "pending"


async def test_export_unknown_format_or_status(client_factory, organizer_id):
    event, export_log, overrides = make_overrides(organizer_id)
    url = EXPORT_URL.format(event_id=event.id)

    async with client_factory(overrides) as client:
        bad_format = await client.get(url, params={"format": "pdf"})
        bad_status = await client.get(url, params={"status": "lost"})

    assert bad_format.status_code == 422
    assert bad_status.status_code == 422
    assert export_log.entries == []


async def test_export_someone_elses_event(client_factory):
    event, export_log, overrides = make_overrides(uuid4())

    async with client_factory(overrides) as client:
        response = await client.get(EXPORT_URL.format(event_id=event.id))

    assert response.status_code == 404
    assert response.json()["detail"] == "Event not found"
    assert export_log.entries == []
