from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from cardulary.auth import CurrentOrganizer, get_current_organizer
from cardulary.errors import EventNotFoundError
from cardulary.exports.engine import export_addresses
from cardulary.exports.formats import ExportFormat, StatusFilter
from cardulary.exports.write_model import ExportLogWriteModel, SqlExportLogWriteModel
from cardulary.guests.repository.read_models import EventReadModel, SqlEventReadModel
from cardulary.guests.urls import EXPORT_URL

router = APIRouter()


def get_export_read_model() -> EventReadModel:
    """Dependency to get event read model instance."""
    return SqlEventReadModel()


def get_export_log_write_model() -> ExportLogWriteModel:
    """Dependency to get export log write model instance."""
    return SqlExportLogWriteModel()


@router.get(EXPORT_URL)
async def export_event_addresses(
    event_id: UUID,
    export_format: ExportFormat = Query(ExportFormat.CSV, alias="format"),
    status: StatusFilter = Query(StatusFilter.ALL),
    organizer: CurrentOrganizer = Depends(get_current_organizer),
    read_model: EventReadModel = Depends(get_export_read_model),
    export_log: ExportLogWriteModel = Depends(get_export_log_write_model),
) -> Response:
    """
    Download the guest list of an event as a file.

    Printer formats (minted, shutterfly, vistaprint, avery) only include guests
    with an address; avery rows are sorted by ZIP for bulk mailing.
    """
    event = await read_model.get_event(event_id, organizer.id)
    if event is None:
        raise HTTPException(status_code=404, detail=EventNotFoundError.public_message)

    records = await read_model.get_export_records(event_id, organizer.id)
    payload = export_addresses(
        records=records or [],
        export_format=export_format,
        status_filter=status,
        event_name=event.name,
    )
    await export_log.record_export(event_id, organizer.id, export_format, status)

    return Response(
        content=payload.content,
        media_type=payload.content_type,
        headers={"Content-Disposition": f'attachment; filename="{payload.filename}"'},
    )
