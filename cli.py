"""CLI commands for running Cardulary events without the dashboard."""

import asyncio
from datetime import date, datetime
from pathlib import Path
from uuid import UUID

import typer

from cardulary.email_service import get_email_service
from cardulary.errors import CardularyError
from cardulary.exports.engine import export_addresses
from cardulary.exports.formats import ExportFormat, StatusFilter
from cardulary.exports.write_model import SqlExportLogWriteModel
from cardulary.guests.dtos import Channel, EventCategory, GuestStatus
from cardulary.guests.features.create_event.write_model import SqlEventCreateWriteModel
from cardulary.guests.features.create_guest.write_model import SqlGuestCreateWriteModel
from cardulary.guests.features.send_requests.write_model import SqlDeliveryDispatcher
from cardulary.guests.repository.read_models import SqlEventReadModel
from cardulary.sms_service import get_sms_service

app = typer.Typer(help="CLI commands for Cardulary address collection")

organizer_option = typer.Option(..., "--organizer-id", "-o", help="Organizer UUID")


def _fail(error: CardularyError) -> None:
    typer.secho(error.message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command()
def create_event(
    name: str = typer.Option(..., "--name", "-n", help="Event name"),
    organizer_id: UUID = organizer_option,
    organizer_email: str = typer.Option(
        None, "--organizer-email", help="Needed the first time this organizer creates an event"
    ),
    organizer_name: str = typer.Option(None, "--organizer-name"),
    category: EventCategory = typer.Option(None, "--category", "-c"),
    event_date: datetime = typer.Option(None, "--date", "-d", formats=["%Y-%m-%d"]),
    message: str = typer.Option(None, "--message", "-m", help="Shown on the address form"),
):
    """Create an event for an organizer."""
    try:
        event = asyncio.run(
            SqlEventCreateWriteModel().create_event(
                organizer_id=organizer_id,
                name=name,
                category=category,
                event_date=event_date.date() if event_date else None,
                custom_message=message,
                organizer_email=organizer_email,
                organizer_name=organizer_name,
            )
        )
    except CardularyError as e:
        _fail(e)

    typer.secho("Event created!", fg=typer.colors.GREEN)
    typer.secho(f"  Event ID: {event.id}", fg=typer.colors.CYAN)
    typer.secho(f"  Name: {event.name}", fg=typer.colors.BLUE)


@app.command()
def add_guest(
    event_id: UUID = typer.Argument(..., help="Event UUID"),
    organizer_id: UUID = organizer_option,
    first_name: str = typer.Option(..., "--first-name", "-f"),
    last_name: str = typer.Option(..., "--last-name", "-l"),
    email: str = typer.Option(None, "--email", "-e"),
    phone: str = typer.Option(None, "--phone", "-p"),
):
    """Add a guest to an event and print their submission link."""
    try:
        guest = asyncio.run(
            SqlGuestCreateWriteModel().create_guest(
                event_id=event_id,
                organizer_id=organizer_id,
                first_name=first_name,
                last_name=last_name,
                email=email,
                phone=phone,
            )
        )
    except CardularyError as e:
        _fail(e)

    typer.secho("Guest created!", fg=typer.colors.GREEN)
    typer.secho(f"  Guest ID: {guest.id}", fg=typer.colors.CYAN)
    typer.secho(f"  Name: {guest.full_name}", fg=typer.colors.BLUE)
    typer.secho(f"  Submission link: {guest.submission_link}", fg=typer.colors.CYAN)


async def _guests_awaiting(event_id: UUID, organizer_id: UUID, reminder: bool) -> list[UUID]:
    guests = await SqlEventReadModel().list_guests(event_id, organizer_id)
    wanted = {GuestStatus.PENDING} if reminder else {GuestStatus.NOT_SENT, GuestStatus.BOUNCED}
    return [guest.id for guest in guests or [] if guest.status in wanted]


@app.command()
def send_requests(
    event_id: UUID = typer.Argument(..., help="Event UUID"),
    organizer_id: UUID = organizer_option,
    message: str = typer.Option(
        ..., "--message", "-m", help="Message template; {firstName} and [link] are filled in"
    ),
    channel: Channel = typer.Option(Channel.EMAIL, "--channel"),
    guests: list[UUID] = typer.Option(
        [],
        "--guest",
        "-g",
        help="Guest UUIDs. Defaults to every guest not yet reached (or pending, with --reminder)",
    ),
    reminder: bool = typer.Option(False, "--reminder", help="Send reminders instead"),
    organizer_name: str = typer.Option("The organizer", "--organizer-name"),
):
    """Send address requests (or reminders) to an event's guests."""

    async def _send():
        guest_ids = guests or await _guests_awaiting(event_id, organizer_id, reminder)
        dispatcher = SqlDeliveryDispatcher(
            email_service=get_email_service(), sms_service=get_sms_service()
        )
        return await dispatcher.dispatch(
            event_id=event_id,
            organizer_id=organizer_id,
            guest_ids=guest_ids,
            message_template=message,
            channel=channel,
            organizer_name=organizer_name,
            reminder=reminder,
        )

    try:
        batch = asyncio.run(_send())
    except CardularyError as e:
        _fail(e)

    noun = "reminders" if reminder else "requests"
    typer.secho(
        f"Sent {batch.success_count} {noun}, {batch.failure_count} failed",
        fg=typer.colors.GREEN if batch.failure_count == 0 else typer.colors.YELLOW,
    )
    for error in batch.errors:
        typer.secho(f"  {error}", fg=typer.colors.RED)


@app.command()
def export(
    event_id: UUID = typer.Argument(..., help="Event UUID"),
    organizer_id: UUID = organizer_option,
    export_format: ExportFormat = typer.Option(ExportFormat.CSV, "--format", "-f"),
    status: StatusFilter = typer.Option(StatusFilter.ALL, "--status", "-s"),
    output_dir: Path = typer.Option(Path("."), "--output-dir", help="Where to write the file"),
):
    """Export an event's addresses to a file."""

    async def _export():
        read_model = SqlEventReadModel()
        event = await read_model.get_event(event_id, organizer_id)
        if event is None:
            return None
        records = await read_model.get_export_records(event_id, organizer_id)
        payload = export_addresses(
            records=records or [],
            export_format=export_format,
            status_filter=status,
            event_name=event.name,
            today=date.today(),
        )
        await SqlExportLogWriteModel().record_export(event_id, organizer_id, export_format, status)
        return payload

    payload = asyncio.run(_export())
    if payload is None:
        typer.secho("Event not found", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    path = output_dir / payload.filename
    path.write_bytes(payload.content)
    typer.secho(f"Exported to {path}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
