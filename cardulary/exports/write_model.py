from abc import ABC, abstractmethod
from datetime import UTC, datetime
from functools import partial
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from cardulary.config.database import async_session_manager
from cardulary.exports.formats import ExportFormat, StatusFilter
from cardulary.guests.repository.orm_models import ExportLog


class ExportLogWriteModel(ABC):
    @abstractmethod
    async def record_export(
        self,
        event_id: UUID,
        organizer_id: UUID,
        export_format: ExportFormat,
        status_filter: StatusFilter,
    ) -> None:
        """Keep an audit row for a successful export."""
        raise NotImplementedError


class SqlExportLogWriteModel(ExportLogWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def record_export(
        self,
        event_id: UUID,
        organizer_id: UUID,
        export_format: ExportFormat,
        status_filter: StatusFilter,
    ) -> None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            session.add(
                ExportLog(
                    event_id=event_id,
                    organizer_id=organizer_id,
                    format=export_format.value,
                    filter_criteria={"status": status_filter.value},
                    exported_at=datetime.now(UTC),
                )
            )
            await session.flush()
