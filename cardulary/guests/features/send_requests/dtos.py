"""DTOs for sending address requests and reminders."""

from uuid import UUID

from pydantic import BaseModel, Field

from cardulary.guests.dtos import BatchResultDTO, Channel


class SendRequestsRequest(BaseModel):
    """Request body for a batch send.

    ``message`` may contain ``{firstName}`` and ``[link]`` placeholders.
    """

    guest_ids: list[UUID] = Field(min_length=1)
    message: str = Field(min_length=1)
    channel: Channel = Channel.EMAIL


class BatchResults(BaseModel):
    success: int
    failed: int
    errors: list[str]


class SendRequestsResponse(BaseModel):
    message: str
    results: BatchResults

    @classmethod
    def from_batch(cls, batch: BatchResultDTO, noun: str = "requests") -> "SendRequestsResponse":
        return cls(
            message=f"Sent {batch.success_count} {noun}, {batch.failure_count} failed",
            results=BatchResults(
                success=batch.success_count,
                failed=batch.failure_count,
                errors=batch.errors,
            ),
        )
