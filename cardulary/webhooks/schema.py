from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResendBounce(BaseModel):
    message: str | None = None
    type: str | None = None
    sub_type: str | None = Field(default=None, alias="subType")


class ResendEmailEventData(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    email_id: str | None = None
    from_: str | None = Field(default=None, alias="from")
    to: list[str] = []
    subject: str | None = None
    created_at: datetime | None = None
    bounce: ResendBounce | None = None

    @field_validator("created_at", mode="before")
    @classmethod
    def normalize_timezone(cls, v: str | None) -> str | None:
        if isinstance(v, str) and v.endswith("+00"):
            return v + ":00"
        return v


class ResendWebhookEvent(BaseModel):
    type: str
    created_at: datetime | None = None
    data: ResendEmailEventData = ResendEmailEventData()

    @field_validator("created_at", mode="before")
    @classmethod
    def normalize_timezone(cls, v: str | None) -> str | None:
        if isinstance(v, str) and v.endswith("+00"):
            return v + ":00"
        return v
