from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from cardulary.config.table_names import TableNames
from cardulary.models.base import Base, TimeStamp


class RateLimitCounter(Base, TimeStamp):
    """Fixed-window request counter shared by every API instance."""

    __tablename__ = TableNames.RATE_LIMIT_COUNTERS.value

    key: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    reset_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<RateLimitCounter {self.key}={self.count}>"
