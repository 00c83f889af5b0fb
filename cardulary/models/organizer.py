from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from cardulary.config.table_names import TableNames
from cardulary.models.base import Base, TimeStamp


class Organizer(Base, TimeStamp):
    __tablename__ = TableNames.ORGANIZERS.value

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # credentials are managed by the auth service
    hashed_password: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Organizer {self.email}>"
