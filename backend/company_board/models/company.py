import uuid
from datetime import datetime
from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from company_board.models.base import Base

def _new_id() -> str:
    return uuid.uuid4().hex

class Company(Base):
    __tablename__ = "companies"

    # Opaque, store-assigned identifier
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(Text)
    ticket_number: Mapped[str] = mapped_column(Text)
    # "HH:MM", 24-hour clock
    opening_time: Mapped[str] = mapped_column(Text)
    closing_time: Mapped[str] = mapped_column(Text)
    jodi_info: Mapped[str | None] = mapped_column(Text, nullable=True)
    panel_info: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Assigned by the store, never by callers
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
