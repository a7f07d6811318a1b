from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventhub.database.db import Base


class Event(Base):
    __tablename__ = "events"
    # Never hand out the id of a deleted event again
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    activity: Mapped[str] = mapped_column(String, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    location: Mapped[str] = mapped_column(String, nullable=False)
    host_instagram: Mapped[str] = mapped_column(String, nullable=False)
    capacity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    attendees: Mapped[list["Attendee"]] = relationship(
        back_populates="event",
        order_by="Attendee.id",
        cascade="all, delete-orphan",
    )
