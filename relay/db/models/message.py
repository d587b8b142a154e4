from datetime import datetime
from sqlalchemy import Index, String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from relay.db.base import Base

class Message(Base):
    __tablename__ = "messages"
    __table_args__ = (Index("ix_messages_room_timestamp", "room", "timestamp"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    room: Mapped[str] = mapped_column(String(200))
    # Opaque to the server (clients send ciphertext); stored as received.
    payload: Mapped[str] = mapped_column(Text)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True))
