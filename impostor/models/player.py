"""
Player model
Modelo de jogador
"""

from datetime import datetime, timezone

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey

from impostor.core.database import Base


class Player(Base):
    """A participant of one room. Exactly one player per room carries is_host."""

    __tablename__ = "players"

    id = Column(String(36), primary_key=True, index=True)
    room_id = Column(String(36), ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(20), nullable=False)
    is_host = Column(Boolean, default=False, nullable=False)

    # Microsecond resolution, used to order players and pick a successor host
    joined_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    def __repr__(self):
        return f"<Player(id={self.id}, room_id={self.room_id}, name={self.name}, is_host={self.is_host})>"
