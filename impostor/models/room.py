"""
Room model
Modelo de sala
"""

from sqlalchemy import Column, String, Integer, DateTime, Enum
from sqlalchemy.sql import func

from impostor.core.database import Base
from impostor.schemas.room import RoomStatus, GameMode, WordCategory


def _enum_values(obj):
    return [e.value for e in obj]


class Room(Base):
    """A game session identified by a short code"""

    __tablename__ = "rooms"

    id = Column(String(36), primary_key=True, index=True)
    code = Column(String(8), nullable=False, unique=True, index=True)
    # Weak reference: no FK so the host row can be deleted independently
    host_player_id = Column(String(36), nullable=True)

    status = Column(Enum(RoomStatus, values_callable=_enum_values),
                    default=RoomStatus.LOBBY, nullable=False)
    round_number = Column(Integer, default=0, nullable=False)
    word = Column(String(100), nullable=True)
    impostor_word = Column(String(100), nullable=True)
    num_impostors = Column(Integer, default=1, nullable=False)
    game_mode = Column(Enum(GameMode, values_callable=_enum_values),
                       default=GameMode.NORMAL, nullable=False)
    word_category = Column(Enum(WordCategory, values_callable=_enum_values),
                           default=WordCategory.ALL, nullable=False)
    starting_player_id = Column(String(36), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Room(id={self.id}, code={self.code}, status={self.status}, round={self.round_number})>"

    @property
    def is_in_progress(self) -> bool:
        return self.status == RoomStatus.IN_PROGRESS
