"""
Player word model
Palavra de cada jogador por rodada
"""

from sqlalchemy import Column, String, Integer, Boolean, DateTime, UniqueConstraint, Index
from sqlalchemy.sql import func

from impostor.core.database import Base


class PlayerWord(Base):
    """One row per player per round while the round is current"""

    __tablename__ = "player_words"
    __table_args__ = (
        UniqueConstraint("room_id", "round_number", "player_id", name="uq_player_words_round_player"),
        Index("ix_player_words_room_round", "room_id", "round_number"),
    )

    id = Column(String(36), primary_key=True)
    room_id = Column(String(36), nullable=False, index=True)
    round_number = Column(Integer, nullable=False)
    player_id = Column(String(36), nullable=False)
    word = Column(String(100), nullable=False)
    is_impostor = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<PlayerWord(room_id={self.room_id}, round={self.round_number}, player_id={self.player_id})>"
