"""
Word pair model
Pares de palavras e histórico de uso por sala
"""

from sqlalchemy import Column, String, Integer, DateTime, Index
from sqlalchemy.sql import func

from impostor.core.database import Base


class WordPair(Base):
    """Immutable reference data: a crewmate word and its related impostor word"""

    __tablename__ = "word_pairs"

    id = Column(String(36), primary_key=True, index=True)
    crewmate_word = Column(String(50), nullable=False)
    impostor_word = Column(String(50), nullable=False)
    category = Column(String(20), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<WordPair(id={self.id}, category={self.category})>"

    def word_for(self, is_impostor: bool) -> str:
        return self.impostor_word if is_impostor else self.crewmate_word


class RoomWordHistory(Base):
    """Append-only log of the pair dealt in each round of a room"""

    __tablename__ = "room_word_history"
    __table_args__ = (
        Index("ix_room_word_history_room_round", "room_id", "round_number"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    room_id = Column(String(36), nullable=False)
    round_number = Column(Integer, nullable=False)
    word_pair_id = Column(String(36), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<RoomWordHistory(room_id={self.room_id}, round={self.round_number}, pair={self.word_pair_id})>"
