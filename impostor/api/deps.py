"""
Shared API dependencies
Dependências comuns da API
"""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from impostor.core.database import get_db
from impostor.core.exceptions import PlayerNotFound
from impostor.services.room import RoomService
from impostor.services.round import RoundCoordinator
from impostor.services.word_pairs import WordPairSource


async def get_actor_id(x_player_id: str = Header(default="", alias="X-Player-Id")) -> str:
    """Player id the client received when it created or joined the room"""
    if not x_player_id.strip():
        raise PlayerNotFound("Identificação do jogador ausente")
    return x_player_id.strip()


async def get_room_service(db: AsyncSession = Depends(get_db)) -> RoomService:
    return RoomService(db)


async def get_round_coordinator(db: AsyncSession = Depends(get_db)) -> RoundCoordinator:
    return RoundCoordinator(db)


async def get_word_pair_source(db: AsyncSession = Depends(get_db)) -> WordPairSource:
    return WordPairSource(db)
