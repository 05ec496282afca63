"""
Room and player lookups shared by the game services
Consultas de salas e jogadores
"""

from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from impostor.core.database import store_call
from impostor.core.exceptions import NotHost, PlayerNotFound, RoomNotFound
from impostor.models.player import Player
from impostor.models.room import Room


async def get_room(db: AsyncSession, room_id: str) -> Room:
    # populate_existing: always read the committed row, not a stale identity map copy
    stmt = select(Room).where(Room.id == room_id).execution_options(populate_existing=True)
    result = await store_call(db.execute(stmt), "rooms.get")
    room = result.scalar_one_or_none()
    if not room:
        raise RoomNotFound(room_id=room_id)
    return room


async def get_room_by_code(db: AsyncSession, code: str) -> Room:
    code = code.strip().upper()
    stmt = select(Room).where(Room.code == code).execution_options(populate_existing=True)
    result = await store_call(db.execute(stmt), "rooms.get_by_code")
    room = result.scalar_one_or_none()
    if not room:
        raise RoomNotFound(code=code)
    return room


async def list_players(db: AsyncSession, room_id: str) -> List[Player]:
    """Players of a room in join order"""
    stmt = (
        select(Player)
        .where(Player.room_id == room_id)
        .order_by(Player.joined_at, Player.id)
        .execution_options(populate_existing=True)
    )
    result = await store_call(db.execute(stmt), "players.list")
    return list(result.scalars().all())


async def count_players(db: AsyncSession, room_id: str) -> int:
    stmt = select(func.count(Player.id)).where(Player.room_id == room_id)
    result = await store_call(db.execute(stmt), "players.count")
    return result.scalar() or 0


async def get_player(db: AsyncSession, room_id: str, player_id: str) -> Player:
    stmt = (
        select(Player)
        .where(Player.id == player_id, Player.room_id == room_id)
        .execution_options(populate_existing=True)
    )
    result = await store_call(db.execute(stmt), "players.get")
    player = result.scalar_one_or_none()
    if not player:
        raise PlayerNotFound(room_id=room_id, player_id=player_id)
    return player


def require_host(room: Room, actor_id: str) -> None:
    if not actor_id or room.host_player_id != actor_id:
        raise NotHost(room_id=room.id, actor_id=actor_id)
