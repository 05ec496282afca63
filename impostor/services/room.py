"""
Room management service
Gerenciamento de salas: criação, entrada, saída, configurações e host
"""

import logging
import random
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from impostor.core.config import settings
from impostor.core.database import store_call
from impostor.core.exceptions import (
    AlreadyHost, CannotRemoveSelf, CodeGenerationExhausted, GameError,
    InvalidImpostorCount, InvalidPlayerName, PartialRoundUpdate, RoomFull, RoundInProgress
)
from impostor.models.player import Player
from impostor.models.room import Room
from impostor.schemas.room import (
    GameMode, PlayerResponse, RoomDetailResponse, RoomResponse, RoomSession,
    RoomSettingsUpdate, RoomStatus, WordCategory
)
from impostor.services import queries
from impostor.services.room_events import RoomEventPublisher, RoomEventType, room_events
from impostor.services.round import RoundCoordinator

logger = logging.getLogger(__name__)


def generate_room_code(rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    alphabet = settings.ROOM_CODE_ALPHABET
    return "".join(alphabet[rng.randrange(len(alphabet))] for _ in range(settings.ROOM_CODE_LENGTH))


def normalize_player_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name or len(name) > settings.PLAYER_NAME_MAX_LENGTH:
        raise InvalidPlayerName(name=name)
    return name


class RoomService:
    """Room membership and host-only room administration"""

    def __init__(self, db: AsyncSession, rng: Optional[random.Random] = None,
                 events: Optional[RoomEventPublisher] = None):
        self.db = db
        self.rng = rng
        self.events = events or room_events

    async def create_room(self, player_name: str) -> RoomSession:
        """Create a room with a fresh code; the creator becomes its host"""
        name = normalize_player_name(player_name)
        code = await self._unique_code()

        room = Room(
            id=str(uuid.uuid4()),
            code=code,
            status=RoomStatus.LOBBY,
            round_number=0,
            num_impostors=1,
            game_mode=GameMode.NORMAL,
            word_category=WordCategory.ALL,
        )
        host = Player(id=str(uuid.uuid4()), room_id=room.id, name=name, is_host=True)
        room.host_player_id = host.id

        self.db.add(room)
        self.db.add(host)
        await self._commit("rooms.create")

        logger.info(f"Room {room.code} ({room.id}) created by player {host.id}")
        return RoomSession(room_id=room.id, room_code=room.code, player_id=host.id)

    async def _unique_code(self) -> str:
        for attempt in range(settings.ROOM_CODE_MAX_ATTEMPTS):
            code = generate_room_code(self.rng)
            result = await store_call(
                self.db.execute(select(Room.id).where(Room.code == code)), "rooms.code_exists"
            )
            if result.scalar_one_or_none() is None:
                return code
            logger.debug(f"Room code {code} taken, attempt {attempt + 1}")

        logger.error(f"No unique room code after {settings.ROOM_CODE_MAX_ATTEMPTS} attempts")
        raise CodeGenerationExhausted(attempts=settings.ROOM_CODE_MAX_ATTEMPTS)

    async def join_room(self, code: str, player_name: str) -> RoomSession:
        """
        Join a room by code.

        Joining mid-round is allowed; the newcomer gets a word on the next reset.
        """
        name = normalize_player_name(player_name)
        room = await queries.get_room_by_code(self.db, code)

        if await queries.count_players(self.db, room.id) >= settings.MAX_PLAYERS_PER_ROOM:
            raise RoomFull(room_id=room.id)

        player = Player(id=str(uuid.uuid4()), room_id=room.id, name=name, is_host=False)
        self.db.add(player)
        await self._commit("players.insert")

        await self.events.publish(room.id, RoomEventType.PLAYER_JOINED, player_id=player.id)
        return RoomSession(room_id=room.id, room_code=room.code, player_id=player.id)

    async def get_room(self, room_id: str) -> RoomResponse:
        room = await queries.get_room(self.db, room_id)
        return RoomResponse.model_validate(room)

    async def get_room_detail(self, room_id: str) -> RoomDetailResponse:
        room = await queries.get_room(self.db, room_id)
        players = await queries.list_players(self.db, room_id)
        detail = RoomDetailResponse.model_validate(room)
        detail.players = [PlayerResponse.model_validate(p) for p in players]
        return detail

    async def get_room_by_code(self, code: str) -> RoomDetailResponse:
        room = await queries.get_room_by_code(self.db, code)
        return await self.get_room_detail(room.id)

    async def list_players(self, room_id: str) -> list:
        await queries.get_room(self.db, room_id)
        players = await queries.list_players(self.db, room_id)
        return [PlayerResponse.model_validate(p) for p in players]

    async def update_settings(self, room_id: str, actor_id: str, data: RoomSettingsUpdate) -> RoomResponse:
        """
        Change game mode, word category or impostor count (host only).

        Mode and category are locked while a round is in progress.
        """
        room = await queries.get_room(self.db, room_id)
        queries.require_host(room, actor_id)

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if room.is_in_progress and changes.keys() & {"game_mode", "word_category"}:
            raise RoundInProgress(room_id=room_id, fields=sorted(changes))
        if "num_impostors" in changes:
            player_count = await queries.count_players(self.db, room_id)
            # A room still filling up may keep the default of one impostor
            if changes["num_impostors"] > max(1, player_count - 1):
                raise InvalidImpostorCount(num_impostors=changes["num_impostors"], player_count=player_count)

        for field, value in changes.items():
            setattr(room, field, value)

        if changes:
            await self._commit("rooms.update_settings")
            await self.events.publish(room.id, RoomEventType.SETTINGS_UPDATED,
                                      round_number=room.round_number,
                                      **{k: getattr(v, "value", v) for k, v in changes.items()})
        return RoomResponse.model_validate(room)

    async def leave_room(self, room_id: str, player_id: str) -> None:
        """
        Remove the calling player.

        A leaving host hands the flag to the earliest-joined remaining player.
        An empty room is kept for external cleanup.
        """
        room = await queries.get_room(self.db, room_id)
        player = await queries.get_player(self.db, room_id, player_id)

        await self.db.delete(player)
        successor = None
        if room.host_player_id == player.id:
            remaining = [p for p in await queries.list_players(self.db, room_id) if p.id != player.id]
            successor = remaining[0] if remaining else None
            room.host_player_id = successor.id if successor else None
            if successor:
                successor.is_host = True

        await self._commit("players.leave")

        await self.events.publish(room.id, RoomEventType.PLAYER_LEFT, player_id=player.id)
        if successor:
            logger.info(f"Host of room {room.id} passed from {player.id} to {successor.id}")
            await self.events.publish(room.id, RoomEventType.HOST_CHANGED, host_player_id=successor.id)

    async def remove_player(self, room_id: str, actor_id: str, target_player_id: str) -> None:
        """
        Kick a player (host only).

        A room in progress goes back to the lobby first: its words would no
        longer match the players.
        """
        room = await queries.get_room(self.db, room_id)
        queries.require_host(room, actor_id)
        if target_player_id == actor_id:
            raise CannotRemoveSelf(room_id=room_id)
        target = await queries.get_player(self.db, room_id, target_player_id)

        lobby_reset = False
        if room.is_in_progress:
            await RoundCoordinator(self.db, self.rng, self.events).force_lobby(room_id)
            lobby_reset = True

        try:
            await self.db.delete(target)
            await self._commit("players.remove")
        except GameError as e:
            if lobby_reset:
                logger.error(f"Room {room_id} is back in the lobby but player {target_player_id} was not removed")
                raise PartialRoundUpdate(room_id=room_id, player_id=target_player_id) from e
            raise

        logger.info(f"Player {target_player_id} removed from room {room_id} by {actor_id}")
        await self.events.publish(room_id, RoomEventType.PLAYER_REMOVED, player_id=target_player_id)

    async def delegate_host(self, room_id: str, actor_id: str, new_host_id: str) -> RoomResponse:
        """Hand the host role to another player of the room (host only)"""
        room = await queries.get_room(self.db, room_id)
        queries.require_host(room, actor_id)
        if new_host_id == actor_id:
            raise AlreadyHost(room_id=room_id)

        new_host = await queries.get_player(self.db, room_id, new_host_id)
        old_host = await queries.get_player(self.db, room_id, actor_id)

        room.host_player_id = new_host.id
        old_host.is_host = False
        new_host.is_host = True
        await self._commit("rooms.delegate_host")

        logger.info(f"Host of room {room_id} delegated from {actor_id} to {new_host_id}")
        await self.events.publish(room_id, RoomEventType.HOST_CHANGED, host_player_id=new_host_id)
        return RoomResponse.model_validate(room)

    async def _commit(self, operation: str) -> None:
        try:
            await store_call(self.db.commit(), operation)
        except Exception:
            await self.db.rollback()
            raise
