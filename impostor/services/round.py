"""
Round coordination
Coordena o início e o reinício das rodadas: sorteio, palavras e estado da sala

Ordering contract: the word rows of a round are written before the room row
that announces the round, inside one transaction guarded by the round number
that was read. A reader that sees round N on the room always finds the words
of round N.
"""

import logging
import random
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from impostor.core.config import settings
from impostor.core.database import store_call
from impostor.core.exceptions import (
    InsufficientPlayers, RoundConflict, WordNotReady
)
from impostor.models.player import Player
from impostor.models.player_word import PlayerWord
from impostor.models.room import Room
from impostor.schemas.room import GameMode, RoomStatus, WordCategory
from impostor.schemas.round import PlayerWordResponse, RoundResult
from impostor.services import queries
from impostor.services.role_assigner import assign_impostors, clamp_impostor_count, validate_impostor_count
from impostor.services.room_events import RoomEventPublisher, RoomEventType, room_events
from impostor.services.shuffle import pick_one, shuffle
from impostor.services.word_pairs import WordPairSource

logger = logging.getLogger(__name__)


class RoundCoordinator:
    """Round transitions of a room: start, reset and forced return to lobby"""

    def __init__(self, db: AsyncSession, rng: Optional[random.Random] = None,
                 events: Optional[RoomEventPublisher] = None):
        self.db = db
        self.rng = rng
        self.word_source = WordPairSource(db, rng)
        self.events = events or room_events

    async def start_round(self, room_id: str, actor_id: str, num_impostors: int) -> RoundResult:
        """Deal a new round with a caller-chosen impostor count (host only)"""
        room = await queries.get_room(self.db, room_id)
        queries.require_host(room, actor_id)

        players = await queries.list_players(self.db, room_id)
        validate_impostor_count(len(players), num_impostors)

        return await self._deal_round(room, players, num_impostors,
                                      event_type=RoomEventType.ROUND_STARTED,
                                      store_num_impostors=True)

    async def reset_round(self, room_id: str, actor_id: str) -> RoundResult:
        """Deal the next round reusing the room's impostor count (host only)"""
        room = await queries.get_room(self.db, room_id)
        queries.require_host(room, actor_id)

        players = await queries.list_players(self.db, room_id)
        if len(players) < settings.MIN_PLAYERS:
            raise InsufficientPlayers(player_count=len(players))

        num_impostors = clamp_impostor_count(room.num_impostors, len(players))
        return await self._deal_round(room, players, num_impostors,
                                      event_type=RoomEventType.ROUND_RESET,
                                      store_num_impostors=False)

    async def force_lobby(self, room_id: str) -> None:
        """Drop every word row of the room and send it back to the lobby at round 0"""
        async def _write():
            await self.db.execute(delete(PlayerWord).where(PlayerWord.room_id == room_id))
            await self.db.execute(
                update(Room)
                .where(Room.id == room_id)
                .values(
                    status=RoomStatus.LOBBY,
                    round_number=0,
                    word=None,
                    impostor_word=None,
                    starting_player_id=None,
                )
            )
            await self.db.commit()

        await self._run_transaction(_write(), "round.force_lobby")
        logger.info(f"Room {room_id} forced back to lobby")
        await self.events.publish(room_id, RoomEventType.LOBBY_RESET, round_number=0)

    async def get_player_word(self, room_id: str, player_id: str,
                              round_number: Optional[int] = None) -> PlayerWordResponse:
        """
        Word of a player for a round, the room's current round by default.

        Raises WordNotReady while no row is visible; callers retry with backoff.
        A player who is not in the room gets PlayerNotFound, which is final.
        """
        room = await queries.get_room(self.db, room_id)
        await queries.get_player(self.db, room_id, player_id)
        if round_number is None:
            round_number = room.round_number
        if round_number < 1:
            raise WordNotReady(room_id=room_id, round_number=round_number)

        stmt = select(PlayerWord).where(
            PlayerWord.room_id == room_id,
            PlayerWord.player_id == player_id,
            PlayerWord.round_number == round_number,
        )
        result = await store_call(self.db.execute(stmt), "player_words.get")
        row = result.scalar_one_or_none()
        if not row:
            raise WordNotReady(room_id=room_id, player_id=player_id, round_number=round_number)

        return PlayerWordResponse(
            round_number=row.round_number,
            word=row.word,
            is_impostor=row.is_impostor if room.game_mode == GameMode.NORMAL else None,
        )

    async def list_round_words(self, room_id: str, round_number: int) -> List[PlayerWord]:
        stmt = select(PlayerWord).where(
            PlayerWord.room_id == room_id,
            PlayerWord.round_number == round_number,
        )
        result = await store_call(self.db.execute(stmt), "player_words.list")
        return list(result.scalars().all())

    async def _deal_round(self, room: Room, players: List[Player], num_impostors: int,
                          event_type: RoomEventType, store_num_impostors: bool) -> RoundResult:
        category = WordCategory(room.word_category or WordCategory.ALL)
        excluded = await self.word_source.recent_pair_ids(room.id)
        pair = await self.word_source.select_pair(category, excluded)

        shuffled = shuffle(players, self.rng)
        impostor_ids = assign_impostors([p.id for p in shuffled], num_impostors, self.rng)
        # Independent draw from the impostor selection
        starting_player = pick_one(shuffled, self.rng)

        read_round = room.round_number
        new_round = read_round + 1

        rows = [
            {
                "id": str(uuid.uuid4()),
                "room_id": room.id,
                "round_number": new_round,
                "player_id": player.id,
                "word": pair.word_for(player.id in impostor_ids),
                "is_impostor": player.id in impostor_ids,
            }
            for player in shuffled
        ]

        room_values: Dict[str, Any] = {
            "status": RoomStatus.IN_PROGRESS,
            "round_number": new_round,
            "word": pair.crewmate_word,
            "impostor_word": pair.impostor_word,
            "starting_player_id": starting_player.id,
        }
        if store_num_impostors:
            room_values["num_impostors"] = num_impostors

        await self._commit_round(room.id, read_round, rows, room_values)
        logger.info(
            f"Room {room.id} dealt round {new_round}: {len(rows)} players, "
            f"{num_impostors} impostor(s), category {category.value}"
        )

        await self._record_history(room.id, new_round, pair.id)
        await self.events.publish(room.id, event_type, round_number=new_round,
                                  starting_player_id=starting_player.id)

        return RoundResult(round_number=new_round, starting_player_id=starting_player.id)

    async def _commit_round(self, room_id: str, read_round: int,
                            rows: List[Dict[str, Any]], room_values: Dict[str, Any]) -> None:
        async def _write():
            # Clears leftovers of every earlier round, including a retried one
            await self.db.execute(delete(PlayerWord).where(PlayerWord.room_id == room_id))
            await self.db.execute(insert(PlayerWord), rows)
            result = await self.db.execute(
                update(Room)
                .where(Room.id == room_id, Room.round_number == read_round)
                .values(**room_values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise RoundConflict(room_id=room_id, read_round=read_round)
            await self.db.commit()

        await self._run_transaction(_write(), "round.commit")

    async def _run_transaction(self, write, operation: str) -> None:
        try:
            await store_call(write, operation)
        except Exception:
            await self.db.rollback()
            raise

    async def _record_history(self, room_id: str, round_number: int, word_pair_id: str) -> None:
        """Best-effort: the round is already committed"""
        try:
            await self.word_source.record_usage(room_id, round_number, word_pair_id)
            await self.word_source.prune_history(room_id)
        except Exception as e:
            logger.warning(f"Failed to record word history for room {room_id} round {round_number}: {e}")
            await self.db.rollback()
