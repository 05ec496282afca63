"""
Round coordinator tests
Testes do início, reinício e retorno ao lobby das rodadas
"""

import asyncio
import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from impostor.core.exceptions import (
    BackendUnavailable, InsufficientPlayers, InvalidImpostorCount, NotHost, PlayerNotFound,
    RoundConflict, WordNotReady
)
from impostor.core.config import settings
from impostor.models.player_word import PlayerWord
from impostor.schemas.room import GameMode, RoomSettingsUpdate, RoomStatus, WordCategory
from impostor.services import queries
from impostor.services.word_pairs import WordPairSource


async def count_words(db, room_id):
    stmt = select(func.count(PlayerWord.id)).where(PlayerWord.room_id == room_id)
    return (await db.execute(stmt)).scalar()


class TestStartRound:
    """startRound"""

    async def test_host_and_two_players(self, coordinator, make_room, seeded_session):
        host, player_ids = await make_room(3)

        result = await coordinator.start_round(host.room_id, host.player_id, 1)

        assert result.round_number == 1
        assert result.starting_player_id in player_ids

        words = await coordinator.list_round_words(host.room_id, 1)
        assert sorted(w.player_id for w in words) == sorted(player_ids)

        impostors = [w for w in words if w.is_impostor]
        crewmates = [w for w in words if not w.is_impostor]
        assert len(impostors) == 1
        assert len({w.word for w in crewmates}) == 1
        assert impostors[0].word != crewmates[0].word

        room = await queries.get_room(seeded_session, host.room_id)
        assert room.status == RoomStatus.IN_PROGRESS
        assert room.round_number == 1
        assert room.word == crewmates[0].word
        assert room.impostor_word == impostors[0].word
        assert room.num_impostors == 1
        assert room.starting_player_id == result.starting_player_id

    @pytest.mark.parametrize("player_count,num_impostors", [(4, 3), (6, 2), (10, 5)])
    async def test_one_row_per_player(self, coordinator, make_room, player_count, num_impostors):
        host, player_ids = await make_room(player_count)

        await coordinator.start_round(host.room_id, host.player_id, num_impostors)

        words = await coordinator.list_round_words(host.room_id, 1)
        assert len(words) == player_count
        assert len({w.player_id for w in words}) == player_count
        assert sum(1 for w in words if w.is_impostor) == num_impostors

    async def test_retry_leaves_only_latest_round(self, coordinator, make_room, seeded_session):
        host, player_ids = await make_room(4)

        await coordinator.start_round(host.room_id, host.player_id, 1)
        second = await coordinator.start_round(host.room_id, host.player_id, 1)

        assert second.round_number == 2
        assert await count_words(seeded_session, host.room_id) == len(player_ids)
        assert await coordinator.list_round_words(host.room_id, 1) == []
        assert len(await coordinator.list_round_words(host.room_id, 2)) == len(player_ids)

    async def test_stores_requested_impostor_count(self, coordinator, make_room, seeded_session):
        host, _ = await make_room(5)

        await coordinator.start_round(host.room_id, host.player_id, 3)

        room = await queries.get_room(seeded_session, host.room_id)
        assert room.num_impostors == 3

    async def test_only_host_can_start(self, coordinator, make_room, seeded_session):
        host, player_ids = await make_room(3)

        with pytest.raises(NotHost):
            await coordinator.start_round(host.room_id, player_ids[1], 1)

        assert await count_words(seeded_session, host.room_id) == 0

    async def test_requires_three_players(self, coordinator, make_room):
        host, _ = await make_room(2)

        with pytest.raises(InsufficientPlayers):
            await coordinator.start_round(host.room_id, host.player_id, 1)

    @pytest.mark.parametrize("num_impostors", [0, 3, 7])
    async def test_invalid_impostor_count(self, coordinator, make_room, num_impostors, seeded_session):
        host, _ = await make_room(3)

        with pytest.raises(InvalidImpostorCount):
            await coordinator.start_round(host.room_id, host.player_id, num_impostors)

        room = await queries.get_room(seeded_session, host.room_id)
        assert room.status == RoomStatus.LOBBY
        assert room.round_number == 0

    async def test_history_recorded(self, coordinator, make_room, seeded_session):
        host, _ = await make_room(3)

        await coordinator.start_round(host.room_id, host.player_id, 1)

        recent = await WordPairSource(seeded_session).recent_pair_ids(host.room_id)
        assert len(recent) == 1

    async def test_publishes_round_started(self, coordinator, make_room, redis_mock):
        host, _ = await make_room(3)
        redis_mock.clear()

        await coordinator.start_round(host.room_id, host.player_id, 1)

        channel, message = redis_mock.published[-1]
        assert channel == f"room:{host.room_id}"
        assert message["type"] == "round_started"
        assert message["round_number"] == 1


class TestResetRound:
    """resetRound"""

    async def test_round_number_increments(self, coordinator, make_room, seeded_session):
        host, _ = await make_room(3)

        rounds = [(await coordinator.start_round(host.room_id, host.player_id, 1)).round_number]
        for _ in range(3):
            rounds.append((await coordinator.reset_round(host.room_id, host.player_id)).round_number)

        assert rounds == [1, 2, 3, 4]
        room = await queries.get_room(seeded_session, host.room_id)
        assert room.status == RoomStatus.IN_PROGRESS

    async def test_reset_from_lobby_starts_playing(self, coordinator, make_room, seeded_session):
        host, player_ids = await make_room(3)

        result = await coordinator.reset_round(host.room_id, host.player_id)

        assert result.round_number == 1
        room = await queries.get_room(seeded_session, host.room_id)
        assert room.status == RoomStatus.IN_PROGRESS
        assert len(await coordinator.list_round_words(host.room_id, 1)) == len(player_ids)

    async def test_impostor_count_clamped_to_room_size(self, coordinator, room_service, make_room,
                                                       seeded_session):
        host, player_ids = await make_room(5)
        await coordinator.start_round(host.room_id, host.player_id, 4)
        await room_service.remove_player(host.room_id, host.player_id, player_ids[1])
        await room_service.remove_player(host.room_id, host.player_id, player_ids[2])

        result = await coordinator.reset_round(host.room_id, host.player_id)

        words = await coordinator.list_round_words(host.room_id, result.round_number)
        assert len(words) == 3
        assert sum(1 for w in words if w.is_impostor) == 2
        room = await queries.get_room(seeded_session, host.room_id)
        assert room.num_impostors == 4

    async def test_only_host_can_reset(self, coordinator, make_room):
        host, player_ids = await make_room(3)
        await coordinator.start_round(host.room_id, host.player_id, 1)

        with pytest.raises(NotHost):
            await coordinator.reset_round(host.room_id, player_ids[2])

    async def test_requires_three_players(self, coordinator, make_room):
        host, _ = await make_room(2)

        with pytest.raises(InsufficientPlayers):
            await coordinator.reset_round(host.room_id, host.player_id)

    async def test_pairs_not_repeated_within_category(self, coordinator, room_service, make_room):
        host, _ = await make_room(3)
        await room_service.update_settings(host.room_id, host.player_id,
                                           RoomSettingsUpdate(word_category=WordCategory.AGUA))

        await coordinator.start_round(host.room_id, host.player_id, 1)
        for _ in range(19):
            await coordinator.reset_round(host.room_id, host.player_id)

        # 20 pairs in the category, all inside the history window
        recent = await coordinator.word_source.recent_pair_ids(host.room_id)
        assert len(recent) == 20
        assert len(set(recent)) == 20


class TestForcedLobby:
    """Return to lobby when a player is removed mid-round"""

    async def test_force_lobby_clears_round(self, coordinator, make_room, seeded_session, redis_mock):
        host, _ = await make_room(3)
        await coordinator.start_round(host.room_id, host.player_id, 1)

        await coordinator.force_lobby(host.room_id)

        room = await queries.get_room(seeded_session, host.room_id)
        assert room.status == RoomStatus.LOBBY
        assert room.round_number == 0
        assert room.word is None
        assert room.impostor_word is None
        assert room.starting_player_id is None
        assert await count_words(seeded_session, host.room_id) == 0
        assert redis_mock.types()[-1] == "lobby_reset"

    async def test_next_round_after_lobby_is_one(self, coordinator, make_room):
        host, _ = await make_room(3)
        await coordinator.start_round(host.room_id, host.player_id, 1)
        await coordinator.reset_round(host.room_id, host.player_id)
        await coordinator.force_lobby(host.room_id)

        result = await coordinator.start_round(host.room_id, host.player_id, 1)

        assert result.round_number == 1


class TestRoundConflict:
    """Optimistic guard on the round number that was read"""

    async def test_stale_round_rolls_back(self, coordinator, make_room, seeded_session):
        host, player_ids = await make_room(3)
        await coordinator.start_round(host.room_id, host.player_id, 1)
        before = {w.id for w in await coordinator.list_round_words(host.room_id, 1)}

        rows = [
            {
                "id": str(uuid.uuid4()),
                "room_id": host.room_id,
                "round_number": 1,
                "player_id": player_id,
                "word": "X",
                "is_impostor": False,
            }
            for player_id in player_ids
        ]
        with pytest.raises(RoundConflict):
            await coordinator._commit_round(host.room_id, 0, rows, {"round_number": 1})

        after = {w.id for w in await coordinator.list_round_words(host.room_id, 1)}
        assert after == before
        room = await queries.get_room(seeded_session, host.room_id)
        assert room.round_number == 1

    async def test_store_timeout_leaves_round_untouched(self, coordinator, make_room, seeded_session,
                                                       monkeypatch):
        host, _ = await make_room(3)
        await coordinator.start_round(host.room_id, host.player_id, 1)
        before = {(w.id, w.word) for w in await coordinator.list_round_words(host.room_id, 1)}

        execute = AsyncSession.execute

        async def stalled_room_update(self, statement, *args, **kwargs):
            # Words are already replaced when the room update hangs
            if getattr(statement, "is_update", False):
                await asyncio.sleep(1)
            return await execute(self, statement, *args, **kwargs)

        with monkeypatch.context() as patch:
            patch.setattr(AsyncSession, "execute", stalled_room_update)
            patch.setattr(settings, "STORE_TIMEOUT_SECONDS", 0.05)

            with pytest.raises(BackendUnavailable):
                await coordinator.reset_round(host.room_id, host.player_id)

        after = {(w.id, w.word) for w in await coordinator.list_round_words(host.room_id, 1)}
        assert after == before
        assert await coordinator.list_round_words(host.room_id, 2) == []
        room = await queries.get_room(seeded_session, host.room_id)
        assert room.round_number == 1
        assert room.status == RoomStatus.IN_PROGRESS


class TestPlayerWord:
    """Client read contract"""

    async def test_word_of_current_round(self, coordinator, make_room):
        host, player_ids = await make_room(3)
        await coordinator.start_round(host.room_id, host.player_id, 1)
        words = {w.player_id: w for w in await coordinator.list_round_words(host.room_id, 1)}

        for player_id in player_ids:
            response = await coordinator.get_player_word(host.room_id, player_id)
            assert response.round_number == 1
            assert response.word == words[player_id].word
            assert response.is_impostor == words[player_id].is_impostor

    async def test_not_ready_before_first_round(self, coordinator, make_room):
        host, _ = await make_room(3)

        with pytest.raises(WordNotReady):
            await coordinator.get_player_word(host.room_id, host.player_id)

    async def test_not_ready_for_late_joiner(self, coordinator, room_service, make_room):
        host, _ = await make_room(3)
        await coordinator.start_round(host.room_id, host.player_id, 1)
        late = await room_service.join_room(host.room_code, "Atrasado")

        with pytest.raises(WordNotReady):
            await coordinator.get_player_word(host.room_id, late.player_id)

    async def test_previous_round_is_gone(self, coordinator, make_room):
        host, _ = await make_room(3)
        await coordinator.start_round(host.room_id, host.player_id, 1)
        await coordinator.reset_round(host.room_id, host.player_id)

        with pytest.raises(WordNotReady):
            await coordinator.get_player_word(host.room_id, host.player_id, round_number=1)

    async def test_removed_player_gets_final_error(self, coordinator, room_service, make_room):
        host, player_ids = await make_room(4)
        await room_service.remove_player(host.room_id, host.player_id, player_ids[1])
        await coordinator.start_round(host.room_id, host.player_id, 1)

        with pytest.raises(PlayerNotFound):
            await coordinator.get_player_word(host.room_id, player_ids[1])

    async def test_stranger_gets_final_error(self, coordinator, make_room):
        host, _ = await make_room(3)
        await coordinator.start_round(host.room_id, host.player_id, 1)

        with pytest.raises(PlayerNotFound):
            await coordinator.get_player_word(host.room_id, "not-in-room")

    async def test_anonymous_mode_hides_role(self, coordinator, room_service, make_room):
        host, player_ids = await make_room(3)
        await room_service.update_settings(host.room_id, host.player_id,
                                           RoomSettingsUpdate(game_mode=GameMode.ANONYMOUS))
        await coordinator.start_round(host.room_id, host.player_id, 1)

        for player_id in player_ids:
            response = await coordinator.get_player_word(host.room_id, player_id)
            assert response.is_impostor is None
            assert response.word
