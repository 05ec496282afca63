"""
Word pair source
Seleção de pares de palavras sem repetir as rodadas recentes da sala
"""

import json
import logging
import random
import uuid
from pathlib import Path
from typing import Collection, Iterable, List, Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from impostor.core.config import settings
from impostor.core.database import store_call
from impostor.core.exceptions import NoWordsAvailable
from impostor.models.word_pair import RoomWordHistory, WordPair
from impostor.schemas.room import WordCategory
from impostor.schemas.word_pair import CategoryStats, WordPairCreate
from impostor.services.shuffle import pick_one

logger = logging.getLogger(__name__)

DEFAULT_CATALOG = Path(__file__).resolve().parent.parent / "data" / "word_pairs.json"

# Stable ids so reseeding the catalog keeps history references valid
_PAIR_NAMESPACE = uuid.UUID("6f1c55a2-6a8e-4b53-9d43-3c1f0d7e2b11")


def pair_id_for(pair: WordPairCreate) -> str:
    key = f"{pair.category.value}:{pair.crewmate_word}:{pair.impostor_word}"
    return str(uuid.uuid5(_PAIR_NAMESPACE, key))


def choose_pair(candidates: Sequence[WordPair], excluded_pair_ids: Collection[str],
                rng: Optional[random.Random] = None) -> WordPair:
    """
    Pick a pair uniformly among candidates not in excluded_pair_ids.

    When the exclusion covers every candidate the full candidate list is used
    again: running out of fresh pairs is not an error.
    """
    if not candidates:
        raise NoWordsAvailable()

    excluded = set(excluded_pair_ids)
    available = [pair for pair in candidates if pair.id not in excluded]
    return pick_one(available or list(candidates), rng)


def load_catalog(path: Path = DEFAULT_CATALOG) -> List[WordPairCreate]:
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    return [WordPairCreate(**item) for item in raw]


class WordPairSource:
    """Word pair catalog and per-room usage history"""

    def __init__(self, db: AsyncSession, rng: Optional[random.Random] = None):
        self.db = db
        self.rng = rng

    async def candidates(self, category: WordCategory) -> List[WordPair]:
        """All pairs of a category, or of every category for 'all'"""
        stmt = select(WordPair).order_by(WordPair.id)
        if category != WordCategory.ALL:
            stmt = stmt.where(WordPair.category == category.value)

        result = await store_call(self.db.execute(stmt), "word_pairs.candidates")
        return list(result.scalars().all())

    async def recent_pair_ids(self, room_id: str, limit: Optional[int] = None) -> List[str]:
        """
        Pair ids dealt in the room's latest rounds, most recent first.

        Recency is insertion order: round numbers restart at 1 after the room
        is sent back to the lobby.
        """
        limit = limit or settings.WORD_HISTORY_WINDOW
        stmt = (
            select(RoomWordHistory.word_pair_id)
            .where(RoomWordHistory.room_id == room_id)
            .order_by(RoomWordHistory.id.desc())
            .limit(limit)
        )
        result = await store_call(self.db.execute(stmt), "room_word_history.recent")
        return list(result.scalars().all())

    async def select_pair(self, category: WordCategory, excluded_pair_ids: Collection[str]) -> WordPair:
        candidates = await self.candidates(category)
        if not candidates:
            logger.warning(f"No word pairs available for category {category.value}")
            raise NoWordsAvailable(category=category.value)
        return choose_pair(candidates, excluded_pair_ids, self.rng)

    async def record_usage(self, room_id: str, round_number: int, word_pair_id: str) -> None:
        """Append one history entry and commit it"""
        self.db.add(RoomWordHistory(
            room_id=room_id,
            round_number=round_number,
            word_pair_id=word_pair_id,
        ))
        await store_call(self.db.commit(), "room_word_history.insert")

    async def prune_history(self, room_id: str) -> int:
        """Keep only the room's latest history window"""
        stmt = (
            select(RoomWordHistory.id)
            .where(RoomWordHistory.room_id == room_id)
            .order_by(RoomWordHistory.id.desc())
            .offset(settings.WORD_HISTORY_WINDOW - 1)
            .limit(1)
        )
        result = await store_call(self.db.execute(stmt), "room_word_history.window")
        oldest_kept = result.scalar_one_or_none()
        if oldest_kept is None:
            return 0

        stmt = delete(RoomWordHistory).where(
            RoomWordHistory.room_id == room_id,
            RoomWordHistory.id < oldest_kept,
        )
        result = await store_call(self.db.execute(stmt), "room_word_history.prune")
        await store_call(self.db.commit(), "room_word_history.prune")
        return result.rowcount or 0

    async def add_pairs(self, pairs: Iterable[WordPairCreate]) -> int:
        """Insert pairs that are not in the catalog yet"""
        result = await store_call(self.db.execute(select(WordPair.id)), "word_pairs.ids")
        existing = set(result.scalars().all())

        added = 0
        for pair in pairs:
            pair_id = pair_id_for(pair)
            if pair_id in existing:
                continue
            self.db.add(WordPair(
                id=pair_id,
                crewmate_word=pair.crewmate_word,
                impostor_word=pair.impostor_word,
                category=pair.category.value,
            ))
            existing.add(pair_id)
            added += 1

        if added:
            await store_call(self.db.commit(), "word_pairs.insert")
        return added

    async def seed_default_catalog(self) -> int:
        """Load the bundled catalog when the table is empty"""
        result = await store_call(self.db.execute(select(func.count(WordPair.id))), "word_pairs.count")
        if result.scalar():
            return 0
        return await self.add_pairs(load_catalog())

    async def category_counts(self) -> List[CategoryStats]:
        stmt = (
            select(WordPair.category, func.count(WordPair.id))
            .group_by(WordPair.category)
            .order_by(WordPair.category)
        )
        result = await store_call(self.db.execute(stmt), "word_pairs.category_counts")
        return [CategoryStats(category=WordCategory(category), count=count)
                for category, count in result.all()]
