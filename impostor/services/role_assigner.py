"""
Role assignment
Sorteio de impostores
"""

import logging
import random
from typing import List, Optional, Sequence, Set

from impostor.core.config import settings
from impostor.core.exceptions import (
    DuplicateAssignment, ImpostorCountMismatch, InsufficientPlayers, InvalidImpostorCount
)
from impostor.services.shuffle import shuffle

logger = logging.getLogger(__name__)


def validate_impostor_count(player_count: int, num_impostors: int) -> None:
    """Raise unless there are enough players and 1 <= num_impostors < player_count"""
    if player_count < settings.MIN_PLAYERS:
        raise InsufficientPlayers(player_count=player_count)
    if num_impostors < 1 or num_impostors >= player_count:
        raise InvalidImpostorCount(num_impostors=num_impostors, player_count=player_count)


def clamp_impostor_count(num_impostors: Optional[int], player_count: int) -> int:
    """Fit a stored impostor count into [1, player_count - 1]"""
    count = num_impostors or 1
    return max(1, min(count, player_count - 1))


def assign_impostors(player_ids: Sequence[str], num_impostors: int,
                     rng: Optional[random.Random] = None) -> Set[str]:
    """
    Choose exactly num_impostors distinct players as impostors.

    Shuffles the index range and takes the first num_impostors indices.
    A result of any other size is a defect and raises instead of degrading.
    """
    validate_impostor_count(len(player_ids), num_impostors)

    if len(set(player_ids)) != len(player_ids):
        logger.error(f"Duplicate player ids in role assignment: {list(player_ids)}")
        raise DuplicateAssignment(player_ids=list(player_ids))

    indices: List[int] = shuffle(range(len(player_ids)), rng)
    impostors = {player_ids[i] for i in indices[:num_impostors]}

    if len(impostors) != num_impostors:
        logger.error(f"Impostor count mismatch: expected {num_impostors}, got {len(impostors)}")
        raise ImpostorCountMismatch(expected=num_impostors, actual=len(impostors))

    return impostors
