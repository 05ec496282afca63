"""
Uniform shuffling
Embaralhamento uniforme (Fisher-Yates)
"""

import random
from typing import Iterable, List, Optional, TypeVar

T = TypeVar("T")


def shuffle(items: Iterable[T], rng: Optional[random.Random] = None) -> List[T]:
    """
    Return a uniformly random permutation of items.

    The input is never mutated. Pass rng to draw from a specific generator;
    otherwise the module-level generator is used.
    """
    rng = rng or random
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def pick_one(items: List[T], rng: Optional[random.Random] = None) -> T:
    """Pick a single element uniformly at random"""
    if not items:
        raise ValueError("Cannot pick from an empty sequence")
    rng = rng or random
    return items[rng.randrange(len(items))]
