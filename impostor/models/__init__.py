# Database models
from .room import Room
from .player import Player
from .player_word import PlayerWord
from .word_pair import WordPair, RoomWordHistory

__all__ = [
    "Room",
    "Player",
    "PlayerWord",
    "WordPair", "RoomWordHistory",
]
