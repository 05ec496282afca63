# Pydantic schemas
from .room import (
    RoomStatus, GameMode, WordCategory, PlayerName, RoomCreate, RoomJoin,
    RoomSession, RoomSettingsUpdate, PlayerResponse, RoomResponse,
    RoomDetailResponse, DelegateHostRequest
)
from .round import StartRoundRequest, RoundResult, PlayerWordResponse
from .word_pair import (
    WordPairBase, WordPairCreate, CategoryStats,
    CategoryListResponse
)
from .common import MessageResponse, ErrorResponse, HealthResponse

__all__ = [
    # Room schemas
    "RoomStatus", "GameMode", "WordCategory", "PlayerName", "RoomCreate",
    "RoomJoin", "RoomSession", "RoomSettingsUpdate", "PlayerResponse",
    "RoomResponse", "RoomDetailResponse", "DelegateHostRequest",

    # Round schemas
    "StartRoundRequest", "RoundResult", "PlayerWordResponse",

    # Word pair schemas
    "WordPairBase", "WordPairCreate", "CategoryStats",
    "CategoryListResponse",

    # Common schemas
    "MessageResponse", "ErrorResponse", "HealthResponse",
]
