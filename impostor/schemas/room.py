"""
Room Pydantic schemas
Modelos de validação e serialização de salas e jogadores
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RoomStatus(str, Enum):
    LOBBY = "lobby"
    IN_PROGRESS = "in_progress"


class GameMode(str, Enum):
    NORMAL = "normal"
    ANONYMOUS = "anonymous"  # players are not told whether they are the impostor


class WordCategory(str, Enum):
    ALL = "all"
    AGUA = "agua"
    VEICULOS = "veiculos"
    CASA = "casa"
    ANIMAIS = "animais"
    NATUREZA = "natureza"
    TECNOLOGIA = "tecnologia"
    CORPO = "corpo"
    COMIDA = "comida"
    ESPACO = "espaco"
    LIVROS = "livros"
    MUSICA = "musica"
    ESPORTES = "esportes"


class PlayerName(BaseModel):
    """Trimmed player name, 1 to 20 characters"""
    player_name: str = Field(..., description="Nome do jogador")

    @field_validator("player_name")
    @classmethod
    def validate_player_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("O nome não pode ser vazio")
        if len(v) > 20:
            raise ValueError("O nome deve ter no máximo 20 caracteres")
        return v


class RoomCreate(PlayerName):
    """Create a room; the creator becomes its host"""


class RoomJoin(PlayerName):
    """Join a room by its code"""
    code: str = Field(..., min_length=4, max_length=4, description="Código da sala")

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return v.strip().upper()


class RoomSession(BaseModel):
    """Identity a client keeps after creating or joining a room"""
    room_id: str
    room_code: str
    player_id: str


class RoomSettingsUpdate(BaseModel):
    """Host-only room settings; unset fields are left unchanged"""
    game_mode: Optional[GameMode] = None
    word_category: Optional[WordCategory] = None
    num_impostors: Optional[int] = Field(None, ge=1, description="Número de impostores")


class PlayerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    room_id: str
    name: str
    is_host: bool
    joined_at: datetime


class RoomResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    host_player_id: Optional[str] = None
    status: RoomStatus
    round_number: int
    num_impostors: int
    game_mode: GameMode
    word_category: WordCategory
    starting_player_id: Optional[str] = None


class RoomDetailResponse(RoomResponse):
    players: List[PlayerResponse] = Field(default_factory=list)


class DelegateHostRequest(BaseModel):
    new_host_id: str = Field(..., description="Jogador que passa a ser o host")
