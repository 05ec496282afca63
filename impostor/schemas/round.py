"""
Round Pydantic schemas
Modelos das rodadas e palavras dos jogadores
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StartRoundRequest(BaseModel):
    num_impostors: int = Field(..., description="Número de impostores")


class RoundResult(BaseModel):
    """What a successful round transition returns to its caller"""
    round_number: int
    starting_player_id: str


class PlayerWordResponse(BaseModel):
    """
    A player's word for one round.

    is_impostor is None when the room plays in anonymous mode.
    """
    model_config = ConfigDict(from_attributes=True)

    round_number: int
    word: str
    is_impostor: Optional[bool] = None
