"""
Room and round API endpoints
Endpoints de salas e rodadas
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from impostor.api.deps import get_actor_id, get_room_service, get_round_coordinator
from impostor.schemas.common import MessageResponse
from impostor.schemas.room import (
    DelegateHostRequest, PlayerResponse, RoomCreate, RoomDetailResponse, RoomJoin,
    RoomResponse, RoomSession, RoomSettingsUpdate
)
from impostor.schemas.round import PlayerWordResponse, RoundResult, StartRoundRequest
from impostor.services.room import RoomService
from impostor.services.round import RoundCoordinator

router = APIRouter()


@router.post("", response_model=RoomSession, status_code=status.HTTP_201_CREATED)
async def create_room(
    data: RoomCreate,
    room_service: RoomService = Depends(get_room_service)
):
    """
    Criar sala

    - **player_name**: nome do host (1-20 caracteres)
    """
    return await room_service.create_room(data.player_name)


@router.post("/join", response_model=RoomSession)
async def join_room(
    data: RoomJoin,
    room_service: RoomService = Depends(get_room_service)
):
    """
    Entrar em uma sala

    - **code**: código de 4 caracteres
    - **player_name**: nome do jogador (1-20 caracteres)
    """
    return await room_service.join_room(data.code, data.player_name)


@router.get("/code/{code}", response_model=RoomDetailResponse)
async def get_room_by_code(
    code: str,
    room_service: RoomService = Depends(get_room_service)
):
    return await room_service.get_room_by_code(code)


@router.get("/{room_id}", response_model=RoomDetailResponse)
async def get_room(
    room_id: str,
    room_service: RoomService = Depends(get_room_service)
):
    return await room_service.get_room_detail(room_id)


@router.get("/{room_id}/players", response_model=List[PlayerResponse])
async def list_players(
    room_id: str,
    room_service: RoomService = Depends(get_room_service)
):
    return await room_service.list_players(room_id)


@router.patch("/{room_id}/settings", response_model=RoomResponse)
async def update_settings(
    room_id: str,
    data: RoomSettingsUpdate,
    actor_id: str = Depends(get_actor_id),
    room_service: RoomService = Depends(get_room_service)
):
    """
    Alterar configurações da sala (apenas host)

    - **game_mode**: normal ou anonymous
    - **word_category**: categoria das palavras ou all
    - **num_impostors**: número de impostores
    """
    return await room_service.update_settings(room_id, actor_id, data)


@router.post("/{room_id}/leave", response_model=MessageResponse)
async def leave_room(
    room_id: str,
    actor_id: str = Depends(get_actor_id),
    room_service: RoomService = Depends(get_room_service)
):
    await room_service.leave_room(room_id, actor_id)
    return MessageResponse(message="Você saiu da sala")


@router.post("/{room_id}/rounds/start", response_model=RoundResult)
async def start_round(
    room_id: str,
    data: StartRoundRequest,
    actor_id: str = Depends(get_actor_id),
    coordinator: RoundCoordinator = Depends(get_round_coordinator)
):
    """
    Iniciar partida (apenas host)

    - **num_impostors**: entre 1 e o número de jogadores menos 1
    """
    return await coordinator.start_round(room_id, actor_id, data.num_impostors)


@router.post("/{room_id}/rounds/reset", response_model=RoundResult)
async def reset_round(
    room_id: str,
    actor_id: str = Depends(get_actor_id),
    coordinator: RoundCoordinator = Depends(get_round_coordinator)
):
    """Nova rodada com o mesmo número de impostores (apenas host)"""
    return await coordinator.reset_round(room_id, actor_id)


@router.get("/{room_id}/word", response_model=PlayerWordResponse)
async def get_my_word(
    room_id: str,
    round_number: Optional[int] = Query(None, ge=1),
    actor_id: str = Depends(get_actor_id),
    coordinator: RoundCoordinator = Depends(get_round_coordinator)
):
    """
    Palavra do jogador na rodada

    Responde 404 com Retry-After enquanto a palavra não estiver disponível.
    """
    return await coordinator.get_player_word(room_id, actor_id, round_number)


@router.delete("/{room_id}/players/{player_id}", response_model=MessageResponse)
async def remove_player(
    room_id: str,
    player_id: str,
    actor_id: str = Depends(get_actor_id),
    room_service: RoomService = Depends(get_room_service)
):
    """Remover jogador (apenas host). Uma partida em andamento volta ao lobby."""
    await room_service.remove_player(room_id, actor_id, player_id)
    return MessageResponse(message="Jogador removido da sala")


@router.post("/{room_id}/host", response_model=RoomResponse)
async def delegate_host(
    room_id: str,
    data: DelegateHostRequest,
    actor_id: str = Depends(get_actor_id),
    room_service: RoomService = Depends(get_room_service)
):
    return await room_service.delegate_host(room_id, actor_id, data.new_host_id)
