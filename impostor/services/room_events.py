"""
Room change feed
Publica eventos de mudança de sala no Redis
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from impostor.core.redis_client import RedisManager, redis_manager

logger = logging.getLogger(__name__)


class RoomEventType(str, Enum):
    ROUND_STARTED = "round_started"
    ROUND_RESET = "round_reset"
    LOBBY_RESET = "lobby_reset"
    PLAYER_JOINED = "player_joined"
    PLAYER_LEFT = "player_left"
    PLAYER_REMOVED = "player_removed"
    HOST_CHANGED = "host_changed"
    SETTINGS_UPDATED = "settings_updated"


def room_channel(room_id: str) -> str:
    return f"room:{room_id}"


class RoomEventPublisher:
    """
    Tells subscribers that a room changed and should be re-read.

    Events are published after the change is committed. Delivery is
    best-effort: a failed publish is logged and never fails the operation.
    """

    def __init__(self, manager: Optional[RedisManager] = None):
        self.manager = manager or redis_manager

    async def publish(self, room_id: str, event_type: RoomEventType,
                      round_number: Optional[int] = None, **data: Any) -> bool:
        if not self.manager.is_configured:
            logger.debug(f"Change feed disabled, dropping {event_type.value} for room {room_id}")
            return False

        message: Dict[str, Any] = {
            "type": event_type.value,
            "room_id": room_id,
            "round_number": round_number,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "data": data,
        }
        try:
            await self.manager.publish_message(room_channel(room_id), message)
            return True
        except Exception as e:
            logger.warning(f"Failed to publish {event_type.value} for room {room_id}: {e}")
            return False


room_events = RoomEventPublisher()
