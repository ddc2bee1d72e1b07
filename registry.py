import threading
from typing import Dict, Optional

from logging_config import get_logger
from room import Room

logger = get_logger(__name__)


class RoomRegistry:
    """Room id -> Room. Rooms are created on first use and kept for the life of the process."""

    def __init__(self):
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()
        logger.info("Initializing in-memory RoomRegistry")

    def get_or_create(self, room_id: str) -> Room:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                room = Room(room_id)
                self._rooms[room_id] = room
                logger.info(f"Created room {room_id} (total rooms: {len(self._rooms)})")
            return room

    def get(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    def __len__(self) -> int:
        return len(self._rooms)
