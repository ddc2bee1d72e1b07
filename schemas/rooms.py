from pydantic import BaseModel
from typing import Optional


class RoomStatusResponse(BaseModel):
    room_id: str
    status: str
    board: list[Optional[str]]
    players: list[str]
    turn: str
    winner_line: Optional[list[int]] = None
    created_at: str
    is_full: bool

class HealthResponse(BaseModel):
    status: str
    rooms: int
