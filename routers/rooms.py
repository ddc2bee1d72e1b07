from fastapi import APIRouter, HTTPException, Request
from schemas.rooms import HealthResponse, RoomStatusResponse
from logging_config import get_logger

logger = get_logger(__name__)

rooms_router = APIRouter(tags=["rooms"])


@rooms_router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    return HealthResponse(status="ok", rooms=len(request.app.state.registry))


@rooms_router.get("/rooms/{room_id}", response_model=RoomStatusResponse)
async def get_room_status(room_id: str, request: Request):
    """
    Read-only snapshot of a room for out-of-band polling.

    Moves are only accepted over the game WebSocket; this endpoint never
    creates a room.
    """
    client_host = request.client.host if request.client else 'unknown'
    logger.info(f"Room status request for {room_id} from {client_host}")

    room = request.app.state.registry.get(room_id)
    if not room:
        logger.warning(f"Room status failed: Room {room_id} not found")
        raise HTTPException(status_code=404, detail="Room not found")

    snapshot = room.snapshot()
    return RoomStatusResponse(
        room_id=room_id,
        status=snapshot["status"],
        board=snapshot["board"],
        players=snapshot["players"],
        turn=snapshot["turn"],
        winner_line=snapshot.get("winnerLine"),
        created_at=room.created_at,
        is_full=room.is_full,
    )
