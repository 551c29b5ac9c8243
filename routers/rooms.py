from fastapi import APIRouter, Depends, HTTPException

from backend import CollabBackend
from connections import ConnectionManager
from logging_config import get_logger
from routers.deps import get_backend, get_connections
from schemas.rooms import HealthResponse, RoomDetailsResponse

logger = get_logger(__name__)

rooms_router = APIRouter(tags=["rooms"])


@rooms_router.get("/rooms/{room_id}", response_model=RoomDetailsResponse)
async def get_room_details(
    room_id: str,
    backend: CollabBackend = Depends(get_backend),
    connections: ConnectionManager = Depends(get_connections),
):
    """
    Inspect a live room.

    Returns:
    - room_id: Room identifier
    - users: Names of the users currently in the room
    - user_count: Number of users
    - code: Current shared code buffer
    - output: Output of the last code execution
    - connections: Number of open WebSocket connections bound to the room
    """
    room = backend.get_room(room_id)
    if room is None:
        logger.warning(f"Room details failed: Room {room_id} not found")
        raise HTTPException(status_code=404, detail="Room not found")

    users = room.user_list()
    return RoomDetailsResponse(
        room_id=room.room_id,
        users=users,
        user_count=len(users),
        code=room.code,
        output=room.output,
        connections=connections.count(room_id),
    )


@rooms_router.get("/health/live", response_model=HealthResponse)
async def live():
    return HealthResponse(status="ok")
