from fastapi import APIRouter, HTTPException, Request
from typing import List
from backend import room_registry, Room
from schemas.rooms import RoomDetailsResponse
from logging_config import get_logger

logger = get_logger(__name__)

rooms_router = APIRouter(prefix="/rooms", tags=["rooms"])


def to_details(room: Room) -> RoomDetailsResponse:
    return RoomDetailsResponse(
        room_id=room.room_id,
        viewer_count=len(room.viewers),
        has_password=room.has_password,
    )


@rooms_router.get("", response_model=List[RoomDetailsResponse])
async def list_rooms(request: Request):
    rooms = room_registry.list_rooms()
    logger.debug(f"Room list request from {request.client.host if request.client else 'unknown'}: {len(rooms)} rooms")
    return [to_details(room) for room in rooms]


@rooms_router.get("/{room_id}", response_model=RoomDetailsResponse)
async def get_room_details(room_id: str):
    """
    Read-only room lookup. Never exposes the password or member ids.

    Returns:
    - room_id: Room identifier chosen by the host
    - viewer_count: Number of viewers currently admitted
    - has_password: Whether joining requires a non-empty password
    """
    room = room_registry.get_room(room_id)
    if not room:
        logger.info(f"Room details failed: Room {room_id} not found")
        raise HTTPException(status_code=404, detail="Room not found")
    return to_details(room)
