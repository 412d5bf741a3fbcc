import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from logging_config import get_logger

logger = get_logger(__name__)


class RoomError(Exception):
    """Base class for admission failures. `message` is sent to the requesting peer as-is."""

    message = "Room error."

    def __init__(self, room_id: str):
        super().__init__(self.message)
        self.room_id = room_id


class RoomExists(RoomError):
    message = "Room already exists."


class RoomNotFound(RoomError):
    message = "Room not found."


class WrongPassword(RoomError):
    message = "Incorrect password."


class AlreadyInRoom(RoomError):
    message = "Already in a room."


@dataclass
class Room:
    room_id: str
    host_id: str
    password: Optional[str] = None
    # Ordered set of viewer connection ids (dict keys keep join order)
    viewers: Dict[str, None] = field(default_factory=dict)

    def viewer_ids(self) -> List[str]:
        return list(self.viewers)

    @property
    def has_password(self) -> bool:
        return self.password is not None and self.password != ""


@dataclass(frozen=True)
class Removal:
    """Outcome of removing a connection that belonged to a room."""

    role: str  # "host" or "viewer"
    room_id: str
    host_id: str
    viewers: List[str]

    @property
    def was_host(self) -> bool:
        return self.role == "host"


class RoomRegistry:
    def __init__(self):
        self._rooms: Dict[str, Room] = {}
        # connection id -> room id
        self._connections: Dict[str, str] = {}
        # Held for each whole read-modify-write
        self._lock = threading.RLock()
        logger.info("Initializing in-memory RoomRegistry")

    def create_room(self, room_id: str, password: Optional[str], connection_id: str) -> Room:
        with self._lock:
            if room_id in self._rooms:
                logger.debug(f"Room {room_id} already exists, rejecting create from {connection_id}")
                raise RoomExists(room_id)
            if connection_id in self._connections:
                logger.debug(f"Connection {connection_id} already in room {self._connections[connection_id]}")
                raise AlreadyInRoom(room_id)

            room = Room(room_id=room_id, host_id=connection_id, password=password)
            self._rooms[room_id] = room
            self._connections[connection_id] = room_id
            logger.debug(f"Room {room_id} created with host {connection_id}")
            return room

    def join_room(self, room_id: str, password: Optional[str], connection_id: str) -> Room:
        """Admit a connection as viewer. Re-joining the same room is a no-op that still succeeds."""
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                raise RoomNotFound(room_id)
            # Exact comparison: no normalization, None only matches None
            if room.password != password:
                raise WrongPassword(room_id)

            current = self._connections.get(connection_id)
            if connection_id == room.host_id or (current is not None and current != room_id):
                raise AlreadyInRoom(room_id)

            room.viewers[connection_id] = None
            self._connections[connection_id] = room_id
            logger.debug(f"Connection {connection_id} joined room {room_id} ({len(room.viewers)} viewers)")
            return room

    def remove_connection(self, connection_id: str) -> Optional[Removal]:
        """Single cleanup path for a terminated connection. Returns None when it had no room."""
        with self._lock:
            room_id = self._connections.pop(connection_id, None)
            if room_id is None:
                return None
            room = self._rooms.get(room_id)
            if room is None:
                return None

            if room.host_id == connection_id:
                del self._rooms[room_id]
                viewers = room.viewer_ids()
                for viewer_id in viewers:
                    self._connections.pop(viewer_id, None)
                logger.debug(f"Room {room_id} deleted, released {len(viewers)} viewers")
                return Removal(role="host", room_id=room_id, host_id=room.host_id, viewers=viewers)

            room.viewers.pop(connection_id, None)
            logger.debug(f"Viewer {connection_id} removed from room {room_id}")
            return Removal(role="viewer", room_id=room_id, host_id=room.host_id, viewers=room.viewer_ids())

    def get_room(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    def get_room_id_for(self, connection_id: str) -> Optional[str]:
        return self._connections.get(connection_id)

    def list_rooms(self) -> List[Room]:
        with self._lock:
            return list(self._rooms.values())

    def clear(self):
        with self._lock:
            self._rooms.clear()
            self._connections.clear()


room_registry = RoomRegistry()
