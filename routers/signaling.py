from pydantic import ValidationError

from backend import RoomError, RoomRegistry
from schemas.rooms import CreateRoomRequest, JoinRoomRequest, SessionDescriptionMessage, IceCandidateMessage
from logging_config import get_logger

logger = get_logger(__name__)

INVALID_REQUEST_MESSAGE = "Invalid request."


class SignalingRouter:
    """Dispatches Socket.IO events against the room registry.

    Holds no room state of its own. Connection ids are Socket.IO sids and a
    room's connections share a Socket.IO room named after the room id.
    Negotiation payloads (sdp, candidate) are relayed verbatim to the
    addressed connection; the target is not checked for liveness or room
    membership.
    """

    def __init__(self, sio, registry: RoomRegistry):
        self.sio = sio
        self.registry = registry

    def register(self):
        self.sio.on("connect", handler=self.connect)
        self.sio.on("disconnect", handler=self.disconnect)
        self.sio.on("create-room", handler=self.create_room)
        self.sio.on("join-room", handler=self.join_room)
        self.sio.on("offer", handler=self.offer)
        self.sio.on("answer", handler=self.answer)
        self.sio.on("ice-candidate", handler=self.ice_candidate)
        self.sio.on("host-stopped", handler=self.host_stopped)
        self.sio.on("*", handler=self.unknown_event)
        logger.info("Signaling handlers registered")
        return self

    async def connect(self, sid, environ=None, auth=None):
        logger.info(f"Connected: {sid}")

    async def create_room(self, sid, data=None):
        try:
            request = CreateRoomRequest.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Invalid create-room payload from {sid}: {e.error_count()} errors")
            await self.sio.emit("error-message", INVALID_REQUEST_MESSAGE, to=sid)
            return

        try:
            self.registry.create_room(request.room_id, request.password, sid)
        except RoomError as e:
            logger.warning(f"Create room {request.room_id} rejected for {sid}: {e.message}")
            await self.sio.emit("error-message", e.message, to=sid)
            return

        await self.sio.enter_room(sid, request.room_id)
        await self.sio.emit("room-created", to=sid)
        logger.info(f"Room created: {request.room_id} by host {sid}")

    async def join_room(self, sid, data=None):
        try:
            request = JoinRoomRequest.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Invalid join-room payload from {sid}: {e.error_count()} errors")
            await self.sio.emit("error-message", INVALID_REQUEST_MESSAGE, to=sid)
            return

        try:
            room = self.registry.join_room(request.room_id, request.password, sid)
        except RoomError as e:
            logger.warning(f"Join room {request.room_id} rejected for {sid}: {e.message}")
            await self.sio.emit("error-message", e.message, to=sid)
            return

        # Snapshot before any await so the host sees the list as of this join
        viewers = room.viewer_ids()
        host_id = room.host_id

        await self.sio.enter_room(sid, request.room_id)
        await self.sio.emit("room-joined", to=sid)
        await self.sio.emit("viewer-joined", sid, to=host_id)
        await self.sio.emit("update-viewers", viewers, to=host_id)
        logger.info(f"Viewer {sid} joined room {request.room_id} ({len(viewers)} viewers)")

    async def offer(self, sid, data=None):
        await self._relay_session_description("offer", sid, data)

    async def answer(self, sid, data=None):
        await self._relay_session_description("answer", sid, data)

    async def _relay_session_description(self, event, sid, data):
        try:
            message = SessionDescriptionMessage.model_validate(data)
        except ValidationError:
            logger.warning(f"Dropping {event} from {sid}: missing or invalid targetId")
            return
        await self.sio.emit(event, {"sdp": message.sdp, "from": sid}, to=message.target_id)
        logger.debug(f"Relayed {event} from {sid} to {message.target_id}")

    async def ice_candidate(self, sid, data=None):
        try:
            message = IceCandidateMessage.model_validate(data)
        except ValidationError:
            logger.warning(f"Dropping ice-candidate from {sid}: missing or invalid targetId")
            return
        await self.sio.emit("ice-candidate", {"candidate": message.candidate, "from": sid}, to=message.target_id)
        logger.debug(f"Relayed ice-candidate from {sid} to {message.target_id}")

    async def host_stopped(self, sid, *args):
        room_id = self.registry.get_room_id_for(sid)
        if room_id is None:
            logger.debug(f"Ignoring host-stopped from {sid}: not in a room")
            return
        await self.sio.emit("host-stopped", to=room_id)
        logger.info(f"Host stopped streaming in room {room_id}")

    async def disconnect(self, sid, reason=None):
        removal = self.registry.remove_connection(sid)
        if removal is None:
            logger.info(f"Disconnected: {sid}")
            return

        if removal.was_host:
            # The departing sid is still listed in the Socket.IO room at this point
            await self.sio.emit("host-disconnected", to=removal.room_id, skip_sid=sid)
            await self.sio.close_room(removal.room_id)
            logger.info(f"Host disconnected from room: {removal.room_id}")
        else:
            await self.sio.emit("update-viewers", removal.viewers, to=removal.host_id)
            logger.info(f"Viewer {sid} left room: {removal.room_id}")

    async def unknown_event(self, event, sid, *args):
        logger.warning(f"Dropping unrecognized event '{event}' from {sid}")
