from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

import pytest

from backend import RoomRegistry
from routers.signaling import SignalingRouter


@dataclass
class Emitted:
    event: str
    data: Any
    to: Optional[str]
    skip_sid: Optional[str]
    recipients: List[str] = field(default_factory=list)


class FakeSocketIO:
    """Records emits and resolves recipients the way Socket.IO addresses sids and rooms."""

    def __init__(self):
        self.handlers = {}
        self.rooms: Dict[str, Set[str]] = {}
        self.emitted: List[Emitted] = []
        self.closed_rooms: List[str] = []

    def on(self, event, handler=None, namespace=None):
        self.handlers[event] = handler

    async def emit(self, event, data=None, to=None, room=None, skip_sid=None, namespace=None):
        target = to if to is not None else room
        if target in self.rooms:
            recipients = sorted(s for s in self.rooms[target] if s != skip_sid)
        elif target is not None and target != skip_sid:
            recipients = [target]
        else:
            recipients = []
        self.emitted.append(Emitted(event, data, target, skip_sid, recipients))

    async def enter_room(self, sid, room, namespace=None):
        self.rooms.setdefault(room, set()).add(sid)

    async def close_room(self, room, namespace=None):
        self.closed_rooms.append(room)
        self.rooms.pop(room, None)

    def forget(self, sid):
        # Socket.IO drops a sid from all its rooms after the disconnect handler returns
        for members in self.rooms.values():
            members.discard(sid)

    def received(self, sid):
        """(event, data) pairs delivered to `sid`, in emit order."""
        return [(e.event, e.data) for e in self.emitted if sid in e.recipients]


@pytest.fixture
def registry():
    return RoomRegistry()


@pytest.fixture
def sio():
    return FakeSocketIO()


@pytest.fixture
def router(sio, registry):
    return SignalingRouter(sio, registry).register()


@pytest.fixture
def disconnect(router, sio):
    async def _disconnect(sid):
        await router.disconnect(sid, "client disconnect")
        sio.forget(sid)
    return _disconnect
