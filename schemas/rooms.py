from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional


class SignalingPayload(BaseModel):
    # Only the camelCase wire names are accepted; unknown fields are ignored
    model_config = ConfigDict(extra="ignore")


class CreateRoomRequest(SignalingPayload):
    room_id: str = Field(alias="roomId")
    password: Optional[str] = None

class JoinRoomRequest(SignalingPayload):
    room_id: str = Field(alias="roomId")
    password: Optional[str] = None

class SessionDescriptionMessage(SignalingPayload):
    """offer / answer. `sdp` is opaque and relayed untouched."""
    target_id: str = Field(alias="targetId")
    sdp: Any = None

class IceCandidateMessage(SignalingPayload):
    target_id: str = Field(alias="targetId")
    candidate: Any = None


class RoomDetailsResponse(BaseModel):
    room_id: str
    viewer_count: int
    has_password: bool
