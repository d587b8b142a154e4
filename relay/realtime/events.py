"""Wire shapes for the /ws endpoint."""

import json
import logging
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr, ValidationError, model_validator

from relay.core.timeutil import to_wire

logger = logging.getLogger(__name__)


class InboundFrame(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: Literal["join", "typing", "message", "pong"] | None = None
    room: StrictStr | None = None
    payload: StrictStr | None = None
    typing: StrictBool | None = None

    @property
    def kind(self) -> str:
        return self.type or "message"

    @model_validator(mode="after")
    def check_required(self) -> "InboundFrame":
        if self.kind != "pong" and not self.room:
            raise ValueError("room required")
        if self.kind == "message" and self.payload is None:
            raise ValueError("payload required")
        return self


def parse_frame(raw: str | bytes) -> InboundFrame | None:
    """Return the validated frame, or None for anything malformed."""
    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        data = json.loads(raw)
        return InboundFrame.model_validate(data)
    except (UnicodeDecodeError, ValueError, ValidationError, RecursionError) as e:
        logger.debug("Dropping malformed frame: %s", e)
        return None


def presence_event(room: str, profile_hash: str) -> dict:
    return {"type": "presence", "room": room, "profileHash": profile_hash}

def typing_event(room: str, profile_hash: str, typing: bool) -> dict:
    return {"type": "typing", "room": room, "profileHash": profile_hash, "typing": typing}

def message_event(room: str, payload: str, timestamp: datetime) -> dict:
    return {"type": "message", "room": room, "payload": payload, "timestamp": to_wire(timestamp)}
