"""
Chat room data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class Participant:
    name: str
    last_heartbeat: int  # epoch milliseconds

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "lastHeartbeat": self.last_heartbeat}


@dataclass(frozen=True)
class Message:
    sender: str
    to: str
    text: str
    type: str  # "message" | "private_message" | "status"
    time: str  # HH:MM:SS wall clock

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.sender,
            "to": self.to,
            "text": self.text,
            "type": self.type,
            "time": self.time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        """Build a message from its stored document; raises ValueError if a field is missing."""
        missing = [key for key in ("from", "to", "type") if not data.get(key)]
        if missing:
            raise ValueError(f"Message document is missing: {', '.join(missing)}")
        return cls(
            sender=str(data["from"]),
            to=str(data["to"]),
            text=str(data.get("text", "")),
            type=str(data["type"]),
            time=str(data.get("time", "")),
        )


def format_message_time(timestamp_ms: int) -> str:
    """Format an epoch-milliseconds timestamp as the local HH:MM:SS wall clock."""
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%H:%M:%S")
