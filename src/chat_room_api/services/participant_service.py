from __future__ import annotations

from collections.abc import Callable

from chat_room_api.app.config import BROADCAST_TARGET, JOIN_TEXT, STATUS_TYPE
from chat_room_api.app.errors import Conflict, NotFound, ValidationError
from chat_room_api.infrastructure.data_models import Message, Participant, format_message_time
from chat_room_api.infrastructure.platform_manager import now_ms
from chat_room_api.infrastructure.redis_manager import RedisStore


class ParticipantDirectory:
    """Registered participants and their last heartbeat."""

    def __init__(self, store: RedisStore, clock: Callable[[], int] = now_ms) -> None:
        self._store = store
        self._clock = clock

    def register(self, name: str | None) -> Participant:
        """
        Register a participant and announce the arrival to the room.

        Raises:
            ValidationError: If the name is empty or missing.
            Conflict: If a participant with the same name is already registered.
        """
        if not name:
            raise ValidationError("Participant name is required")

        now = self._clock()
        if not self._store.add_participant_if_absent(name, now):
            raise Conflict(f"Participant already registered: {name}")

        arrival = Message(
            sender=name,
            to=BROADCAST_TARGET,
            text=JOIN_TEXT,
            type=STATUS_TYPE,
            time=format_message_time(now),
        )
        self._store.append_messages([arrival])
        return Participant(name=name, last_heartbeat=now)

    def list(self) -> list[Participant]:
        return self._store.list_participants()

    def is_registered(self, name: str | None) -> bool:
        return bool(name) and self._store.get_participant(name) is not None

    def heartbeat(self, name: str | None) -> None:
        """
        Record a liveness signal for a participant.

        Raises:
            NotFound: If no participant with that name is registered.
        """
        if not name or not self._store.touch_participant(name, self._clock()):
            raise NotFound(f"Participant not registered: {name}")

    def find_inactive(self, cutoff: int) -> list[Participant]:
        return self._store.find_participants_idle_since(cutoff)

    def evict_inactive(self, cutoff: int) -> list[Participant]:
        return self._store.remove_participants_idle_since(cutoff)
