"""Shared helpers for the chat room tests."""

import fakeredis

from chat_room_api.app.config import ChatRoomSettings
from chat_room_api.services.chat_room import ChatRoom, build_chat_room

START_MS = 1_700_000_000_000


class FakeClock:
    """Controllable epoch-milliseconds clock."""

    def __init__(self, now: int = START_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def make_settings(**overrides) -> ChatRoomSettings:
    values = {
        "redis_url": "redis://localhost:6379/15",
        "chat_namespace": "test-chat",
        "chat_host": "127.0.0.1",
        "chat_port": 5000,
        "cors_allow_origins": ["*"],
        "sweep_interval_ms": 15000,
        "staleness_threshold_ms": 10000,
        "log_level": "INFO",
    }
    values.update(overrides)
    return ChatRoomSettings(**values)


def make_redis() -> fakeredis.FakeRedis:
    # A dedicated server per test keeps the data isolated
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


def make_chat_room(clock: FakeClock | None = None, **overrides) -> ChatRoom:
    return build_chat_room(
        make_settings(**overrides),
        redis_client=make_redis(),
        clock=clock or FakeClock(),
    )
