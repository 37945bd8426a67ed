from collections.abc import Callable
from dataclasses import dataclass

from redis import Redis

from chat_room_api.app.config import ChatRoomSettings, get_settings
from chat_room_api.infrastructure.platform_manager import create_logger, now_ms
from chat_room_api.infrastructure.redis_manager import RedisStore, build_redis_store
from chat_room_api.services.message_service import MessageLog
from chat_room_api.services.participant_service import ParticipantDirectory
from chat_room_api.services.sweeper import InactivitySweeper


@dataclass
class ChatRoom:
    """The chat room services wired to one store."""

    store: RedisStore
    directory: ParticipantDirectory
    messages: MessageLog
    sweeper: InactivitySweeper


def build_chat_room(
    settings: ChatRoomSettings | None = None,
    *,
    redis_client: Redis | None = None,
    clock: Callable[[], int] = now_ms,
) -> ChatRoom:
    """
    Wire the directory, message log and sweeper to a Redis store.

    Args:
        settings (ChatRoomSettings | None): Settings to use; defaults to the environment.
        redis_client (Redis | None): Pre-configured client (for tests); otherwise a pool
            is created from `settings.redis_url`.
        clock (Callable[[], int]): Source of the current time in epoch milliseconds.
    """
    settings = settings or get_settings()
    store = build_redis_store(
        settings.redis_url, redis_client=redis_client, namespace=settings.chat_namespace
    )
    directory = ParticipantDirectory(store, clock=clock)
    messages = MessageLog(store, directory, clock=clock)
    sweeper = InactivitySweeper(
        directory,
        messages,
        interval_ms=settings.sweep_interval_ms,
        threshold_ms=settings.staleness_threshold_ms,
        clock=clock,
        logger=create_logger(log_level=settings.log_level, logger_name="chat-room-sweeper"),
    )
    return ChatRoom(store=store, directory=directory, messages=messages, sweeper=sweeper)


_chat_room: ChatRoom | None = None


def get_chat_room() -> ChatRoom:
    """Get the process-wide chat room, building it from settings on first use."""
    global _chat_room
    if _chat_room is None:
        _chat_room = build_chat_room()
    return _chat_room
