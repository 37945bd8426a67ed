from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager

from redis import ConnectionPool, Redis
from redis.exceptions import RedisError

from chat_room_api.app.errors import StorageFailure
from chat_room_api.infrastructure.data_models import Message, Participant
from chat_room_api.infrastructure.platform_manager import create_logger

logger = create_logger(logger_name="chat-room-store")


class RedisStore:
    """
    Redis-backed document store for the participant directory and the message log.

    Participants live in a sorted set keyed by name and scored by the last heartbeat
    (epoch milliseconds), so the inactivity predicate is a score range. Messages live
    in a list of JSON documents in insertion order.

    Every operation runs inside `connection()`, which acquires a client, converts any
    `RedisError` into a `StorageFailure` and releases the client afterwards.

    Args:
        redis_client (Redis | None): A pre-configured client (e.g. for tests). It is shared
            by every operation and never closed by the store.
        connection_pool (ConnectionPool | None): Pool used to build a short-lived client
            for each operation.
        namespace (str): Key namespace/prefix for generated keys.
    """

    def __init__(
        self,
        redis_client: Redis | None = None,
        *,
        connection_pool: ConnectionPool | None = None,
        namespace: str = "bate-papo-uol",
    ) -> None:
        if redis_client is None and connection_pool is None:
            raise ValueError("Provide either redis_client or connection_pool")
        self._redis: Redis | None = redis_client
        self._pool: ConnectionPool | None = connection_pool
        self._namespace: str = namespace.rstrip(":")

    @property
    def participants_key(self) -> str:
        return f"{self._namespace}:participants"

    @property
    def messages_key(self) -> str:
        return f"{self._namespace}:messages"

    @contextmanager
    def connection(self) -> Iterator[Redis]:
        """Acquire a client for the duration of one store operation."""
        if self._redis is not None:
            client, owned = self._redis, False
        else:
            client, owned = Redis(connection_pool=self._pool), True
        try:
            yield client
        except RedisError as e:
            raise StorageFailure(f"Store operation failed: {e}") from e
        finally:
            if owned:
                client.close()

    # -----------------------------
    # Participant directory
    # -----------------------------
    def add_participant_if_absent(self, name: str, timestamp: int) -> bool:
        """
        Insert a participant unless one with the same name exists.

        Returns:
            bool: True if the participant was created; False if the name was taken.
        """
        with self.connection() as client:
            return client.zadd(self.participants_key, {name: timestamp}, nx=True) == 1

    def get_participant(self, name: str) -> Participant | None:
        with self.connection() as client:
            score = client.zscore(self.participants_key, name)
        if score is None:
            return None
        return Participant(name=name, last_heartbeat=int(score))

    def list_participants(self) -> list[Participant]:
        with self.connection() as client:
            entries = client.zrange(self.participants_key, 0, -1, withscores=True)
        return [Participant(name=str(name), last_heartbeat=int(score)) for name, score in entries]

    def touch_participant(self, name: str, timestamp: int) -> bool:
        """
        Set the last heartbeat of an existing participant.

        Returns:
            bool: True if the participant exists; False otherwise.
        """
        with self.connection() as client:
            if client.zscore(self.participants_key, name) is None:
                return False
            client.zadd(self.participants_key, {name: timestamp}, xx=True)
            return True

    def find_participants_idle_since(self, cutoff: int) -> list[Participant]:
        """List participants whose last heartbeat is at or before `cutoff`."""
        with self.connection() as client:
            entries = client.zrangebyscore(self.participants_key, "-inf", cutoff, withscores=True)
        return [Participant(name=str(name), last_heartbeat=int(score)) for name, score in entries]

    def remove_participants_idle_since(self, cutoff: int) -> list[Participant]:
        """
        Delete every participant whose last heartbeat is at or before `cutoff`.

        The range read and the delete run in one MULTI/EXEC transaction, so the result is
        exactly the set of participants removed.

        Returns:
            list[Participant]: The removed participants.
        """
        with self.connection() as client:
            pipe = client.pipeline(transaction=True)
            pipe.zrangebyscore(self.participants_key, "-inf", cutoff, withscores=True)
            pipe.zremrangebyscore(self.participants_key, "-inf", cutoff)
            entries, _ = pipe.execute()
        return [Participant(name=str(name), last_heartbeat=int(score)) for name, score in entries]

    # -----------------------------
    # Message log
    # -----------------------------
    def append_messages(self, messages: list[Message]) -> None:
        """Append messages to the log as a single batch."""
        if not messages:
            return
        documents = [json.dumps(message.to_dict()) for message in messages]
        with self.connection() as client:
            client.rpush(self.messages_key, *documents)

    def list_messages(self) -> list[Message]:
        """Return every stored message in insertion order."""
        with self.connection() as client:
            raw_messages = client.lrange(self.messages_key, 0, -1)

        messages = []
        for index, raw in enumerate(raw_messages):
            try:
                parsed = json.loads(raw)
                if not isinstance(parsed, dict):
                    raise ValueError("not a JSON object")
                messages.append(Message.from_dict(parsed))
            except ValueError as e:
                # JSONDecodeError is a ValueError
                logger.warning(f"Skipping unreadable message document #{index}: {e}")
        return messages


def build_redis_store(
    redis_url: str | None = None,
    *,
    redis_client: Redis | None = None,
    namespace: str = "bate-papo-uol",
) -> RedisStore:
    """
    Factory to create a RedisStore.

    You can provide either `redis_url` (preferred) and this function will create a shared
    connection pool, or pass an existing `redis_client` (for tests/advanced use).

    Args:
        redis_url (str | None): Redis connection URL (e.g., "redis://:pwd@host:6379/0").
        redis_client (Redis | None): Pre-configured Redis client instance.
        namespace (str): Key namespace/prefix for generated keys.

    Returns:
        RedisStore: Configured store instance.
    """
    if redis_client is not None:
        return RedisStore(redis_client, namespace=namespace)

    if not redis_url:
        raise ValueError("Provide either redis_url or redis_client")
    pool = ConnectionPool.from_url(redis_url, decode_responses=True)
    return RedisStore(connection_pool=pool, namespace=namespace)
