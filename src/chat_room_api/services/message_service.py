from collections.abc import Callable

from chat_room_api.app.config import MESSAGE_TYPE, PRIVATE_MESSAGE_TYPE
from chat_room_api.app.errors import UnprocessableSender, ValidationError
from chat_room_api.infrastructure.data_models import Message, format_message_time
from chat_room_api.infrastructure.platform_manager import now_ms
from chat_room_api.infrastructure.redis_manager import RedisStore
from chat_room_api.services.participant_service import ParticipantDirectory

POSTABLE_TYPES = (MESSAGE_TYPE, PRIVATE_MESSAGE_TYPE)


class MessageLog:
    """Append-only chat message log."""

    def __init__(
        self,
        store: RedisStore,
        directory: ParticipantDirectory,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._store = store
        self._directory = directory
        self._clock = clock

    def post(
        self,
        sender: str | None,
        to: str | None,
        text: str | None,
        message_type: str | None = None,
    ) -> Message:
        """
        Append a message from a registered participant.

        An omitted `message_type` is stored as a public message.

        Raises:
            UnprocessableSender: If the sender is not a registered participant.
            ValidationError: If `to` or `text` is missing, or `message_type` is not postable.
        """
        if not self._directory.is_registered(sender):
            raise UnprocessableSender(f"Sender not registered: {sender}")
        if not to:
            raise ValidationError("Message recipient is required")
        if not text:
            raise ValidationError("Message text is required")
        if message_type is not None and message_type not in POSTABLE_TYPES:
            raise ValidationError(f"Invalid message type: {message_type}")

        message = Message(
            sender=str(sender),
            to=to,
            text=text,
            type=message_type or MESSAGE_TYPE,
            time=format_message_time(self._clock()),
        )
        self._store.append_messages([message])
        return message

    def append(self, messages: list[Message]) -> None:
        """Append system-generated messages as a single batch."""
        self._store.append_messages(messages)

    def list_all(self) -> list[Message]:
        return self._store.list_messages()
