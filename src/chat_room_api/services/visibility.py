from chat_room_api.app.config import BROADCAST_TARGET, MESSAGE_TYPE
from chat_room_api.infrastructure.data_models import Message
from chat_room_api.services.message_service import MessageLog


def is_visible(message: Message, requester: str | None) -> bool:
    """
    Decide whether `requester` may read `message`.

    Broadcasts and public messages are visible to everyone; private and status messages
    addressed to someone else only to their sender and recipient.
    """
    if message.to == BROADCAST_TARGET or message.type == MESSAGE_TYPE:
        return True
    return requester is not None and requester in (message.to, message.sender)


def parse_limit(raw_limit: str | None) -> int | None:
    """Parse the `limit` query parameter; anything but a positive integer means no limit."""
    if raw_limit is None:
        return None
    try:
        limit = int(raw_limit.strip())
    except ValueError:
        return None
    return limit if limit > 0 else None


def list_for(log: MessageLog, requester: str | None, limit: int | None = None) -> list[Message]:
    """Return the messages visible to `requester`, the last `limit` of them if given."""
    visible = [message for message in log.list_all() if is_visible(message, requester)]
    if limit is not None and limit > 0:
        return visible[-limit:]
    return visible
