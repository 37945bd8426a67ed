"""
Chat room error taxonomy.

Each error carries the HTTP status code it maps to at the request boundary.
"""


class ChatRoomError(Exception):
    """Base class for errors raised by the chat room services."""

    http_status: int = 500

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ValidationError(ChatRoomError):
    """A request body or field is missing or malformed."""

    http_status = 422


class Conflict(ChatRoomError):
    """A participant with the same name is already registered."""

    http_status = 409


class NotFound(ChatRoomError):
    """The named participant is not registered."""

    http_status = 404


class UnprocessableSender(ChatRoomError):
    """A message was posted by a participant that is not registered."""

    http_status = 422


class StorageFailure(ChatRoomError):
    """The backing store failed; the whole operation is rejected."""

    http_status = 500
