import json
from collections.abc import Callable
from http import HTTPStatus
from typing import Any

from chat_room_api.app.config import get_settings
from chat_room_api.app.errors import ChatRoomError
from chat_room_api.app.process_event import ChatRequest, process_event_data
from chat_room_api.app.schemas import MessageBody, ParticipantBody, validate_body
from chat_room_api.infrastructure.platform_manager import create_logger
from chat_room_api.services.chat_room import ChatRoom, get_chat_room
from chat_room_api.services.visibility import list_for, parse_limit

logger = create_logger(logger_name="chat-room-api", log_level=get_settings().log_level)


def create_response(
    status_code: int,
    body: str | None = None,
    content_type: str = "text/plain",
    headers: dict[str, str] | None = None,
) -> dict[str, Any]:
    """
    Create a standard HTTP response.

    Args:
        status_code (int): HTTP status code.
        body (str | None): Response body; defaults to the status phrase.
        content_type (str, optional): Content-Type header. Defaults to "text/plain".
        headers (dict[str, str] | None, optional): Additional headers. Defaults to None.

    Returns:
        dict: Standardized response dictionary.
    """
    response_headers = {"Content-Type": content_type}
    if headers:
        response_headers.update(headers)

    return {
        "statusCode": status_code,
        "body": HTTPStatus(status_code).phrase if body is None else body,
        "headers": response_headers,
        "isBase64Encoded": False,
    }


def create_json_response(status_code: int, payload: Any) -> dict[str, Any]:
    return create_response(status_code, json.dumps(payload), "application/json")


# --- Route handlers ---
def register_participant(request: ChatRequest, chat_room: ChatRoom) -> dict[str, Any]:
    body = validate_body(ParticipantBody, request.json_body())
    chat_room.directory.register(body.name)
    logger.info(f"Participant registered: {body.name}")
    return create_response(201, "")


def list_participants(request: ChatRequest, chat_room: ChatRoom) -> dict[str, Any]:
    participants = chat_room.directory.list()
    return create_json_response(200, [participant.to_dict() for participant in participants])


def post_message(request: ChatRequest, chat_room: ChatRoom) -> dict[str, Any]:
    body = validate_body(MessageBody, request.json_body())
    chat_room.messages.post(request.user, body.to, body.text, body.type)
    return create_response(201, "")


def list_messages(request: ChatRequest, chat_room: ChatRoom) -> dict[str, Any]:
    raw_limit = request.query_params.get("limit")
    limit = parse_limit(raw_limit)
    if raw_limit is not None and limit is None:
        logger.warning(f"Ignoring invalid limit: {raw_limit!r}")

    messages = list_for(chat_room.messages, request.user, limit)
    return create_json_response(200, [message.to_dict() for message in messages])


def record_heartbeat(request: ChatRequest, chat_room: ChatRoom) -> dict[str, Any]:
    chat_room.directory.heartbeat(request.user)
    return create_response(200, "")


def healthz(request: ChatRequest, chat_room: ChatRoom) -> dict[str, Any]:
    return create_json_response(200, {"ok": True})


ROUTES: dict[tuple[str, str], Callable[[ChatRequest, ChatRoom], dict[str, Any]]] = {
    ("POST", "/participants"): register_participant,
    ("GET", "/participants"): list_participants,
    ("POST", "/messages"): post_message,
    ("GET", "/messages"): list_messages,
    ("POST", "/status"): record_heartbeat,
    ("GET", "/healthz"): healthz,
}


def process(event: dict[str, Any], chat_room: ChatRoom | None = None) -> dict[str, Any]:
    """Process the incoming HTTP Gateway event."""
    request = process_event_data(event)
    logger.info(f"Processing request: {request.method} {request.route}")

    handler = ROUTES.get((request.method, request.route))
    if handler is None:
        logger.error(f"No route found: {request.method} {request.route}")
        return create_response(404, "Route and method not Found")

    try:
        return handler(request, chat_room or get_chat_room())
    except ChatRoomError as e:
        logger.error(f"{request.method} {request.route} rejected ({e.http_status}): {e.reason}")
        return create_response(e.http_status)
    except Exception as e:
        logger.exception(f"Error processing {request.method} {request.route}: {e}")
        return create_response(500, "Internal Server Error")
