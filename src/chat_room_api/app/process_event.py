import json
from dataclasses import dataclass, field
from typing import Any

from chat_room_api.app.errors import ValidationError


@dataclass
class ChatRequest:
    """A Lambda-style proxy event reduced to what the chat room handlers read."""

    method: str
    route: str
    headers: dict[str, str] = field(default_factory=dict)
    query_params: dict[str, str] = field(default_factory=dict)
    body_raw: str | bytes | dict[str, Any] | None = None

    @property
    def user(self) -> str | None:
        """The participant name sent in the `user` header."""
        return self.headers.get("user")

    def json_body(self) -> Any:
        """Parse the request body as JSON."""
        return parse_json_body(self.body_raw)


def parse_json_body(body_raw: str | bytes | dict[str, Any] | None) -> Any:
    """
    Parse a request body as JSON.

    API Gateway sends the body as a string but FastAPI sends bytes; tests may pass a
    pre-parsed dict.

    Raises:
        ValidationError: If the body is empty or not valid JSON.
    """
    if isinstance(body_raw, dict):
        return body_raw
    if not body_raw:
        raise ValidationError("Missing body")

    try:
        if isinstance(body_raw, bytes):
            return json.loads(body_raw.decode("utf-8"))
        return json.loads(body_raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"Body is not valid JSON: {e}") from e


def process_event_data(event: dict[str, Any]) -> ChatRequest:
    """Extract method, route, headers, query parameters and body from the event."""
    route_key = event.get("routeKey", "")
    method, _, route = route_key.partition(" ")
    if not route:
        http = event.get("requestContext", {}).get("http", {})
        method = http.get("method", method)
        route = http.get("path", "")

    # Header names are case-insensitive; normalise to lowercase
    headers = {str(k).lower(): str(v) for k, v in (event.get("headers") or {}).items()}
    query_params = {str(k): str(v) for k, v in (event.get("queryStringParameters") or {}).items()}

    return ChatRequest(
        method=method.upper(),
        route=route.rstrip("/") or "/",
        headers=headers,
        query_params=query_params,
        body_raw=event.get("body"),
    )
