from typing import Any

from chat_room_api.app.main import process


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """AWS Lambda-style entry point for the chat room API."""
    try:
        result = process(event)
        assert isinstance(result, dict)
        return result
    except Exception as e:
        raise Exception(f"Error in processing Chat Room API request: {e}") from e
