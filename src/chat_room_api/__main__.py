import uvicorn

from chat_room_api.app.config import get_settings
from chat_room_api.fast_api_server import app


def main() -> None:
    settings = get_settings()
    uvicorn.run(app, host=settings.chat_host, port=settings.chat_port)


if __name__ == "__main__":
    main()
