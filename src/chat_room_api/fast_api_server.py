# HTTP front end for the chat room.
# Run with: uvicorn chat_room_api.fast_api_server:app --port 5000
# or: python -m chat_room_api
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from chat_room_api.app.config import get_settings
from chat_room_api.app.main import process
from chat_room_api.services.chat_room import ChatRoom, get_chat_room


def _lambda_to_fastapi_response(lambda_resp: dict[str, Any]) -> Response:
    """
    Convert an AWS Lambda-style proxy response into a FastAPI Response.

    Args:
        lambda_resp (dict): A dict like:
            {
                "statusCode": int,
                "headers": {"Content-Type": str, ...},
                "body": str,
                "isBase64Encoded": bool
            }

    Returns:
        Response: A FastAPI-compatible Response object.
    """
    status_code = lambda_resp.get("statusCode", 200)
    content_type = lambda_resp.get("headers", {}).get("Content-Type", "text/plain")
    body = lambda_resp.get("body", "")
    return Response(content=body, status_code=status_code, media_type=content_type)


async def _process_request(request: Request) -> Response:
    """Convert a FastAPI request to a Lambda-style event and process it."""
    body = await request.body()
    method = request.method
    path = request.url.path
    route_key = f"{method} {path}"

    event = {
        "routeKey": route_key,
        "body": body,
        "isBase64Encoded": False,
        "headers": dict(request.headers),
        "queryStringParameters": dict(request.query_params),
        "requestContext": {"routeKey": route_key, "http": {"method": method, "path": path}},
    }
    # Store calls are blocking; keep them off the event loop
    lambda_response = await run_in_threadpool(process, event, request.app.state.chat_room)
    return _lambda_to_fastapi_response(lambda_response)


def create_app(chat_room: ChatRoom | None = None, *, run_sweeper: bool = True) -> FastAPI:
    """
    Build the FastAPI application.

    The inactivity sweeper is owned by the application lifespan: it starts when the app
    starts serving and stops at shutdown.

    Args:
        chat_room (ChatRoom | None): Services to serve; defaults to the process-wide room.
        run_sweeper (bool): Whether to run the inactivity sweeper during the lifespan.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        room = chat_room or get_chat_room()
        app.state.chat_room = room
        if run_sweeper:
            room.sweeper.start()
        try:
            yield
        finally:
            room.sweeper.stop()

    app = FastAPI(title="Chat Room API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_allow_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # --- Participants ---
    @app.post("/participants")
    async def register_participant(request: Request) -> Response:
        return await _process_request(request)

    @app.get("/participants")
    async def list_participants(request: Request) -> Response:
        return await _process_request(request)

    # --- Messages ---
    @app.post("/messages")
    async def post_message(request: Request) -> Response:
        return await _process_request(request)

    @app.get("/messages")
    async def list_messages(request: Request) -> Response:
        return await _process_request(request)

    # --- Heartbeat ---
    @app.post("/status")
    async def record_heartbeat(request: Request) -> Response:
        return await _process_request(request)

    @app.get("/healthz")
    def healthz() -> dict[str, bool]:
        return {"ok": True}

    return app


app: FastAPI = create_app()
