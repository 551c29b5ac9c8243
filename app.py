import json
from typing import Optional

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend import CollabBackend
from connections import ConnectionManager
from constants import FRONTEND_URL, LOG_FILE, LOG_LEVEL
from events import DATA_KEY, EVENT_KEY
from executor import ExecutionProxy
from gateway import Session
from logging_config import get_logger, setup_logging
from routers.files import files_router
from routers.rooms import rooms_router

# Setup logging
setup_logging(log_level=LOG_LEVEL, log_file=LOG_FILE)
logger = get_logger(__name__)


def create_app(
    backend: Optional[CollabBackend] = None,
    executor: Optional[ExecutionProxy] = None,
) -> FastAPI:
    app = FastAPI(title="Collaborative Code Editor")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Shared state for every connection handler and HTTP request
    app.state.backend = backend or CollabBackend()
    app.state.connections = ConnectionManager()
    app.state.executor = executor or ExecutionProxy()

    @app.exception_handler(RequestValidationError)
    async def invalid_params_handler(request: Request, exc: RequestValidationError):
        # missing or non-JSON bodies are bad params like any other: 400, not 422
        logger.warning(f"Invalid request to {request.url.path}: {len(exc.errors())} errors")
        return JSONResponse(status_code=400, content={"detail": "Invalid request parameters"})

    app.include_router(files_router)
    app.include_router(rooms_router)

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """Real-time channel. Frames are JSON objects: {"event": <name>, "data": <payload>}."""
        await websocket.accept()
        session = Session(websocket, app.state.backend, app.state.connections, app.state.executor)
        logger.info(f"WebSocket connection {session.connection_id} accepted")

        try:
            while True:
                raw = await websocket.receive_text()
                try:
                    frame = json.loads(raw)
                except json.JSONDecodeError:
                    logger.warning(f"Dropping non-JSON frame from connection {session.connection_id}")
                    continue
                if not isinstance(frame, dict):
                    logger.warning(f"Dropping non-object frame from connection {session.connection_id}")
                    continue
                await session.dispatch(frame.get(EVENT_KEY), frame.get(DATA_KEY))
        except WebSocketDisconnect:
            logger.info(f"WebSocket disconnected normally for connection {session.connection_id}")
        except Exception as e:
            logger.error(f"WebSocket error for connection {session.connection_id}: {e}", exc_info=True)
        finally:
            await session.close()

    logger.info("FastAPI application initialized")
    return app


app = create_app()
