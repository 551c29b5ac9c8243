import asyncio
import uuid
from typing import Any, Optional, Set

from fastapi import WebSocket
from pydantic import BaseModel, ValidationError

import events
from backend import CollabBackend
from connections import ConnectionManager
from exceptions import NotFound
from executor import ExecutionProxy, extract_output
from logging_config import get_logger
from schemas.events import (
    CodeChangePayload,
    CompileCodePayload,
    FileChangePayload,
    JoinPayload,
    LanguageChangePayload,
    TypingPayload,
)
from validators import is_valid_room_id, is_valid_tree_path

logger = get_logger(__name__)

UNJOINED = "unjoined"
JOINED = "joined"
CLOSED = "closed"


class Session:
    """Protocol state for one WebSocket connection.

    Unjoined -> Joined(room_id, user_name) -> Closed. Malformed or
    out-of-state events are dropped; nothing a client sends closes the
    connection for the rest of the room.
    """

    def __init__(
        self,
        websocket: WebSocket,
        backend: CollabBackend,
        connections: ConnectionManager,
        executor: ExecutionProxy,
    ):
        self.websocket = websocket
        self.backend = backend
        self.connections = connections
        self.executor = executor
        self.connection_id = str(uuid.uuid4())
        self.state = UNJOINED
        self.room_id: Optional[str] = None
        self.user_name: Optional[str] = None
        self.pending: Set[asyncio.Task] = set()
        self.handlers = {
            events.JOIN: (JoinPayload, self.on_join),
            events.CODE_CHANGE: (CodeChangePayload, self.on_code_change),
            events.FILE_CHANGE: (FileChangePayload, self.on_file_change),
            events.TYPING: (TypingPayload, self.on_typing),
            events.LANGUAGE_CHANGE: (LanguageChangePayload, self.on_language_change),
            events.COMPILE_CODE: (CompileCodePayload, self.on_compile_code),
        }

    async def dispatch(self, event: Any, data: Any):
        if self.state == CLOSED:
            return
        entry = self.handlers.get(event) if isinstance(event, str) else None
        if entry is None:
            logger.warning(f"Dropping unknown event {event!r} from connection {self.connection_id}")
            return
        model, handler = entry
        try:
            payload = model.model_validate(data if data is not None else {})
        except ValidationError as e:
            logger.warning(f"Dropping malformed {event} from connection {self.connection_id}: {e.error_count()} errors")
            return
        try:
            await handler(payload)
        except Exception as e:
            logger.error(f"Error handling {event} from connection {self.connection_id}: {e}", exc_info=True)

    def _in_room(self, payload: BaseModel) -> bool:
        if self.state != JOINED:
            return False
        room_id = getattr(payload, "room_id", None)
        if room_id is not None and room_id != self.room_id:
            logger.warning(f"Connection {self.connection_id} in room {self.room_id} sent an event for room {room_id}")
            return False
        return True

    async def on_join(self, payload: JoinPayload):
        room_id, user_name = payload.room_id, payload.user_name
        if not is_valid_room_id(room_id) or not user_name:
            logger.warning(f"Rejected join from connection {self.connection_id}: room={room_id!r} user={user_name!r}")
            return

        if self.state == JOINED and room_id != self.room_id:
            await self._leave_current_room()
        # same room under a new name: add the new name before dropping the old
        # one so the room never empties and keeps its code and files
        renamed_from = self.user_name if self.state == JOINED and user_name != self.user_name else None

        self.state = JOINED
        self.room_id = room_id
        self.user_name = user_name
        self.connections.add(room_id, self.connection_id, self.websocket)

        code, users = self.backend.join(room_id, user_name)
        if renamed_from is not None:
            users = self.backend.leave(room_id, renamed_from)
        await self.connections.send(self.websocket, events.CODE_UPDATE, code)
        await self.connections.broadcast(room_id, events.USER_JOINED, users)

    async def on_code_change(self, payload: CodeChangePayload):
        if not self._in_room(payload):
            return
        self.backend.set_code(self.room_id, payload.code)
        await self.connections.broadcast(self.room_id, events.CODE_UPDATE, payload.code, exclude=self.connection_id)

    async def on_file_change(self, payload: FileChangePayload):
        if not self._in_room(payload):
            return
        if not is_valid_tree_path(payload.path):
            logger.warning(f"Dropping file change with invalid path {payload.path!r} in room {self.room_id}")
            return
        try:
            self.backend.trees.write_file(self.room_id, payload.path, payload.content)
        except NotFound as e:
            logger.warning(f"Dropping file change in room {self.room_id}: {e}")
            return
        await self.connections.broadcast(self.room_id, events.FILE_REFRESH)

    async def on_typing(self, payload: TypingPayload):
        if not self._in_room(payload):
            return
        user_name = payload.user_name or self.user_name
        await self.connections.broadcast(self.room_id, events.USER_TYPING, user_name, exclude=self.connection_id)

    async def on_language_change(self, payload: LanguageChangePayload):
        if not self._in_room(payload):
            return
        await self.connections.broadcast(self.room_id, events.LANGUAGE_UPDATE, payload.language)

    async def on_compile_code(self, payload: CompileCodePayload):
        if not self._in_room(payload) or not self.backend.has_room(self.room_id):
            return
        # run off the receive loop so this connection keeps handling events
        task = asyncio.create_task(self._run_code(self.room_id, payload))
        self.pending.add(task)
        task.add_done_callback(self._run_finished)

    def _run_finished(self, task: asyncio.Task):
        self.pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Code execution failed for connection {self.connection_id}: {error}", exc_info=error)

    async def _run_code(self, room_id: str, payload: CompileCodePayload):
        logger.info(f"Running {payload.language} {payload.version} code for room {room_id}")
        response = await self.executor.execute(payload.code, payload.language, payload.version, payload.input)
        self.backend.record_output(room_id, extract_output(response))
        await self.connections.broadcast(room_id, events.CODE_RESPONSE, response)

    async def _leave_current_room(self):
        room_id, user_name = self.room_id, self.user_name
        self.connections.remove(room_id, self.connection_id)
        users = self.backend.leave(room_id, user_name)
        await self.connections.broadcast(room_id, events.USER_JOINED, users)
        self.state = UNJOINED
        self.room_id = None
        self.user_name = None

    async def close(self):
        if self.state == CLOSED:
            return
        if self.state == JOINED:
            await self._leave_current_room()
        self.state = CLOSED
        logger.info(f"Connection {self.connection_id} closed")
