from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

import events
from backend import CollabBackend
from connections import ConnectionManager
from exceptions import AlreadyExists, InvalidName, NotFound
from logging_config import get_logger
from routers.deps import get_backend, get_connections
from schemas.files import FileContentResponse, PathRequest, SuccessResponse
from tree_store import sanitize
from validators import is_valid_tree_path

logger = get_logger(__name__)

files_router = APIRouter(tags=["files"])


def require_room_and_path(room_id: Optional[str], path: Optional[str], what: str = "path"):
    if not room_id or not path:
        raise HTTPException(status_code=400, detail=f"roomId and {what} required")
    if not is_valid_tree_path(path):
        raise HTTPException(status_code=400, detail=f"Invalid {what}")


@files_router.get("/files")
async def get_file_tree(
    room_id: Optional[str] = Query(None, alias="roomId"),
    backend: CollabBackend = Depends(get_backend),
):
    if not room_id:
        raise HTTPException(status_code=400, detail="Room ID required")
    try:
        tree = sanitize(backend.trees.get_tree(room_id))
    except InvalidName as e:
        logger.error(f"File tree for room {room_id} is corrupt: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return tree.to_json()


@files_router.get("/files/content", response_model=FileContentResponse)
async def get_file_content(
    room_id: Optional[str] = Query(None, alias="roomId"),
    path: Optional[str] = Query(None),
    backend: CollabBackend = Depends(get_backend),
):
    require_room_and_path(room_id, path)
    try:
        content = backend.trees.read_file(room_id, path)
    except NotFound:
        raise HTTPException(status_code=404, detail="File not found or invalid")
    return FileContentResponse(content=content)


@files_router.post("/folders", response_model=SuccessResponse)
async def create_folder(
    body: PathRequest,
    backend: CollabBackend = Depends(get_backend),
    connections: ConnectionManager = Depends(get_connections),
):
    require_room_and_path(body.room_id, body.path, "folder path")
    backend.trees.create_directory(body.room_id, body.path)
    logger.info(f"Folder {body.path} created in room {body.room_id}")
    await connections.broadcast(body.room_id, events.FILE_REFRESH)
    return SuccessResponse()


@files_router.post("/files", response_model=SuccessResponse)
async def create_file(
    body: PathRequest,
    backend: CollabBackend = Depends(get_backend),
    connections: ConnectionManager = Depends(get_connections),
):
    require_room_and_path(body.room_id, body.path, "file path")
    try:
        backend.trees.create_file(body.room_id, body.path)
    except AlreadyExists:
        raise HTTPException(status_code=400, detail="File already exists")
    logger.info(f"File {body.path} created in room {body.room_id}")
    await connections.broadcast(body.room_id, events.FILE_REFRESH)
    return SuccessResponse()


@files_router.delete("/files", response_model=SuccessResponse)
async def delete_path(
    body: PathRequest,
    backend: CollabBackend = Depends(get_backend),
    connections: ConnectionManager = Depends(get_connections),
):
    require_room_and_path(body.room_id, body.path)
    try:
        backend.trees.delete_path(body.room_id, body.path)
    except NotFound as e:
        logger.warning(f"Delete failed in room {body.room_id}: {e}")
        raise HTTPException(status_code=404, detail=str(e))
    logger.info(f"Deleted {body.path} from room {body.room_id}")
    await connections.broadcast(body.room_id, events.FILE_REFRESH)
    return SuccessResponse()
