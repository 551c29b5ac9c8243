from fastapi import Request

from backend import CollabBackend
from connections import ConnectionManager


def get_backend(request: Request) -> CollabBackend:
    return request.app.state.backend


def get_connections(request: Request) -> ConnectionManager:
    return request.app.state.connections
