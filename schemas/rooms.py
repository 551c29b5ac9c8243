from typing import List

from pydantic import BaseModel


class RoomDetailsResponse(BaseModel):
    room_id: str
    users: List[str]
    user_count: int
    code: str
    output: str
    connections: int


class HealthResponse(BaseModel):
    status: str
