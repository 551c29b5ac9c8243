from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from constants import DEFAULT_CODE
from logging_config import get_logger
from tree_store import TreeStore

logger = get_logger(__name__)


@dataclass
class Room:
    room_id: str
    code: str = DEFAULT_CODE
    output: str = ""
    users: Set[str] = field(default_factory=set)

    def user_list(self) -> List[str]:
        return sorted(self.users)


class CollabBackend:
    """Authoritative in-memory state: rooms and their file trees.

    One instance is created at application start and shared by every
    WebSocket session and HTTP handler through ``app.state``.
    """

    def __init__(self, default_code: str = DEFAULT_CODE):
        self.default_code = default_code
        self.rooms: Dict[str, Room] = {}
        self.trees = TreeStore()
        logger.info("Initializing CollabBackend with empty room registry")

    def get_room(self, room_id: str) -> Optional[Room]:
        return self.rooms.get(room_id)

    def has_room(self, room_id: str) -> bool:
        return room_id in self.rooms

    def join(self, room_id: str, user_name: str) -> Tuple[str, List[str]]:
        room = self.rooms.get(room_id)
        if room is None:
            room = Room(room_id=room_id, code=self.default_code)
            self.rooms[room_id] = room
            logger.info(f"Created room {room_id}")
        self.trees.get_tree(room_id)

        if user_name in room.users:
            logger.debug(f"User {user_name} already present in room {room_id}")
        room.users.add(user_name)
        logger.info(f"User {user_name} joined room {room_id} ({len(room.users)} users)")
        return room.code, room.user_list()

    def set_code(self, room_id: str, code: str):
        room = self.rooms.get(room_id)
        if room is None:
            logger.debug(f"Ignoring code update for unknown room {room_id}")
            return
        room.code = code

    def leave(self, room_id: str, user_name: str) -> List[str]:
        room = self.rooms.get(room_id)
        if room is None:
            return []
        room.users.discard(user_name)
        logger.info(f"User {user_name} left room {room_id} ({len(room.users)} users)")
        if not room.users:
            del self.rooms[room_id]
            self.trees.drop_tree(room_id)
            logger.info(f"Room {room_id} is empty, discarded room and file tree")
            return []
        return room.user_list()

    def record_output(self, room_id: str, output: str):
        room = self.rooms.get(room_id)
        if room is None:
            logger.debug(f"Room {room_id} gone before execution output arrived")
            return
        room.output = output
