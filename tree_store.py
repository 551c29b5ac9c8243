from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from exceptions import AlreadyExists, InvalidName, NotFound
from logging_config import get_logger
from validators import is_valid_name

logger = get_logger(__name__)


@dataclass
class File:
    content: str = ""

    def to_json(self):
        return self.content


@dataclass
class Directory:
    children: Dict[str, "Node"] = field(default_factory=dict)

    def to_json(self):
        return {name: child.to_json() for name, child in self.children.items()}


Node = Union[Directory, File]


def sanitize(node: Union[Directory, Mapping]) -> Directory:
    """Validate every name in a tree and heal malformed file values.

    Accepts either a typed ``Directory`` (healed in place and returned) or a
    raw JSON mapping, which is converted into typed nodes. Keys that fail the
    name grammar raise ``InvalidName``; values that are neither a directory
    nor a string become empty files.
    """
    entries = node.children if isinstance(node, Directory) else node
    healed: Dict[str, Node] = {}
    for name, child in entries.items():
        if not is_valid_name(name):
            raise InvalidName(name)
        if isinstance(child, (Directory, Mapping)):
            healed[name] = sanitize(child)
        elif isinstance(child, File) and isinstance(child.content, str):
            healed[name] = child
        elif isinstance(child, str):
            healed[name] = File(child)
        else:
            logger.warning(f"Coercing malformed value under '{name}' to an empty file")
            healed[name] = File("")

    if isinstance(node, Directory):
        node.children = healed
        return node
    return Directory(healed)


def split_path(path: str) -> Tuple[List[str], str]:
    parts = path.split("/")
    return parts[:-1], parts[-1]


class TreeStore:
    """Per-room virtual file trees, addressed by '/'-joined paths.

    Paths are expected to have passed ``is_valid_path`` already; the store
    only checks that the segments it walks through exist.
    """

    def __init__(self):
        self._trees: Dict[str, Directory] = {}

    def __contains__(self, room_id: str) -> bool:
        return room_id in self._trees

    def get_tree(self, room_id: str) -> Directory:
        tree = self._trees.get(room_id)
        if tree is None:
            tree = Directory()
            self._trees[room_id] = tree
            logger.debug(f"Created empty file tree for room {room_id}")
        return tree

    def find_tree(self, room_id: str) -> Optional[Directory]:
        return self._trees.get(room_id)

    def drop_tree(self, room_id: str):
        if self._trees.pop(room_id, None) is not None:
            logger.debug(f"Dropped file tree for room {room_id}")

    def _walk(self, tree: Directory, segments: List[str], path: str) -> Directory:
        current = tree
        for segment in segments:
            child = current.children.get(segment)
            if not isinstance(child, Directory):
                raise NotFound(f"Path not found: {path}")
            current = child
        return current

    def _ensure_dirs(self, tree: Directory, segments: List[str]) -> Directory:
        current = tree
        for segment in segments:
            child = current.children.get(segment)
            if not isinstance(child, Directory):
                child = Directory()
                current.children[segment] = child
            current = child
        return current

    def read_file(self, room_id: str, path: str) -> str:
        tree = self.find_tree(room_id)
        if tree is None:
            raise NotFound(f"File not found: {path}")
        parents, leaf = split_path(path)
        try:
            parent = self._walk(tree, parents, path)
        except NotFound:
            raise NotFound(f"File not found: {path}")
        node = parent.children.get(leaf)
        if not isinstance(node, File):
            raise NotFound(f"File not found: {path}")
        return node.content

    def create_directory(self, room_id: str, path: str):
        self._ensure_dirs(self.get_tree(room_id), path.split("/"))
        logger.debug(f"Created folder {path} in room {room_id}")

    def create_file(self, room_id: str, path: str):
        parents, leaf = split_path(path)
        parent = self._ensure_dirs(self.get_tree(room_id), parents)
        if leaf in parent.children:
            raise AlreadyExists(f"File already exists: {path}")
        parent.children[leaf] = File("")
        logger.debug(f"Created file {path} in room {room_id}")

    def write_file(self, room_id: str, path: str, content: str):
        """Overwrite the leaf at ``path``; the parent folder must exist."""
        tree = self.find_tree(room_id)
        if tree is None:
            raise NotFound(f"Room not found: {room_id}")
        parents, leaf = split_path(path)
        parent = self._walk(tree, parents, path)
        parent.children[leaf] = File(content)

    def delete_path(self, room_id: str, path: str):
        tree = self.find_tree(room_id)
        if tree is None:
            raise NotFound(f"Room not found: {room_id}")
        parents, leaf = split_path(path)
        parent = self._walk(tree, parents, path)
        if leaf not in parent.children:
            raise NotFound(f"File/folder not found: {path}")
        del parent.children[leaf]
        logger.debug(f"Deleted {path} from room {room_id}")
