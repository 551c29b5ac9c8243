import re

NAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")
PATH_PATTERN = re.compile(r"^[A-Za-z0-9./_-]+$")
ROOM_ID_PATTERN = re.compile(r"^[A-Za-z0-9-]+$")


def _matches(pattern, value) -> bool:
    return isinstance(value, str) and pattern.fullmatch(value) is not None


def is_valid_name(name) -> bool:
    """A single file or folder name: alphanumerics, '.', '_' and '-'."""
    return _matches(NAME_PATTERN, name)


def is_valid_path(path) -> bool:
    """A '/'-joined path made of name characters."""
    return _matches(PATH_PATTERN, path)


def is_valid_room_id(room_id) -> bool:
    # stricter than paths: no dots or slashes
    return _matches(ROOM_ID_PATTERN, room_id)


def is_valid_tree_path(path) -> bool:
    """A path that is also safe to walk: no empty segments ('a//b', '/a', 'a/')."""
    return is_valid_path(path) and all(path.split("/"))
