class CollabError(Exception):
    """Base class for errors raised by the room and file tree state."""


class InvalidInput(CollabError):
    pass


class InvalidName(InvalidInput):
    def __init__(self, name):
        self.name = name
        super().__init__(f"Invalid file/folder name: {name}")


class NotFound(CollabError):
    pass


class AlreadyExists(CollabError):
    pass


class UpstreamFailure(CollabError):
    """The execution provider failed, timed out or answered with garbage."""
