"""
Errors raised by the room graph and the navigation engine.
"""


class MuddyError(Exception):
    """Base class for Muddy Rogue errors."""


class MalformedContent(MuddyError):
    """A zone configuration or room-list document could not be parsed."""

    def __init__(self, source: str, detail: str):
        self.source = source
        self.detail = detail
        super().__init__(f"Malformed content in {source}: {detail}")


class NavigationError(MuddyError):
    """A movement command could not be carried out."""


class CurrentRoomMissing(NavigationError):
    """The player cursor points at a room that is not in the graph."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Current room not found ({key})")


class NoSuchExit(NavigationError):
    """The current room has no exit in the requested direction."""

    def __init__(self, direction: str):
        self.direction = direction
        super().__init__(f"No exit '{direction}'")


class DestinationMissing(NavigationError):
    """An exit points at a room that is not in the graph."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Destination room not found ({key})")
