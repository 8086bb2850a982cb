"""
Navigation - Resolves movement commands against the room graph.
"""

import logging
from dataclasses import dataclass

from .errors import CurrentRoomMissing, DestinationMissing, NoSuchExit
from .map_graph import Direction, Location, RoomGraph
from .text_utils import emphasize, format_exits

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Available commands:",
    "  Movement: n, s, e, w, ne, nw, se, sw, u, d (or full direction names)",
    "  Other: help, look, time",
)

_EXPANSIONS = {d.abbreviation: d.value for d in Direction}


def expand_direction(command: str) -> str:
    """Expand a direction abbreviation ("ne" -> "northeast"); other words pass through."""
    return _EXPANSIONS.get(command, command)


@dataclass
class Player:
    """The player cursor: where the player currently stands."""
    current_location: Location

    def move_to(self, location: Location) -> None:
        self.current_location = location


@dataclass
class MoveResult:
    """Outcome of a successful move."""
    location: Location
    lines: list[str]


def current_room_display(location: Location, graph: RoomGraph) -> list[str]:
    """Lines describing the room at location, or [] if it is not in the graph."""
    entry = graph.get(location.key)
    if entry is None:
        return []

    room, _ = entry
    lines = [emphasize(room.name), room.description]

    if room.exits:
        lines.append("")
        lines.append(format_exits(room.exits))

    return lines


def attempt_move(player: Player, graph: RoomGraph, command: str) -> MoveResult:
    """
    Move the player through the exit named by command.

    Raises:
        CurrentRoomMissing: the player's location is not in the graph.
        NoSuchExit: the current room has no such exit.
        DestinationMissing: the exit leads to a room that is not in the graph.

    The player is only moved when no error is raised.
    """
    direction = expand_direction(command)

    key = player.current_location.key
    entry = graph.get(key)
    if entry is None:
        raise CurrentRoomMissing(key)

    room, zone = entry
    reference = room.exits.get(direction)
    if reference is None:
        raise NoSuchExit(direction)

    destination = Location.parse(reference, zone)
    if destination not in graph:
        raise DestinationMissing(destination.key)

    logger.debug(f"Moving {direction} from {key} to {destination.key}")
    player.move_to(destination)
    return MoveResult(location=destination, lines=current_room_display(destination, graph))
