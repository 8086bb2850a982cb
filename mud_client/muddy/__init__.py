"""
Muddy Rogue - Text adventure exploration engine

A Python package for exploring a zone-based room graph, with movement
resolution and a local minimap around the player.
"""

__version__ = "0.1.0"

from .errors import (
    MuddyError,
    MalformedContent,
    NavigationError,
    CurrentRoomMissing,
    NoSuchExit,
    DestinationMissing,
)
from .map_graph import (
    Direction,
    Location,
    Room,
    RoomGraph,
    ZoneInfo,
    ZoneConfig,
    World,
    build_room_graph,
    load_world,
)
from .navigation import Player, MoveResult, attempt_move, current_room_display, expand_direction
from .minimap import MinimapNode, layout, render_minimap
from .text_utils import format_exits, format_list, wrap_lines
from .settings import Settings
from .content import load_world_from_dir
from .game_session import GameSession, SessionConfig, SessionEvent

__all__ = [
    # Errors
    "MuddyError",
    "MalformedContent",
    "NavigationError",
    "CurrentRoomMissing",
    "NoSuchExit",
    "DestinationMissing",
    # Room graph
    "Direction",
    "Location",
    "Room",
    "RoomGraph",
    "ZoneInfo",
    "ZoneConfig",
    "World",
    "build_room_graph",
    "load_world",
    "load_world_from_dir",
    # Navigation
    "Player",
    "MoveResult",
    "attempt_move",
    "current_room_display",
    "expand_direction",
    # Minimap
    "MinimapNode",
    "layout",
    "render_minimap",
    # Text
    "format_exits",
    "format_list",
    "wrap_lines",
    # Session
    "Settings",
    "GameSession",
    "SessionConfig",
    "SessionEvent",
]
