"""
Minimap - Local grid layout of the rooms around the player.

Rooms reachable through the eight compass exits are placed on an integer
grid by breadth-first search from the player's room, which sits at (0, 0).
Up, down and custom exits have no grid offset and are never followed.
"""

import logging
from collections import deque
from dataclasses import dataclass, field

from .map_graph import Direction, Location, RoomGraph

logger = logging.getLogger(__name__)

ORIGIN_GLYPH = "@"
ROOM_GLYPH = "o"
BLANK_GLYPH = " "


@dataclass
class MinimapNode:
    """A room placed on the minimap."""
    x: int
    y: int
    room_key: str
    room_name: str
    is_origin: bool = False
    connections: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "room_key": self.room_key,
            "room_name": self.room_name,
            "is_origin": self.is_origin,
            "connections": list(self.connections),
        }


def layout(origin: Location, graph: RoomGraph, max_distance: int) -> list[MinimapNode]:
    """
    Place the rooms around origin on a grid.

    Only cells with |x| <= max_distance and |y| <= max_distance are used.
    A room reached by more than one path keeps the coordinate of the path
    that found it first. Each node's connections list the in-bounds rooms
    its compass exits lead to.
    """
    if max_distance < 0:
        raise ValueError("max_distance must not be negative")

    origin_key = origin.key
    nodes: list[MinimapNode] = []

    queue = deque([(origin_key, (0, 0))])
    visited = {origin_key: (0, 0)}

    while queue:
        room_key, (x, y) = queue.popleft()
        entry = graph.get(room_key)

        if not entry:
            continue

        room, zone = entry
        connections = []

        for direction in Direction.compass():
            reference = room.exits.get(direction.value)
            if reference is None:
                continue

            next_key = Location.parse(reference, zone).key
            if next_key not in graph:
                continue

            dx, dy = direction.offset
            next_coord = (x + dx, y + dy)

            if abs(next_coord[0]) <= max_distance and abs(next_coord[1]) <= max_distance:
                connections.append(next_key)

                if next_key not in visited:
                    visited[next_key] = next_coord
                    queue.append((next_key, next_coord))

        nodes.append(MinimapNode(
            x=x,
            y=y,
            room_key=room_key,
            room_name=room.name,
            is_origin=room_key == origin_key,
            connections=connections,
        ))

    logger.debug(f"Minimap around {origin_key}: {len(nodes)} rooms (max distance {max_distance})")
    return nodes


def _connector(dx: int, dy: int) -> str:
    if dx == 0:
        return "|"
    if dy == 0:
        return "-"
    # Screen rows grow downward while grid y grows northward
    return "/" if dx == dy else "\\"


def render_minimap(nodes: list[MinimapNode]) -> list[str]:
    """
    Draw minimap nodes as ASCII rows, north at the top.

    The player's room is drawn as "@" and other rooms as "o". Connections
    between rooms on neighbouring cells are drawn between them; connections
    to rooms that were placed elsewhere are left out.
    """
    if not nodes:
        return []

    min_x = min(n.x for n in nodes)
    max_x = max(n.x for n in nodes)
    min_y = min(n.y for n in nodes)
    max_y = max(n.y for n in nodes)

    width = (max_x - min_x) * 2 + 1
    height = (max_y - min_y) * 2 + 1
    canvas = [[BLANK_GLYPH] * width for _ in range(height)]

    def cell(x: int, y: int) -> tuple[int, int]:
        return (max_y - y) * 2, (x - min_x) * 2

    by_key = {n.room_key: n for n in nodes}

    for node in nodes:
        for key in node.connections:
            other = by_key.get(key)
            if other is None:
                continue
            dx, dy = other.x - node.x, other.y - node.y
            if max(abs(dx), abs(dy)) != 1:
                continue

            row, col = cell(node.x, node.y)
            row, col = row - dy, col + dx
            glyph = _connector(dx, dy)
            current = canvas[row][col]
            if current in ("/", "\\") and current != glyph:
                glyph = "X"
            canvas[row][col] = glyph

    for node in nodes:
        row, col = cell(node.x, node.y)
        canvas[row][col] = ORIGIN_GLYPH if node.is_origin else ROOM_GLYPH

    return ["".join(line).rstrip() for line in canvas]
