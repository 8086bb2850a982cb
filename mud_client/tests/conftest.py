"""
Pytest configuration and fixtures for the engine tests.
"""

import json
import sys
from pathlib import Path

import pytest

# Add the parent directory and this directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from muddy.map_graph import load_world
from room_fixtures import room, zones_document


@pytest.fixture
def make_world():
    """
    Build a World from {zone id: [room records]}.

    The first zone is the starting zone unless start= is given.
    """
    def _make(rooms_by_zone: dict, start: tuple[str, int] | None = None):
        zone_ids = list(rooms_by_zone)
        initial_zone, initial_room = start or (zone_ids[0], 0)
        zone_files = {f"{z}.json": json.dumps(rooms) for z, rooms in rooms_by_zone.items()}
        return load_world(zones_document(zone_ids, initial_zone, initial_room), zone_files)

    return _make


@pytest.fixture
def town(make_world):
    """
    A small two-zone world.

    town:0 Square   north -> town:1, east -> town:2, up -> town:3,
                    south -> forest:0, west -> town:999 (missing)
    town:1 Temple   south -> town:0
    town:2 Market   west -> town:0
    town:3 Tower    down -> town:0
    forest:0 Edge   north -> town:0, enter -> 1
    forest:1 Hollow out -> 0
    """
    return make_world({
        "town": [
            room(0, "Square", {
                "north": "1",
                "east": "2",
                "up": "3",
                "south": "forest:0",
                "west": "town:999",
            }, objects=[7]),
            room(1, "Temple", {"south": "0"}),
            room(2, "Market", {"west": "0"}),
            room(3, "Tower", {"down": "0"}),
        ],
        "forest": [
            room(0, "Edge", {"north": "town:0", "enter": "1"}),
            room(1, "Hollow", {"out": "0"}),
        ],
    })
