"""
Map Graph - Zone-based room graph for Muddy Rogue.

This module provides:
- Locations addressing a room across zones ("zone:room" canonical keys)
- Room records as loaded from zone content documents
- Standard directions with abbreviations and minimap grid offsets
- The read-only room graph built once from the zone configuration
"""

import logging
import re
from typing import Annotated, Iterable, Iterator, Mapping, Optional, Union
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .errors import MalformedContent

logger = logging.getLogger(__name__)

ZONE_SEPARATOR = ":"
MAX_ROOM_ID = 0xFFFFFFFF

_ROOM_ID_PATTERN = re.compile(r"\+?[0-9]+")

RoomId = Annotated[int, Field(ge=0, le=MAX_ROOM_ID)]


class Direction(Enum):
    """Standard MUD directions."""
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"
    NORTHEAST = "northeast"
    NORTHWEST = "northwest"
    SOUTHEAST = "southeast"
    SOUTHWEST = "southwest"
    UP = "up"
    DOWN = "down"

    @property
    def abbreviation(self) -> str:
        return _ABBREVIATIONS[self]

    @property
    def offset(self) -> Optional[tuple[int, int]]:
        """Grid offset (dx, dy) with north as +y, or None off the compass."""
        return _OFFSETS.get(self)

    @classmethod
    def from_string(cls, direction: str) -> Optional["Direction"]:
        """Convert a full name or abbreviation to a Direction."""
        direction = direction.lower().strip()

        for d in cls:
            if direction == d.value or direction == d.abbreviation:
                return d

        return None

    @classmethod
    def compass(cls) -> tuple["Direction", ...]:
        """The eight directions that can be drawn on a flat map, in scan order."""
        return tuple(_OFFSETS)


_ABBREVIATIONS = {
    Direction.NORTH: "n",
    Direction.SOUTH: "s",
    Direction.EAST: "e",
    Direction.WEST: "w",
    Direction.NORTHEAST: "ne",
    Direction.NORTHWEST: "nw",
    Direction.SOUTHEAST: "se",
    Direction.SOUTHWEST: "sw",
    Direction.UP: "u",
    Direction.DOWN: "d",
}

# Insertion order is the minimap scan order.
_OFFSETS = {
    Direction.NORTH: (0, 1),
    Direction.SOUTH: (0, -1),
    Direction.EAST: (1, 0),
    Direction.WEST: (-1, 0),
    Direction.NORTHEAST: (1, 1),
    Direction.NORTHWEST: (-1, 1),
    Direction.SOUTHEAST: (1, -1),
    Direction.SOUTHWEST: (-1, -1),
}


def _parse_room_id(raw: str, reference: str) -> int:
    if _ROOM_ID_PATTERN.fullmatch(raw):
        value = int(raw)
        if value <= MAX_ROOM_ID:
            return value
    # Bad ids resolve to room 0 of the zone
    logger.warning(f"Malformed room id {raw!r} in exit reference {reference!r}, using 0")
    return 0


@dataclass(frozen=True)
class Location:
    """A room address: zone id plus room id."""
    zone: str
    room_id: int

    @property
    def key(self) -> str:
        """Canonical "zone:room" key used for graph lookups."""
        return f"{self.zone}{ZONE_SEPARATOR}{self.room_id}"

    @classmethod
    def parse(cls, reference: str, current_zone: str) -> "Location":
        """
        Resolve an exit reference.

        "zone:12" names a room in another zone, a bare "12" stays in
        current_zone. Room ids that are not unsigned integers become 0.
        """
        if ZONE_SEPARATOR in reference:
            zone, room = reference.split(ZONE_SEPARATOR, 1)
        else:
            zone, room = current_zone, reference
        return cls(zone=zone, room_id=_parse_room_id(room, reference))

    @classmethod
    def from_key(cls, key: str) -> "Location":
        return cls.parse(key, "")

    def __str__(self) -> str:
        return self.key


class Room(BaseModel):
    """A room as authored in a zone document. Immutable once loaded."""
    # Strict: "5", 5.0 or true are not room ids
    model_config = ConfigDict(frozen=True, strict=True)

    id: RoomId
    name: str
    description: str
    exits: dict[str, str]
    objects: tuple[RoomId, ...]


class ZoneInfo(BaseModel):
    """One zone entry of the zone configuration."""
    model_config = ConfigDict(strict=True)

    id: str
    name: str
    file: str


class ZoneConfig(BaseModel):
    """The zone configuration document."""
    model_config = ConfigDict(strict=True)

    zones: list[ZoneInfo]
    initial_zone: str
    initial_room: RoomId

    @property
    def start(self) -> Location:
        return Location(zone=self.initial_zone, room_id=self.initial_room)


_ROOM_LIST = TypeAdapter(list[Room])

ZoneFiles = Union[Mapping[str, str], Iterable[tuple[str, str]]]


def _index_zone_files(zone_files: ZoneFiles) -> dict[str, str]:
    if isinstance(zone_files, Mapping):
        return dict(zone_files)

    index: dict[str, str] = {}
    for file_id, document in zone_files:
        # First document supplied for a file id wins
        index.setdefault(file_id, document)
    return index


def parse_zone_config(zones_json: str) -> ZoneConfig:
    """Parse the zone configuration, raising MalformedContent on bad input."""
    try:
        return ZoneConfig.model_validate_json(zones_json)
    except ValidationError as e:
        raise MalformedContent("zone configuration", str(e)) from e


def parse_rooms(document: str, source: str = "room list") -> list[Room]:
    """Parse a zone's room-list document, raising MalformedContent on bad input."""
    try:
        return _ROOM_LIST.validate_json(document)
    except ValidationError as e:
        raise MalformedContent(source, str(e)) from e


class RoomGraph:
    """
    Read-only graph of every loaded room.

    Maps canonical keys to (room, owning zone id). Built once by
    build_room_graph(); when two rooms share a key the later insert wins.
    """

    def __init__(self):
        self._rooms: dict[str, tuple[Room, str]] = {}

    # ==================== Construction ====================

    def _insert(self, zone_id: str, room: Room) -> None:
        key = Location(zone=zone_id, room_id=room.id).key
        if key in self._rooms:
            logger.warning(f"Duplicate room {key}, later definition replaces earlier one")
        self._rooms[key] = (room, zone_id)
        logger.debug(f"Added room: {room.name} ({key})")

    # ==================== Lookup ====================

    def get(self, key: str) -> Optional[tuple[Room, str]]:
        """Get (room, zone id) by canonical key."""
        return self._rooms.get(key)

    def get_room(self, location: Location) -> Optional[Room]:
        entry = self._rooms.get(location.key)
        return entry[0] if entry else None

    def __contains__(self, key: object) -> bool:
        if isinstance(key, Location):
            key = key.key
        return key in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[str]:
        return iter(self._rooms)

    def items(self):
        return self._rooms.items()

    # ==================== Zones ====================

    @property
    def zone_ids(self) -> list[str]:
        """Zone ids with at least one room, in load order."""
        seen: dict[str, None] = {}
        for _, zone_id in self._rooms.values():
            seen.setdefault(zone_id)
        return list(seen)

    def rooms_in_zone(self, zone_id: str) -> list[Room]:
        return [room for room, zone in self._rooms.values() if zone == zone_id]

    # ==================== Validation & Statistics ====================

    def find_dangling_exits(self) -> list[tuple[str, str, str]]:
        """
        Get exits whose destination is not in the graph.
        Returns list of (source key, direction, destination key) tuples.
        """
        dangling = []

        for key, (room, zone_id) in self._rooms.items():
            for direction, reference in room.exits.items():
                destination = Location.parse(reference, zone_id)
                if destination.key not in self._rooms:
                    dangling.append((key, direction, destination.key))

        return dangling

    def get_stats(self) -> dict:
        """Get graph statistics."""
        zones: dict[str, int] = {}
        exits = 0
        for room, zone_id in self._rooms.values():
            zones[zone_id] = zones.get(zone_id, 0) + 1
            exits += len(room.exits)

        return {
            "total_rooms": len(self._rooms),
            "total_exits": exits,
            "zones": zones,
        }


def build_room_graph(zones: Iterable[ZoneInfo], zone_files: ZoneFiles) -> RoomGraph:
    """
    Build the room graph from zone entries and their pre-loaded documents.

    Zones whose document was not supplied are skipped. A document that does
    not parse into rooms raises MalformedContent and nothing is returned.
    """
    documents = _index_zone_files(zone_files)
    graph = RoomGraph()

    for zone in zones:
        document = documents.get(zone.file)
        if document is None:
            logger.warning(f"No content for zone {zone.id!r} (file {zone.file!r}), skipping")
            continue

        rooms = parse_rooms(document, source=zone.file)
        for room in rooms:
            graph._insert(zone.id, room)
        logger.debug(f"Loaded zone {zone.id!r}: {len(rooms)} rooms")

    return graph


@dataclass
class World:
    """A loaded world: the room graph plus where players start."""
    graph: RoomGraph
    start: Location
    zones: list[ZoneInfo] = field(default_factory=list)


def load_world(zones_json: str, zone_files: ZoneFiles) -> World:
    """Parse the zone configuration and build the room graph from it."""
    config = parse_zone_config(zones_json)
    graph = build_room_graph(config.zones, zone_files)

    if config.start not in graph:
        logger.warning(f"Start room {config.start} is not in the loaded graph")

    for source, direction, destination in graph.find_dangling_exits():
        logger.warning(f"Exit {direction!r} from {source} points to missing room {destination}")

    logger.info(f"Loaded world: {len(graph)} rooms in {len(graph.zone_ids)} zones")
    return World(graph=graph, start=config.start, zones=list(config.zones))
