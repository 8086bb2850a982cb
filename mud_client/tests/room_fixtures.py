"""Builders for zone documents used across the engine tests."""

import json


def room(room_id: int, name: str, exits: dict | None = None, objects: list | None = None) -> dict:
    """A room record as it appears in a zone document."""
    return {
        "id": room_id,
        "name": name,
        "description": f"{name} description.",
        "exits": exits or {},
        "objects": objects or [],
    }


def zones_document(zone_ids, initial_zone: str, initial_room: int = 0) -> str:
    return json.dumps({
        "zones": [{"id": z, "name": z.title(), "file": f"{z}.json"} for z in zone_ids],
        "initial_zone": initial_zone,
        "initial_room": initial_room,
    })
