"""
Content loading - reads zone documents from a content directory.

A content directory holds zones.json plus the room-list files it names.
Parsing and graph building are left to map_graph.load_world().
"""

import logging
from pathlib import Path

from .map_graph import World, load_world, parse_zone_config

logger = logging.getLogger(__name__)

ZONES_FILE = "zones.json"
DEFAULT_CONTENT_DIR = Path(__file__).parent / "rooms"


def read_content_dir(content_dir: str | Path) -> tuple[str, dict[str, str]]:
    """
    Read the zone configuration and every zone file it names.

    Returns (zones_json, {file id: document}). Zone files that do not exist
    are left out; load_world() then skips their zones.
    """
    content_dir = Path(content_dir)
    zones_json = (content_dir / ZONES_FILE).read_text(encoding="utf-8")
    config = parse_zone_config(zones_json)

    zone_files: dict[str, str] = {}
    for zone in config.zones:
        path = content_dir / zone.file
        if not path.is_file():
            logger.warning(f"Zone file {path} not found")
            continue
        zone_files[zone.file] = path.read_text(encoding="utf-8")

    logger.debug(f"Read {len(zone_files)} zone files from {content_dir}")
    return zones_json, zone_files


def load_world_from_dir(content_dir: str | Path = DEFAULT_CONTENT_DIR) -> World:
    """Read a content directory and build its world."""
    zones_json, zone_files = read_content_dir(content_dir)
    return load_world(zones_json, zone_files)
