"""
Game Session - One player's game: cursor, command dispatch and display.
"""

import logging
import os
import threading
from typing import Optional, Callable, Any
from dataclasses import dataclass, field
from datetime import datetime

from .content import DEFAULT_CONTENT_DIR, load_world_from_dir
from .errors import CurrentRoomMissing, DestinationMissing, NoSuchExit
from .map_graph import Direction, Location, RoomGraph, World
from .minimap import MinimapNode, layout
from .navigation import HELP_TEXT, Player, attempt_move, current_room_display
from .settings import Settings
from .text_utils import wrap_lines

logger = logging.getLogger(__name__)

WELCOME_TEXT = (
    "=== Welcome to Muddy Rogue ===",
    "Type 'help' for available commands.",
    "",
)

CANT_GO_THAT_WAY = "You can't go that way."


def _check_minimap_distance(distance: int) -> None:
    if distance < 0:
        raise ValueError(f"minimap_distance must not be negative, got {distance}")


@dataclass
class SessionConfig:
    """Configuration for a game session."""
    content_dir: str = str(DEFAULT_CONTENT_DIR)
    settings_path: str = ""
    minimap_distance: int = 2

    def __post_init__(self):
        _check_minimap_distance(self.minimap_distance)

    @classmethod
    def from_env(cls) -> "SessionConfig":
        """Build a config from MUDDY_* environment variables."""
        defaults = cls()
        return cls(
            content_dir=os.getenv("MUDDY_CONTENT_DIR") or defaults.content_dir,
            settings_path=os.getenv("MUDDY_SETTINGS_PATH", defaults.settings_path),
            minimap_distance=int(os.getenv("MUDDY_MINIMAP_DISTANCE", defaults.minimap_distance)),
        )


@dataclass
class SessionEvent:
    """Event from the session."""
    type: str  # "stream-message", "minimap-update", "settings-change"
    data: Any
    timestamp: datetime = field(default_factory=datetime.now)


class GameSession:
    """
    A single player's game over a shared, read-only room graph.

    The player cursor, the display settings and every read derived from the
    cursor are guarded by one lock, so a move and a concurrent minimap or
    look request never see a half-applied move.
    """

    def __init__(
        self,
        graph: RoomGraph,
        start: Location,
        settings: Optional[Settings] = None,
        settings_path: str = "",
        minimap_distance: int = 2,
    ):
        _check_minimap_distance(minimap_distance)

        self.graph = graph
        self.start = start
        self.player = Player(current_location=start)
        self.settings = settings or Settings()
        self.settings_path = settings_path
        self.minimap_distance = minimap_distance

        self._lock = threading.RLock()
        self._event_callbacks: list[Callable[[SessionEvent], Any]] = []

    @classmethod
    def from_world(cls, world: World, **kwargs) -> "GameSession":
        return cls(world.graph, world.start, **kwargs)

    @classmethod
    def from_config(cls, config: SessionConfig) -> "GameSession":
        """Load content and settings named by config and start a session."""
        world = load_world_from_dir(config.content_dir)
        settings = Settings.load_from_path(config.settings_path) if config.settings_path else Settings()
        return cls.from_world(
            world,
            settings=settings,
            settings_path=config.settings_path,
            minimap_distance=config.minimap_distance,
        )

    # ==================== Events ====================

    def on_event(self, callback: Callable[[SessionEvent], Any]) -> None:
        """Register callback for session events."""
        self._event_callbacks.append(callback)

    def _emit_event(self, event_type: str, data: Any) -> None:
        """Emit an event to all callbacks."""
        event = SessionEvent(type=event_type, data=data)
        for callback in self._event_callbacks:
            try:
                callback(event)
            except Exception as e:
                logger.error(f"Event callback error: {e}")

    # ==================== Display ====================

    def present(self, message: str) -> str:
        """Apply the word-wrap setting to one message."""
        if not self.settings.word_wrap_enabled:
            return message
        return "\n".join(wrap_lines(message, self.settings.word_wrap_length))

    def _respond(self, lines) -> list[str]:
        messages = [self.present(line) for line in lines]
        for message in messages:
            self._emit_event("stream-message", message)
        return messages

    # ==================== Queries ====================

    @property
    def location(self) -> Location:
        with self._lock:
            return self.player.current_location

    def look(self) -> list[str]:
        """Describe the current room."""
        with self._lock:
            return current_room_display(self.player.current_location, self.graph)

    def minimap(self, max_distance: Optional[int] = None) -> list[MinimapNode]:
        """Lay out the rooms around the player."""
        if max_distance is None:
            max_distance = self.minimap_distance
        with self._lock:
            return layout(self.player.current_location, self.graph, max_distance)

    def start_messages(self) -> list[str]:
        """Welcome banner followed by the starting room."""
        with self._lock:
            return self._respond([*WELCOME_TEXT, *self.look()])

    # ==================== Commands ====================

    def handle_command(self, command: str) -> list[str]:
        """
        Run one line of player input and return the response messages.

        Movement is tried first; "help", "look" and "time" are only used when
        the input is not an exit of the current room.
        """
        with self._lock:
            self._emit_event("stream-message", f"> {command}")
            return self._respond(self._dispatch(command))

    def _dispatch(self, command: str) -> list[str]:
        cmd = command.strip().lower()

        try:
            result = attempt_move(self.player, self.graph, cmd)
        except NoSuchExit:
            if Direction.from_string(cmd) is not None:
                return [CANT_GO_THAT_WAY]
        except CurrentRoomMissing as e:
            logger.error(f"Player is outside the room graph: {e}")
            if Direction.from_string(cmd) is not None:
                return [f"Error: {e}."]
        except DestinationMissing as e:
            logger.error(f"Move {cmd!r} from {self.player.current_location} failed: {e}")
            return [f"Error: {e}."]
        else:
            self._emit_event("minimap-update", result.location.key)
            return result.lines

        if cmd == "help":
            return list(HELP_TEXT)
        if cmd in ("look", "l"):
            return self.look()
        if cmd == "time":
            return [f"Current time: {datetime.now().strftime('%H:%M:%S')}"]

        return [f"Unknown command: '{command}'. Type 'help' for available commands."]

    def reset(self) -> Location:
        """Put the player back on the starting room."""
        with self._lock:
            logger.info(f"Resetting player from {self.player.current_location} to {self.start}")
            self.player.move_to(self.start)
        self._emit_event("minimap-update", self.start.key)
        return self.start

    # ==================== Settings ====================

    def get_settings(self) -> Settings:
        """Get a copy of the current display settings."""
        with self._lock:
            return Settings(**self.settings.to_dict())

    def update_settings(
        self,
        word_wrap_enabled: Optional[bool] = None,
        word_wrap_length: Optional[int] = None,
    ) -> Settings:
        """Change display settings and save them if a settings path is set."""
        if word_wrap_length is not None and word_wrap_length < 1:
            raise ValueError("word_wrap_length must be at least 1")

        with self._lock:
            if word_wrap_enabled is not None:
                self.settings.word_wrap_enabled = word_wrap_enabled
            if word_wrap_length is not None:
                self.settings.word_wrap_length = word_wrap_length
            if self.settings_path:
                self.settings.save_to_path(self.settings_path)
            settings = Settings(**self.settings.to_dict())

        self._emit_event("settings-change", settings.to_dict())
        return settings

    def get_state(self) -> dict:
        """Get current session state."""
        with self._lock:
            location = self.player.current_location
            room = self.graph.get_room(location)
            return {
                "location": location.key,
                "room": room.name if room else None,
                "exits": sorted(room.exits) if room else [],
                "settings": self.settings.to_dict(),
                "minimap_distance": self.minimap_distance,
            }
