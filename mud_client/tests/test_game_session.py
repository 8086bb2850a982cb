"""Tests for the game session: command dispatch, events and settings."""

import json
import logging
import re

import pytest

from room_fixtures import room, zones_document
from muddy.content import DEFAULT_CONTENT_DIR, load_world_from_dir, read_content_dir
from muddy.game_session import (
    CANT_GO_THAT_WAY,
    WELCOME_TEXT,
    GameSession,
    SessionConfig,
)
from muddy.map_graph import Location
from muddy.navigation import HELP_TEXT
from muddy.settings import Settings


@pytest.fixture
def session(town):
    """A session on the town world with wrapping off."""
    return GameSession.from_world(town, settings=Settings(word_wrap_enabled=False))


class TestCommandDispatch:
    """Tests for handle_command."""

    def test_move(self, session):
        messages = session.handle_command("n")

        assert messages[0] == "**Temple**"
        assert session.location == Location("town", 1)

    def test_input_is_normalized(self, session):
        session.handle_command("  NORTH ")

        assert session.location == Location("town", 1)

    def test_blocked_direction(self, session):
        assert session.handle_command("ne") == [CANT_GO_THAT_WAY]
        assert session.location == Location("town", 0)

    def test_dangling_exit_reports_error(self, session, caplog):
        with caplog.at_level(logging.ERROR, logger="muddy.game_session"):
            messages = session.handle_command("w")

        assert messages == ["Error: Destination room not found (town:999)."]
        assert session.location == Location("town", 0)
        assert "town:999" in caplog.text

    def test_help(self, session):
        assert session.handle_command("help") == list(HELP_TEXT)

    def test_look(self, session):
        expected = session.look()

        assert session.handle_command("look") == expected
        assert session.handle_command("l") == expected
        assert expected[0] == "**Square**"

    def test_time(self, session):
        messages = session.handle_command("time")

        assert len(messages) == 1
        assert re.fullmatch(r"Current time: \d\d:\d\d:\d\d", messages[0])

    def test_unknown_command(self, session):
        assert session.handle_command("dance") == [
            "Unknown command: 'dance'. Type 'help' for available commands."
        ]

    def test_custom_exit_name_is_not_a_direction(self, session):
        """Test exit names that are not compass words are unknown where absent."""
        assert session.handle_command("enter")[0].startswith("Unknown command")

    def test_exit_named_like_a_command_wins(self, make_world):
        """Test an exit is tried before the built-in commands."""
        world = make_world({
            "town": [
                room(0, "Square", {"help": "1"}),
                room(1, "Help Desk"),
            ],
        })
        session = GameSession.from_world(world)

        assert session.handle_command("help")[0] == "**Help Desk**"

    def test_player_outside_graph(self, town, caplog):
        session = GameSession(town.graph, Location("nowhere", 0))

        with caplog.at_level(logging.ERROR, logger="muddy.game_session"):
            messages = session.handle_command("n")

        assert messages == ["Error: Current room not found (nowhere:0)."]
        assert session.handle_command("help") == list(HELP_TEXT)
        assert session.handle_command("look") == []


class TestEvents:
    """Tests for session events."""

    def test_move_events(self, session):
        events = []
        session.on_event(events.append)

        session.handle_command("e")

        assert [e.type for e in events][:2] == ["stream-message", "minimap-update"]
        assert events[0].data == "> e"
        assert events[1].data == "town:2"
        assert [e.data for e in events[2:]] == session.look()

    def test_failed_move_has_no_minimap_update(self, session):
        events = []
        session.on_event(events.append)

        session.handle_command("ne")

        assert "minimap-update" not in [e.type for e in events]

    def test_callback_errors_are_logged(self, session, caplog):
        def broken(event):
            raise RuntimeError("boom")

        session.on_event(broken)

        with caplog.at_level(logging.ERROR, logger="muddy.game_session"):
            messages = session.handle_command("n")

        assert messages[0] == "**Temple**"
        assert "boom" in caplog.text

    def test_start_messages(self, session):
        messages = session.start_messages()

        assert messages[:3] == list(WELCOME_TEXT)
        assert messages[3] == "**Square**"


class TestWordWrap:
    """Tests for the word-wrap setting."""

    def test_wrap_applied(self, town):
        session = GameSession.from_world(town, settings=Settings(word_wrap_length=10))

        messages = session.handle_command("look")

        assert messages[1] == "Square\ndescription."

    def test_wrap_disabled(self, session):
        long_line = "word " * 50

        assert session.present(long_line) == long_line

    def test_update_settings(self, session):
        events = []
        session.on_event(events.append)

        updated = session.update_settings(word_wrap_enabled=True, word_wrap_length=12)

        assert updated == Settings(word_wrap_enabled=True, word_wrap_length=12)
        assert session.settings == updated
        assert events[-1].type == "settings-change"
        assert events[-1].data == {"word_wrap_enabled": True, "word_wrap_length": 12}

    def test_update_returns_copy(self, session):
        updated = session.update_settings(word_wrap_length=50)
        updated.word_wrap_length = 5

        assert session.settings.word_wrap_length == 50

    def test_invalid_length_rejected(self, session):
        with pytest.raises(ValueError):
            session.update_settings(word_wrap_length=0)

        assert session.settings.word_wrap_length == 100

    def test_settings_persisted(self, town, tmp_path):
        path = tmp_path / "settings.json"
        session = GameSession.from_world(town, settings_path=str(path))

        session.update_settings(word_wrap_enabled=False)

        assert json.loads(path.read_text())["word_wrap_enabled"] is False
        assert Settings.load_from_path(path).word_wrap_enabled is False


class TestSessionState:
    """Tests for reset, minimap and state queries."""

    def test_reset(self, session):
        events = []
        session.handle_command("s")
        session.on_event(events.append)

        assert session.reset() == Location("town", 0)
        assert session.location == Location("town", 0)
        assert events[-1].type == "minimap-update"

    def test_minimap_follows_player(self, session):
        session.handle_command("n")

        nodes = session.minimap(1)

        assert nodes[0].room_key == "town:1"
        assert nodes[0].is_origin

    def test_minimap_default_distance(self, town):
        session = GameSession.from_world(town, minimap_distance=0)

        assert len(session.minimap()) == 1

    def test_negative_minimap_distance_rejected(self, town):
        with pytest.raises(ValueError):
            GameSession.from_world(town, minimap_distance=-1)

    def test_get_settings_returns_copy(self, session):
        settings = session.get_settings()
        settings.word_wrap_length = 5

        assert session.get_settings() == Settings(word_wrap_enabled=False, word_wrap_length=100)

    def test_get_state(self, session):
        state = session.get_state()

        assert state["location"] == "town:0"
        assert state["room"] == "Square"
        assert state["exits"] == ["east", "north", "south", "up", "west"]
        assert state["settings"] == {"word_wrap_enabled": False, "word_wrap_length": 100}
        assert state["minimap_distance"] == 2


class TestContent:
    """Tests for loading content directories."""

    def test_packaged_content(self):
        world = load_world_from_dir()

        assert len(world.graph) == 11
        assert world.start == Location("millhaven", 0)
        assert world.graph.find_dangling_exits() == []

    def test_packaged_content_walk(self):
        """Test walking from the square out along the old road."""
        session = GameSession.from_world(load_world_from_dir())

        for command in ["s", "s", "s", "e", "enter"]:
            session.handle_command(command)

        assert session.location == Location("old_road", 3)
        assert session.get_state()["room"] == "Mill Cellar"

    def test_missing_zone_file_is_skipped(self, tmp_path, caplog):
        (tmp_path / "zones.json").write_text(zones_document(["town", "caves"], "town"))
        (tmp_path / "town.json").write_text(json.dumps([room(0, "Square")]))

        with caplog.at_level(logging.WARNING, logger="muddy.content"):
            zones_json, zone_files = read_content_dir(tmp_path)

        assert list(zone_files) == ["town.json"]
        assert "caves.json" in caplog.text
        assert len(load_world_from_dir(tmp_path).graph) == 1

    def test_missing_zones_file(self, tmp_path):
        with pytest.raises(OSError):
            load_world_from_dir(tmp_path)

    def test_session_from_config(self, tmp_path):
        settings_path = tmp_path / "settings.json"
        Settings(word_wrap_length=40).save_to_path(settings_path)

        session = GameSession.from_config(SessionConfig(
            content_dir=str(DEFAULT_CONTENT_DIR),
            settings_path=str(settings_path),
            minimap_distance=1,
        ))

        assert session.location == Location("millhaven", 0)
        assert session.settings.word_wrap_length == 40
        assert session.minimap_distance == 1

    def test_config_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("MUDDY_CONTENT_DIR", str(tmp_path))
        monkeypatch.setenv("MUDDY_SETTINGS_PATH", "prefs.json")
        monkeypatch.setenv("MUDDY_MINIMAP_DISTANCE", "3")

        config = SessionConfig.from_env()

        assert config.content_dir == str(tmp_path)
        assert config.settings_path == "prefs.json"
        assert config.minimap_distance == 3

    def test_config_rejects_negative_distance(self):
        with pytest.raises(ValueError):
            SessionConfig(minimap_distance=-1)

    def test_env_rejects_negative_distance(self, monkeypatch):
        monkeypatch.setenv("MUDDY_MINIMAP_DISTANCE", "-1")

        with pytest.raises(ValueError):
            SessionConfig.from_env()

    def test_config_defaults(self, monkeypatch):
        for name in ("MUDDY_CONTENT_DIR", "MUDDY_SETTINGS_PATH", "MUDDY_MINIMAP_DISTANCE"):
            monkeypatch.delenv(name, raising=False)

        assert SessionConfig.from_env() == SessionConfig()
