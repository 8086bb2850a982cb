"""
Terminal Client - Plays Muddy Rogue in the terminal.

Supports local commands (prefixed with /) that are handled by the client;
everything else is passed to the game session.
"""

import os
import re
import logging
from typing import Optional, Callable
from dataclasses import dataclass

from dotenv import load_dotenv

# Rich for terminal output
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.markup import escape
from rich import box

from .content import DEFAULT_CONTENT_DIR
from .errors import MalformedContent
from .game_session import GameSession, SessionConfig, SessionEvent
from .minimap import render_minimap

logger = logging.getLogger(__name__)

_EMPHASIS = re.compile(r"\*\*(.+?)\*\*")


@dataclass
class AppConfig:
    """Terminal app configuration."""
    content_dir: str = str(DEFAULT_CONTENT_DIR)
    settings_path: str = ""
    minimap_distance: int = 2
    show_minimap: bool = True

    def session_config(self) -> SessionConfig:
        return SessionConfig(
            content_dir=self.content_dir,
            settings_path=self.settings_path,
            minimap_distance=self.minimap_distance,
        )


def to_markup(message: str) -> str:
    """Turn **emphasis** in game text into rich markup."""
    return _EMPHASIS.sub(lambda m: f"[bold]{m.group(1)}[/bold]", escape(message))


class TerminalApp:
    """
    Terminal client for Muddy Rogue.

    Features:
    - Game commands typed directly (n, s, look, help, ...)
    - Local commands with / prefix
    - Minimap redrawn after every move
    - Word-wrap settings saved between runs
    """

    COLORS = {
        "primary": "#D4A574",
        "secondary": "#8B7355",
        "accent": "#C19A6B",
        "success": "#9CAF88",
        "warning": "#DAA520",
        "error": "#CD5C5C",
        "info": "#87CEEB",
        "muted": "#696969",
        "command": "#98D8C8",
        "player": "#9CAF88",
    }

    BANNER = r"""
[#D4A574]
  ╔╦╗╦ ╦╔╦╗╔╦╗╦ ╦  ╦═╗╔═╗╔═╗╦ ╦╔═╗
  ║║║║ ║ ║║ ║║╚╦╝  ╠╦╝║ ║║ ╦║ ║║╣
  ╩ ╩╚═╝═╩╝═╩╝ ╩   ╩╚═╚═╝╚═╝╚═╝╚═╝
[/]"""

    def __init__(self, session: GameSession, config: Optional[AppConfig] = None):
        self.config = config or AppConfig()
        self.session = session
        self.console = Console(highlight=False)

        self._running = False
        self._history: list[str] = []
        self._minimap_stale = False

        self.session.on_event(self._on_session_event)
        self._local_commands = self._register_commands()

    @classmethod
    def from_config(cls, config: AppConfig) -> "TerminalApp":
        return cls(GameSession.from_config(config.session_config()), config)

    def _register_commands(self) -> dict[str, Callable[[list[str]], None]]:
        """Register local / commands."""
        return {
            "help": self._cmd_help,
            "h": self._cmd_help,
            "?": self._cmd_help,
            "map": self._cmd_map,
            "minimap": self._cmd_minimap,
            "settings": self._cmd_settings,
            "set": self._cmd_set,
            "stats": self._cmd_stats,
            "validate": self._cmd_validate,
            "reset": self._cmd_reset,
            "history": self._cmd_history,
            "clear": self._cmd_clear,
            "cls": self._cmd_clear,
            "quit": self._cmd_quit,
            "exit": self._cmd_quit,
            "q": self._cmd_quit,
        }

    # ==================== Output ====================

    def _print_banner(self) -> None:
        self.console.print(self.BANNER)

    def _print_game(self, messages: list[str]) -> None:
        for message in messages:
            self.console.print(to_markup(message))

    def _print_error(self, message: str) -> None:
        self.console.print(f"[{self.COLORS['error']}]✗ {escape(message)}[/]")

    def _print_success(self, message: str) -> None:
        self.console.print(f"[{self.COLORS['success']}]✓ {escape(message)}[/]")

    def _print_info(self, message: str) -> None:
        self.console.print(f"[{self.COLORS['info']}]ℹ {escape(message)}[/]")

    def _print_minimap(self) -> None:
        rows = render_minimap(self.session.minimap())
        if not rows:
            self._print_info("Nothing to map here.")
            return

        body = "\n".join(
            escape(row).replace("@", f"[bold {self.COLORS['player']}]@[/]") for row in rows
        )
        self.console.print(Panel(
            body,
            title="[bold]Map[/bold]",
            border_style=self.COLORS["secondary"],
            box=box.ROUNDED,
            expand=False,
        ))

    def _print_help(self) -> None:
        table = Table(
            title="[bold]Local Commands[/bold]",
            box=box.ROUNDED,
            border_style=self.COLORS["secondary"],
            title_style=self.COLORS["primary"],
        )

        table.add_column("Command", style=self.COLORS["command"])
        table.add_column("Description", style="white")

        commands = [
            ("/help, /h, /?", "Show this help message"),
            ("/map", "Show the map around you"),
            ("/minimap <on|off>", "Redraw the map after every move"),
            ("/settings", "Show display settings"),
            ("/set wrap <on|off>", "Toggle word wrap"),
            ("/set wrap_length <n>", "Set word wrap length"),
            ("/stats", "Show world statistics"),
            ("/validate", "List exits that lead nowhere"),
            ("/reset", "Return to the starting room"),
            ("/history", "Show command history"),
            ("/clear, /cls", "Clear the screen"),
            ("/quit, /exit, /q", "Exit the game"),
        ]

        for cmd, desc in commands:
            table.add_row(escape(cmd), desc)

        self.console.print(table)
        self.console.print(
            f"[{self.COLORS['muted']}]Tip: Any input not starting with / is a game command (try 'help')[/]"
        )

    # ==================== Session Events ====================

    def _on_session_event(self, event: SessionEvent) -> None:
        if event.type == "minimap-update":
            self._minimap_stale = True

    def _refresh_minimap(self) -> None:
        """Redraw the map if the player moved since it was last drawn."""
        if self._minimap_stale and self.config.show_minimap:
            self._print_minimap()
        self._minimap_stale = False

    # ==================== Local Command Handlers ====================

    def _cmd_help(self, args: list[str]) -> None:
        self._print_help()

    def _cmd_map(self, args: list[str]) -> None:
        self._print_minimap()

    def _cmd_minimap(self, args: list[str]) -> None:
        """Toggle the automatic minimap."""
        if args and args[0].lower() in ("on", "off"):
            self.config.show_minimap = args[0].lower() == "on"
        else:
            self.config.show_minimap = not self.config.show_minimap
        self._print_success(f"Minimap {'on' if self.config.show_minimap else 'off'}")

    def _cmd_settings(self, args: list[str]) -> None:
        """Show display settings."""
        settings = self.session.get_settings()

        table = Table(
            title="[bold]Settings[/bold]",
            box=box.ROUNDED,
            border_style=self.COLORS["secondary"],
        )

        table.add_column("Setting", style=self.COLORS["accent"])
        table.add_column("Value", style="white")

        table.add_row("wrap", "on" if settings.word_wrap_enabled else "off")
        table.add_row("wrap_length", str(settings.word_wrap_length))
        table.add_row("minimap", "on" if self.config.show_minimap else "off")
        table.add_row("settings file", escape(self.session.settings_path) or "[dim]not saved[/]")

        self.console.print(table)

    def _cmd_set(self, args: list[str]) -> None:
        """Set a display setting."""
        if len(args) < 2:
            self._print_error("Usage: /set <wrap|wrap_length> <value>")
            return

        key, value = args[0].lower(), args[1].lower()

        if key == "wrap":
            if value not in ("on", "off"):
                self._print_error("Usage: /set wrap <on|off>")
                return
            self.session.update_settings(word_wrap_enabled=value == "on")
        elif key == "wrap_length":
            try:
                self.session.update_settings(word_wrap_length=int(value))
            except ValueError:
                self._print_error("Wrap length must be a positive number")
                return
        else:
            self._print_error(f"Unknown setting: {key}")
            return

        self._print_success(f"Set {key} = {value}")

    def _cmd_stats(self, args: list[str]) -> None:
        """Show world statistics."""
        stats = self.session.graph.get_stats()

        table = Table(
            title="[bold]World[/bold]",
            box=box.ROUNDED,
            border_style=self.COLORS["secondary"],
        )

        table.add_column("Zone", style=self.COLORS["primary"])
        table.add_column("Rooms", style="white")

        for zone, count in stats["zones"].items():
            table.add_row(escape(zone), str(count))

        self.console.print(table)
        self._print_info(
            f"{stats['total_rooms']} rooms, {stats['total_exits']} exits. "
            f"You are at {self.session.location}."
        )

    def _cmd_validate(self, args: list[str]) -> None:
        """List exits whose destination is missing."""
        dangling = self.session.graph.find_dangling_exits()
        if not dangling:
            self._print_success("Every exit leads to a loaded room.")
            return

        for source, direction, destination in dangling:
            self._print_error(f"{source} --{direction}--> {destination} (missing)")

    def _cmd_reset(self, args: list[str]) -> None:
        location = self.session.reset()
        self._print_success(f"Returned to {location}")
        self._print_game(self.session.look())

    def _cmd_history(self, args: list[str]) -> None:
        if not self._history:
            self._print_info("No command history.")
            return

        self.console.print("[bold]Command History[/bold] (last 20)")
        for i, cmd in enumerate(self._history[-20:], 1):
            self.console.print(f"  [{self.COLORS['muted']}]{i:3}[/] {escape(cmd)}")

    def _cmd_clear(self, args: list[str]) -> None:
        self.console.clear()

    def _cmd_quit(self, args: list[str]) -> None:
        self._running = False

    # ==================== Input ====================

    def _handle_input(self, user_input: str) -> None:
        """Handle one line of user input."""
        user_input = user_input.strip()
        if not user_input:
            return

        self._history.append(user_input)

        if user_input.startswith("/"):
            parts = user_input[1:].split()
            cmd_name = parts[0].lower() if parts else ""
            args = parts[1:]

            if cmd_name in self._local_commands:
                self._local_commands[cmd_name](args)
            else:
                self._print_error(f"Unknown command: /{cmd_name}. Use /help")
        else:
            self._print_game(self.session.handle_command(user_input))

        self._refresh_minimap()

    def run(self) -> None:
        """Main application loop."""
        self._running = True

        self._print_banner()
        self._print_game(self.session.start_messages())
        if self.config.show_minimap:
            self._print_minimap()

        while self._running:
            try:
                user_input = self.console.input(f"[{self.COLORS['primary']}]❯[/] ")
                self._handle_input(user_input)
            except KeyboardInterrupt:
                self.console.print()
                self._print_info("Use /quit to exit")
            except EOFError:
                break


def main():
    """Entry point for the terminal client."""
    import argparse

    load_dotenv()

    # Log to file only (keep terminal clean)
    logging.basicConfig(
        level=os.getenv("MUDDY_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.FileHandler(os.getenv("MUDDY_LOG_FILE", "muddy.log"), mode="a")],
    )

    try:
        env = SessionConfig.from_env()
    except ValueError as e:
        logger.error(f"Invalid environment configuration: {e}")
        Console().print(f"[red]Invalid configuration: {escape(str(e))}[/]")
        raise SystemExit(2)

    parser = argparse.ArgumentParser(description="Muddy Rogue terminal client")
    parser.add_argument("--content", default=env.content_dir, help="Content directory with zones.json")
    parser.add_argument("--settings", default=env.settings_path, help="Path to the settings JSON file")
    parser.add_argument("--distance", type=int, default=env.minimap_distance,
                        help="Minimap radius in rooms")
    parser.add_argument("--no-minimap", action="store_true", help="Do not redraw the map after moves")

    args = parser.parse_args()

    if args.distance < 0:
        parser.error("--distance must not be negative")

    config = AppConfig(
        content_dir=args.content,
        settings_path=args.settings,
        minimap_distance=args.distance,
        show_minimap=not args.no_minimap,
    )

    try:
        app = TerminalApp.from_config(config)
    except (MalformedContent, OSError) as e:
        logger.error(f"Failed to load content from {config.content_dir}: {e}")
        Console().print(f"[red]Could not load game content: {escape(str(e))}[/]")
        raise SystemExit(1)

    app.run()


if __name__ == "__main__":
    main()
