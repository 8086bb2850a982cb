"""
Display settings, persisted as JSON.
"""

import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """User display settings."""
    word_wrap_enabled: bool = True
    word_wrap_length: int = 100

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Build settings from a dict; missing keys take defaults, wrong types raise TypeError."""
        defaults = cls()
        enabled = data.get("word_wrap_enabled", defaults.word_wrap_enabled)
        length = data.get("word_wrap_length", defaults.word_wrap_length)

        if not isinstance(enabled, bool):
            raise TypeError(f"word_wrap_enabled must be true or false, got {enabled!r}")
        # bool is an int subclass
        if isinstance(length, bool) or not isinstance(length, int):
            raise TypeError(f"word_wrap_length must be an integer, got {length!r}")

        return cls(word_wrap_enabled=enabled, word_wrap_length=length)

    @classmethod
    def load_from_path(cls, path: str | Path) -> "Settings":
        """Load settings, falling back to defaults if the file is missing or unreadable."""
        path = Path(path)

        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = json.load(f)
            settings = cls.from_dict(data)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable settings file {path}: {e}")
            return cls()

        if settings.word_wrap_length < 1:
            logger.warning(f"Ignoring invalid wrap length {settings.word_wrap_length} in {path}")
            settings.word_wrap_length = cls().word_wrap_length

        return settings

    def save_to_path(self, path: str | Path) -> None:
        """Save settings to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

        logger.info(f"Saved settings to {path}")
