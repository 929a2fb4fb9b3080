"""Application configuration management."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from xivchat.constants import CHATLOG_ARRAY_SIZE, ENTITY_ARRAY_SIZE, PARTY_MEMBER_ARRAY_SIZE

logger = logging.getLogger(__name__)

CONFIG_FILE = "xivchat.json"

# Environment overrides (also read from .env by the CLI)
ENV_DUMP_PATH = "XIVCHAT_DUMP_PATH"
ENV_LOG_LEVEL = "XIVCHAT_LOG_LEVEL"


@dataclass
class AppConfig:
    """Application settings."""

    # Input
    dump_path: str = "chatlog.dump"
    poll_interval: float = 1.0
    history_records: int = 50

    # Output
    show_raw: bool = False

    # Logging
    log_level: str = "INFO"

    # Sizes of the game's memory tables. chatlog_capacity also bounds watch
    # history; the entity and party sizes are only read by the external
    # memory reader that shares this file.
    chatlog_capacity: int = CHATLOG_ARRAY_SIZE
    entity_capacity: int = ENTITY_ARRAY_SIZE
    party_capacity: int = PARTY_MEMBER_ARRAY_SIZE

    def save(self, path: str = CONFIG_FILE) -> None:
        """Save config to JSON file."""
        Path(path).write_text(
            json.dumps(asdict(self), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

    @classmethod
    def load(cls, path: str = CONFIG_FILE) -> AppConfig:
        """Load config from JSON file, using defaults for missing fields."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except FileNotFoundError:
            return cls()
        except json.JSONDecodeError as e:
            logger.warning("Ignoring corrupt config %s: %s", path, e)
            return cls()
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: not a JSON object", path)
            return cls()
        known = {f.name for f in fields(cls)}
        defaults = asdict(cls())
        defaults.update({k: v for k, v in data.items() if k in known})
        return cls(**defaults)

    def apply_env(self) -> None:
        """Override settings from environment variables."""
        dump_path = os.environ.get(ENV_DUMP_PATH)
        if dump_path:
            self.dump_path = dump_path
        log_level = os.environ.get(ENV_LOG_LEVEL)
        if log_level:
            self.log_level = log_level.upper()
