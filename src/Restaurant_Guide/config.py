"""Application settings: JSON file persistence with environment overrides.

The connection string is the only setting that selects behavior. It is read
from ``data/settings.json`` (``{"connection_string": "..."}``) and can be
overridden with ``RESTAURANT_GUIDE_CONNECTION_STRING``.
"""

import json
import logging
import os
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)

SETTINGS_PATH: Final[Path] = Path("data/settings.json")
CONNECTION_STRING_ENV: Final[str] = "RESTAURANT_GUIDE_CONNECTION_STRING"
DEFAULT_CONNECTION_STRING: Final[str] = "sqlite:///data/restaurants.db"


class Settings(BaseModel):
    """Resolved application settings."""

    model_config = ConfigDict(frozen=True)

    connection_string: str = DEFAULT_CONNECTION_STRING


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from JSON, falling back to defaults, then apply env overrides."""
    settings_path = path or SETTINGS_PATH
    settings = Settings()
    if settings_path.exists():
        try:
            settings = Settings.model_validate_json(settings_path.read_text(encoding="utf-8"))
        except (ValidationError, OSError):
            logger.warning("Failed to read settings file %s, using defaults", settings_path)

    override = os.environ.get(CONNECTION_STRING_ENV)
    if override:
        settings = settings.model_copy(update={"connection_string": override})
    return settings


def save_settings(settings: Settings, path: Path | None = None) -> None:
    """Persist settings to JSON, creating parent directories if needed."""
    settings_path = path or SETTINGS_PATH
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    settings_path.write_text(json.dumps(settings.model_dump(), indent=2), encoding="utf-8")
    logger.info("Settings saved to %s", settings_path)
