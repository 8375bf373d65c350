"""Configuration loading for TradeJournal.

Settings live in ``config.toml`` under ``~/.config/tradejournal`` (or the
directory named by ``TRADEJOURNAL_HOME``).
"""

import logging
import os
from pathlib import Path
from typing import Optional

import toml
from pydantic import BaseModel, Field

from tradejournal.exceptions import ConfigError

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "TRADEJOURNAL_HOME"
CONFIG_FILENAME = "config.toml"
DB_FILENAME = "journal.db"


class JournalSettings(BaseModel):
    """Owner-level settings."""

    owner_id: str = Field(default="default", min_length=1, description="Journal owner")
    auto_calculate_profit: bool = Field(
        default=True, description="Compute profit from prices instead of manual entry"
    )
    currency_symbol: str = Field(default="$", description="Symbol used when printing money")
    db_path: Optional[Path] = Field(default=None, description="SQLite database path")

    model_config = {"frozen": True}


def get_config_dir() -> Path:
    """Directory holding the config file and default database."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "tradejournal"


def get_config_path() -> Path:
    return get_config_dir() / CONFIG_FILENAME


def load_settings(config_path: Optional[Path] = None) -> JournalSettings:
    """Load settings from the TOML config file.

    Args:
        config_path: Explicit config file. Defaults to :func:`get_config_path`.

    Returns:
        JournalSettings; defaults when the file does not exist.

    Raises:
        ConfigError: If the file exists but cannot be parsed.
    """
    config_path = config_path or get_config_path()
    if not config_path.exists():
        logger.debug("No config at %s, using defaults", config_path)
        return JournalSettings()

    try:
        data = toml.load(config_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"Could not read {config_path}: {e}") from e

    journal = data.get("journal", {})
    try:
        return JournalSettings(**journal)
    except ValueError as e:
        raise ConfigError(f"Invalid [journal] settings in {config_path}: {e}") from e


def create_template_config(config_path: Optional[Path] = None) -> Path:
    """Write a template config file and return its path."""
    config_path = config_path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    template = {
        "journal": {
            "owner_id": "default",
            "auto_calculate_profit": True,
            "currency_symbol": "$",
        },
    }

    with open(config_path, "w") as f:
        toml.dump(template, f)

    logger.info("Wrote template config to %s", config_path)
    return config_path


def get_db_path(settings: JournalSettings) -> Path:
    """Database path from settings, defaulting to the config directory."""
    if settings.db_path is not None:
        return settings.db_path.expanduser()
    return get_config_dir() / DB_FILENAME


def get_data_store(settings: JournalSettings):
    """Open the data store configured by ``settings``."""
    from tradejournal.db.store import DataStore

    return DataStore(get_db_path(settings))
