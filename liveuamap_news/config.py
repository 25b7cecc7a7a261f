"""Configuration loading for the news poller."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .feeds import LISTING_URL

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """The config document cannot be used to start the poller."""


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class AppConfig:
    config_file: str
    webhook_url: str
    listing_url: str = LISTING_URL
    timeout: Optional[float] = None
    database: Optional[str] = None
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _resolve_path(base_path: Path, target_path: str) -> str:
    """Resolve a path relative to the base config file if it's not absolute."""
    target = Path(target_path)
    if target.is_absolute():
        return str(target)
    return str((base_path.parent / target).resolve())


def parse_app_config(path: str) -> AppConfig:
    """Parse the JSON config document and validate the startup settings."""
    config_path = Path(path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    logger.info("Loading application configuration from %s", config_path)
    try:
        document = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file is not valid JSON: {config_path}") from exc

    if not isinstance(document, dict):
        raise ConfigError("Config file must contain a JSON object.")

    url = document.get("url")
    if not isinstance(url, str) or not url.strip():
        raise ConfigError(
            "No Discord webhook URL was provided in the config file's 'url' field."
        )

    listing_url = document.get("listingUrl") or LISTING_URL

    timeout = document.get("timeout")
    if timeout is not None:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid 'timeout' value: {timeout!r}") from exc
        if timeout <= 0:
            raise ConfigError("'timeout' must be positive.")

    database = document.get("database")
    if database is not None and not isinstance(database, str):
        raise ConfigError("'database' must be a connection string.")

    logging_config = LoggingConfig()
    log_node = document.get("logging")
    if isinstance(log_node, dict):
        logging_config.level = log_node.get("level") or "INFO"
        log_file = log_node.get("file")
        if log_file:
            logging_config.file = _resolve_path(config_path, log_file)

    return AppConfig(
        config_file=str(config_path),
        webhook_url=url.strip(),
        listing_url=listing_url,
        timeout=timeout,
        database=database or None,
        logging=logging_config,
    )
