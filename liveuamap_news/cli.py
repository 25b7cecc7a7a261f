"""Command-line interface for the liveuamap_news poller."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import parse_app_config
from .db import SqlStateStore
from .runner import Poller
from .state import JsonStateStore
from .webhook import WebhookSender

logger = logging.getLogger(__name__)

LEVEL_SYMBOLS = {
    logging.DEBUG: "?",
    logging.INFO: "+",
    logging.WARNING: "!",
    logging.ERROR: "!",
    logging.CRITICAL: "!",
}


class SymbolFormatter(logging.Formatter):
    """Prefix records with a ``[+]``-style severity tag."""

    def format(self, record: logging.LogRecord) -> str:
        symbol = getattr(record, "symbol", None) or LEVEL_SYMBOLS.get(
            record.levelno, "?"
        )
        record.tag = f"[{symbol}]"
        return super().format(record)


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Relay new liveuamap.com articles to a Discord webhook."
    )
    parser.add_argument(
        "--config",
        default="config.json",
        help="Path to the JSON config document (also stores dedup state).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (e.g. DEBUG, INFO, WARNING). Overrides config.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Optional path to a log file. Overrides config.",
    )
    parser.add_argument(
        "--listing-url",
        default=None,
        help="Listing page to poll. Overrides config.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single polling cycle and exit.",
    )
    return parser


def configure_logging(level_name: str, log_file: Optional[str] = None) -> None:
    """Initialise logging according to options."""
    log_level = getattr(logging, level_name.upper(), None)
    if not isinstance(log_level, int):
        raise ValueError(f"Unsupported log level: {level_name}")

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(log_level)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(SymbolFormatter("%(tag)s %(message)s"))
    root_logger.addHandler(stream_handler)

    if log_file:
        log_path = Path(log_file)
        if log_path.parent and not log_path.parent.exists():
            log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(
            SymbolFormatter("%(asctime)s %(levelname)s %(name)s: %(tag)s %(message)s")
        )
        root_logger.addHandler(file_handler)
        logger.debug(
            "Logger initialised with level %s and file output to %s",
            level_name.upper(),
            log_path,
        )
    else:
        logger.debug(
            "Logger initialised with console output at level %s", level_name.upper()
        )


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app_config = parse_app_config(args.config)

        log_level = args.log_level or app_config.logging.level
        log_file = args.log_file or app_config.logging.file
        configure_logging(log_level, log_file)

        sender = WebhookSender(app_config.webhook_url, timeout=app_config.timeout)
        config_store = JsonStateStore(app_config.config_file)
        state_store = config_store
        if app_config.database:
            state_store = SqlStateStore.from_url(app_config.database)

        poller = Poller(
            sender=sender,
            state_store=state_store,
            config_store=config_store,
            listing_url=args.listing_url or app_config.listing_url,
            timeout=app_config.timeout,
        )
        logger.info("Polling %s", poller.listing_url)
        poller.run(max_cycles=1 if args.once else None)
    except ValueError as exc:
        parser.error(str(exc))
    except (RuntimeError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping.", extra={"symbol": "-"})
        return 0

    return 0


if __name__ == "__main__":
    sys.exit(main())
