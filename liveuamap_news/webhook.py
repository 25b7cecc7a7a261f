"""Delivery of embeds to a chat webhook."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import requests

logger = logging.getLogger(__name__)


class WebhookSender:
    """Posts embeds to a Discord-compatible webhook endpoint."""

    def __init__(self, url: str, timeout: Optional[float] = None):
        if not isinstance(url, str):
            raise ValueError("Webhook URL must be a string.")
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Invalid webhook URL: {url!r}")

        self.url = url
        self.timeout = timeout

    def send(self, embed: Dict[str, Any]) -> None:
        """Deliver a single embed; errors propagate to the caller."""
        response = requests.post(
            self.url, json={"embeds": [embed]}, timeout=self.timeout
        )
        response.raise_for_status()
        logger.debug("Webhook accepted embed (status %s)", response.status_code)
