"""Detail page processing."""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup

from .models import Article, Feed

logger = logging.getLogger(__name__)


def extract_article(feed: Feed, root: BeautifulSoup) -> Article:
    """Combine ``feed`` with the source link found on its detail page."""
    link = root.select_one('a[class="source-link"]')
    source = link.get("href") if link is not None else None

    if not source:
        logger.info("No source link found for entry %s", feed.id)
        source = None

    return Article.from_feed(feed, source)
