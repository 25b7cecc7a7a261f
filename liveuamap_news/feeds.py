"""Listing page retrieval and parsing helpers."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup, Tag

from .models import Feed

logger = logging.getLogger(__name__)

LISTING_URL = "https://liveuamap.com/"


class ExtractionError(ValueError):
    """Raised when fetched markup lacks a field the poller cannot do without."""


class EmptyListingError(ExtractionError):
    """The listing container is missing or has no entries.

    The site returns such pages while it is failing upstream, so callers
    retry quickly instead of treating it as a regular failure.
    """


def fetch_page(url: str, timeout: Optional[float] = None) -> str:
    """Download ``url`` and return the response body as text."""
    logger.debug("Fetching %s", url)
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.text


def parse_markup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _attr(node: Optional[Tag], name: str) -> Optional[str]:
    if node is None:
        return None
    value = node.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value


def _latest_entry(root: BeautifulSoup) -> Tag:
    container = root.select_one('div[id="feedler"]')
    if container is None:
        raise EmptyListingError("Listing container 'feedler' not found.")

    entry = container.find(True, recursive=False)
    if entry is None:
        raise EmptyListingError("Listing container 'feedler' has no entries.")
    return entry


def _extract_video(entry: Tag) -> Optional[str]:
    direct = _attr(entry, "data-twitpic")
    if direct and "video" in direct:
        return direct

    block = entry.select_one('blockquote[class="twitter-video"]')
    if block is None:
        return None
    return _attr(block.find("a"), "href") or None


def extract_feed(root: BeautifulSoup, base_url: str = LISTING_URL) -> Feed:
    """Build a Feed from the first entry of the parsed listing page.

    Relative detail links are resolved against ``base_url``.
    """
    entry = _latest_entry(root)

    feed_id = _attr(entry, "data-id")
    if not feed_id:
        raise ExtractionError("Latest listing entry has no 'data-id' attribute.")

    title = entry.select_one('div[class="title"]')
    info = title.get_text() if title is not None else ""

    extra = None
    for link in entry.select('a[class="comment-link"]'):
        if _attr(link, "data-id") == feed_id:
            href = _attr(link, "href")
            extra = urljoin(base_url, href) if href else None
            break

    image_holder = entry.select_one('div[class="img"]')
    image = None
    if image_holder is not None:
        image = _attr(image_holder.find("img"), "src")

    feed = Feed(
        id=feed_id,
        info=info,
        extra=extra,
        video=_extract_video(entry),
        image=image,
    )
    logger.debug("Extracted feed entry %s (extra=%s)", feed.id, feed.extra)
    return feed
