"""Shared data models for liveuamap_news."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class Feed:
    """Newest entry of the listing page."""

    id: str
    info: str
    extra: Optional[str] = None
    video: Optional[str] = None
    image: Optional[str] = None


@dataclass
class Article(Feed):
    """Feed enriched with the source link from its detail page."""

    source: Optional[str] = None

    @classmethod
    def from_feed(cls, feed: Feed, source: Optional[str]) -> "Article":
        return cls(
            id=feed.id,
            info=feed.info,
            extra=feed.extra,
            video=feed.video,
            image=feed.image,
            source=source,
        )


@dataclass
class PersistedState:
    """Dedup state and display options read from the config document."""

    url: Optional[str] = None
    last_id: Optional[str] = None
    known_titles: Optional[List[str]] = None
    embed_image: bool = True

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "PersistedState":
        titles = document.get("knownTitles")
        embed_image = document.get("embedImage")
        return cls(
            url=document.get("url"),
            last_id=document.get("lastId"),
            known_titles=list(titles) if isinstance(titles, list) else None,
            embed_image=True if embed_image is None else bool(embed_image),
        )
