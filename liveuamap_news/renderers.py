"""Rendering of webhook embeds for new articles."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

from .models import Article
from .templating import get_environment

EMBED_COLOR = 0xF1C40F
AUTHOR_NAME = "New update about Ukraine"
AUTHOR_URL = "https://github.com/VoltrexMaster/liveuamap-news"
THUMBNAIL_URL = "https://cdn.discordapp.com/emojis/691373958087442486.png"
EASTERN = ZoneInfo("America/New_York")
UKRAINE_OFFSET = timedelta(hours=2)


def format_locale_time(value: datetime) -> str:
    """Format like ``10/18/2026, 3:04:05 PM``."""
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return (
        f"{value.month}/{value.day}/{value.year}, "
        f"{hour}:{value.minute:02d}:{value.second:02d} {meridiem}"
    )


def build_description(article: Article) -> str:
    template = get_environment().get_template("description.md.j2")
    return template.render(
        source=article.source, info=article.info, video=article.video
    ).strip()


def build_timezones(now: datetime) -> str:
    """Render the notification time for the US, Ukraine and Discord clients."""
    template = get_environment().get_template("timezones.md.j2")
    ukraine = now.astimezone(timezone.utc).replace(tzinfo=None) + UKRAINE_OFFSET
    return template.render(
        eastern=format_locale_time(now.astimezone(EASTERN)),
        ukraine=format_locale_time(ukraine),
        timestamp=int(now.timestamp()),
    )


def build_embed(
    article: Article, embed_image: bool = True, now: Optional[datetime] = None
) -> Dict[str, Any]:
    """Build the Discord embed announcing ``article``."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    embed: Dict[str, Any] = {
        "color": EMBED_COLOR,
        "thumbnail": {"url": THUMBNAIL_URL},
        "author": {"name": AUTHOR_NAME, "url": AUTHOR_URL},
        "description": build_description(article),
        "fields": [{"name": "Timezones", "value": build_timezones(now)}],
    }

    if article.image is not None and embed_image:
        embed["image"] = {"url": article.image}

    return embed
