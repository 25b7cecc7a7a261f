"""Deciding whether the observed entry has already been announced."""

from __future__ import annotations

from typing import Iterable, List, Optional

from .models import Feed, PersistedState

KNOWN_TITLES_LIMIT = 30


def is_new_article(feed: Feed, state: PersistedState) -> bool:
    """Return True when neither the id nor the headline were seen before.

    Ids are not stable on the site, so recently announced headlines are kept
    as a second fingerprint.
    """
    if state.last_id is not None and feed.id == state.last_id:
        return False
    if state.known_titles is not None and feed.info in state.known_titles:
        return False
    return True


def remember_title(
    titles: Optional[Iterable[str]], title: str, limit: int = KNOWN_TITLES_LIMIT
) -> List[str]:
    """Append ``title`` and drop the oldest entries beyond ``limit``."""
    updated = list(titles or [])
    updated.append(title)
    if len(updated) > limit:
        updated = updated[-limit:]
    return updated
