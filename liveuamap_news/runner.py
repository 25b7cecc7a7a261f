"""Polling loop that turns new listing entries into webhook notifications."""

from __future__ import annotations

import enum
import logging
import random
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from .articles import extract_article
from .dedup import is_new_article, remember_title
from .feeds import (
    LISTING_URL,
    EmptyListingError,
    ExtractionError,
    extract_feed,
    fetch_page,
    parse_markup,
)
from .models import PersistedState
from .renderers import build_embed
from .state import StateStore
from .webhook import WebhookSender

logger = logging.getLogger(__name__)


class LoopState(enum.Enum):
    FETCH_LISTING = "fetch_listing"
    RETRY_DELAY = "retry_delay"
    EXTRACT_FEED = "extract_feed"
    DEDUP_CHECK = "dedup_check"
    FETCH_DETAIL = "fetch_detail"
    EXTRACT_ARTICLE = "extract_article"
    FORMAT = "format"
    SEND = "send"
    PERSIST = "persist"
    SKIP = "skip"
    SLEEP = "sleep"


class CycleOutcome(enum.Enum):
    NOTIFIED = "notified"
    NO_NEWS = "no_news"
    EMPTY_LISTING = "empty_listing"
    FAILED = "failed"


@dataclass
class RetryPolicy:
    """Delay table: a fixed short wait for empty listings, jitter otherwise."""

    min_delay: int = 45
    max_delay: int = 75
    empty_listing_delay: float = 5.0

    def jittered(self, rng: random.Random) -> int:
        return rng.randint(self.min_delay, self.max_delay)

    def delay_for(self, outcome: CycleOutcome, jittered: float) -> float:
        if outcome is CycleOutcome.EMPTY_LISTING:
            return self.empty_listing_delay
        return jittered


class Poller:
    """Runs fetch, dedup, notify and persist cycles against one listing page."""

    def __init__(
        self,
        sender: WebhookSender,
        state_store: StateStore,
        config_store: Optional[StateStore] = None,
        listing_url: str = LISTING_URL,
        timeout: Optional[float] = None,
        policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.sender = sender
        self.state_store = state_store
        self.config_store = config_store or state_store
        self.listing_url = listing_url
        self.timeout = timeout
        self.policy = policy or RetryPolicy()
        self.sleep = sleep
        self.rng = rng or random.Random()
        self.clock = clock
        self.state = LoopState.FETCH_LISTING

    def _enter(self, state: LoopState) -> None:
        logger.debug("Entering state %s", state.name)
        self.state = state

    def _load_state(self) -> PersistedState:
        document = dict(self.state_store.read() or {})
        if self.config_store is not self.state_store:
            document["embedImage"] = self.config_store.read("embedImage")
        return PersistedState.from_document(document)

    def _cycle(self, delay: int) -> CycleOutcome:
        self._enter(LoopState.FETCH_LISTING)
        logger.info(
            "%s - Checking for new articles...",
            self.clock().strftime("%Y-%m-%d %H:%M:%S"),
            extra={"symbol": "?"},
        )
        logger.info(
            "Fetching all articles and parsing HTML...", extra={"symbol": "+"}
        )
        listing = parse_markup(fetch_page(self.listing_url, timeout=self.timeout))

        self._enter(LoopState.EXTRACT_FEED)
        feed = extract_feed(listing, base_url=self.listing_url)

        self._enter(LoopState.DEDUP_CHECK)
        state = self._load_state()
        if not is_new_article(feed, state):
            self._enter(LoopState.SKIP)
            logger.info(
                "No news found, waiting %s seconds...", delay, extra={"symbol": "-"}
            )
            return CycleOutcome.NO_NEWS

        logger.info("New article found, checking article...", extra={"symbol": "+"})
        if not feed.extra:
            raise ExtractionError(f"Entry {feed.id} has no detail page link.")

        self._enter(LoopState.FETCH_DETAIL)
        detail = parse_markup(fetch_page(feed.extra, timeout=self.timeout))

        self._enter(LoopState.EXTRACT_ARTICLE)
        article = extract_article(feed, detail)

        self._enter(LoopState.FORMAT)
        embed = build_embed(article, embed_image=state.embed_image, now=self.clock())

        self._enter(LoopState.SEND)
        self.sender.send(embed)

        self._enter(LoopState.PERSIST)
        self.state_store.write(
            {
                "lastId": feed.id,
                "knownTitles": remember_title(state.known_titles, feed.info),
            }
        )
        logger.info("%s", feed.info, extra={"symbol": "!"})
        return CycleOutcome.NOTIFIED

    def run_cycle(self, delay: Optional[int] = None) -> CycleOutcome:
        """Run one cycle; every failure is contained and reported as FAILED."""
        if delay is None:
            delay = self.policy.jittered(self.rng)

        try:
            return self._cycle(delay)
        except EmptyListingError:
            self._enter(LoopState.RETRY_DELAY)
            logger.warning(
                "Failed to get feedler, probably a 5XX error, trying again...",
                extra={"symbol": "!"},
            )
            return CycleOutcome.EMPTY_LISTING
        except Exception:  # noqa: BLE001
            logger.exception(
                "Cycle failed during %s", self.state.name, extra={"symbol": "!"}
            )
            return CycleOutcome.FAILED

    def run(self, max_cycles: Optional[int] = None) -> None:
        """Poll until interrupted, or for ``max_cycles`` cycles when given."""
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            delay = self.policy.jittered(self.rng)
            outcome = self.run_cycle(delay)
            cycles += 1

            if max_cycles is not None and cycles >= max_cycles:
                break

            if self.state is not LoopState.RETRY_DELAY:
                self._enter(LoopState.SLEEP)
            self.sleep(self.policy.delay_for(outcome, delay))
