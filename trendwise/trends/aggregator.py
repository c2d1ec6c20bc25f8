"""Merge trending topics from every source into one de-duplicated list."""

from __future__ import annotations

import asyncio
import random
from typing import Protocol, Sequence, runtime_checkable

import httpx

from trendwise.capabilities import Capabilities
from trendwise.config import Config
from trendwise.trends.google_trends import GoogleTrendsFetcher
from trendwise.trends.models import TopicSource, TrendingTopic, fallback_topics
from trendwise.trends.twitter_trends import TwitterTrendFetcher
from trendwise.trends.youtube_trends import YouTubeTrendFetcher
from trendwise.utils.logger import get_logger

logger = get_logger()


@runtime_checkable
class TrendFetcher(Protocol):
    """Protocol for trend sources. ``fetch`` never raises."""

    source: TopicSource

    async def fetch(self) -> list[TrendingTopic]: ...


def dedupe_topics(topics: Sequence[TrendingTopic]) -> list[TrendingTopic]:
    """Drop topics whose title matches an earlier one, ignoring case.

    Only exact case-insensitive matches merge; "Rocket" and "Rockets" both stay.
    """
    seen: set[str] = set()
    unique: list[TrendingTopic] = []
    for topic in topics:
        if topic.dedup_key in seen:
            continue
        seen.add(topic.dedup_key)
        unique.append(topic)
    return unique


class TrendAggregator:
    """Fan out to all fetchers at once and merge their results.

    Fetchers are listed in priority order: earlier sources win duplicates.
    """

    def __init__(self, fetchers: Sequence[TrendFetcher], max_total: int = 30):
        self.fetchers = list(fetchers)
        self.max_total = max_total

    @classmethod
    def from_config(
        cls,
        config: Config,
        client: httpx.AsyncClient,
        capabilities: Capabilities | None = None,
    ) -> TrendAggregator:
        capabilities = capabilities or Capabilities.from_config(config)
        fetchers = [
            GoogleTrendsFetcher(config, capabilities.search_trends, client),
            TwitterTrendFetcher(config, capabilities.social),
            YouTubeTrendFetcher(config, capabilities.video, client),
        ]
        return cls(fetchers, max_total=config.trends_config.get("max_total", 30))

    async def _safe_fetch(self, fetcher: TrendFetcher) -> list[TrendingTopic]:
        try:
            return list(await fetcher.fetch())
        except Exception as e:
            logger.warning("Trend fetcher %s failed: %s", type(fetcher).__name__, e)
            return []

    async def fetch_all_trending_topics(self) -> list[TrendingTopic]:
        """Return up to ``max_total`` unique topics, never an empty list."""
        results = await asyncio.gather(*(self._safe_fetch(f) for f in self.fetchers))

        merged: list[TrendingTopic] = []
        for fetcher, topics in zip(self.fetchers, results):
            logger.debug("%s returned %d topics", fetcher.source.value, len(topics))
            merged.extend(topics)

        unique = dedupe_topics(merged)[: self.max_total]
        if not unique:
            logger.warning("All trend sources returned nothing, using fallback topics")
            return fallback_topics()

        logger.info("Aggregated %d unique trending topics from %d raw", len(unique), len(merged))
        return unique


def select_topic(
    topics: Sequence[TrendingTopic],
    top_n: int = 10,
    rng: random.Random | None = None,
) -> TrendingTopic | None:
    """Pick one topic at random from the first ``top_n``."""
    if not topics:
        return None
    pool = list(topics[:top_n])
    return (rng or random).choice(pool)


async def fetch_all_trending_topics(config: Config | None = None) -> list[TrendingTopic]:
    """Convenience entry point that owns its own HTTP client."""
    config = config or Config.load()
    async with httpx.AsyncClient() as client:
        aggregator = TrendAggregator.from_config(config, client)
        return await aggregator.fetch_all_trending_topics()
