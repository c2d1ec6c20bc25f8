"""Social-trend discovery from the Twitter/X trends API."""

from __future__ import annotations

import asyncio

import tweepy

from trendwise.capabilities import Capability
from trendwise.config import Config
from trendwise.trends.models import TopicSource, TrendingTopic
from trendwise.utils.logger import get_logger

logger = get_logger()


class TwitterTrendFetcher:
    """Fetch place trends (worldwide by default) with an app-only bearer token."""

    source = TopicSource.SOCIAL

    def __init__(self, config: Config, capability: Capability, api: tweepy.API | None = None):
        self.config = config
        self.capability = capability
        self.woeid = config.trends_config.get("twitter_woeid", 1)
        self.max_results = config.trends_config.get("per_source_limit", 15)
        self._api = api

    @property
    def api(self) -> tweepy.API:
        if self._api is None:
            self._api = tweepy.API(tweepy.OAuth2BearerHandler(self.capability.credential))
        return self._api

    def _to_topics(self, payload: list[dict]) -> list[TrendingTopic]:
        raw_trends = payload[0].get("trends", []) if payload else []
        topics: list[TrendingTopic] = []
        for trend in raw_trends:
            name = (trend.get("name") or "").strip()
            # Hashtags make poor article titles
            if not name or name.startswith("#"):
                continue
            volume = trend.get("tweet_volume")
            topics.append(TrendingTopic(
                title=name,
                source=self.source,
                search_volume=str(volume) if volume is not None else None,
                url=trend.get("url"),
            ))
            if len(topics) >= self.max_results:
                break
        return topics

    async def fetch(self) -> list[TrendingTopic]:
        """Fetch social trends, or [] when unconfigured or on failure."""
        if not self.capability.available:
            logger.info("Twitter bearer token not provided, skipping Twitter trends")
            return []

        try:
            payload = await asyncio.to_thread(self.api.get_place_trends, self.woeid)
            topics = self._to_topics(payload)
        except Exception as e:
            logger.warning("Error fetching Twitter trends: %s", e)
            return []

        logger.info("Fetched %d Twitter trends (woeid=%s)", len(topics), self.woeid)
        return topics
