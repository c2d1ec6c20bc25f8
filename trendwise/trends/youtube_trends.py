"""Video-trend discovery from the YouTube most-popular chart."""

from __future__ import annotations

import httpx

from trendwise.capabilities import Capability
from trendwise.config import Config
from trendwise.trends.models import Engagement, TopicSource, TrendingTopic
from trendwise.utils.api import YOUTUBE_API_URL, get_json
from trendwise.utils.logger import get_logger

logger = get_logger()


def format_count(value) -> str:
    """Format a raw API count with thousands separators ("1234567" -> "1,234,567")."""
    try:
        return f"{int(value or 0):,}"
    except (TypeError, ValueError):
        return "0"


class YouTubeTrendFetcher:
    """Fetch the most popular videos for a region as topics."""

    source = TopicSource.VIDEO

    def __init__(self, config: Config, capability: Capability, client: httpx.AsyncClient):
        self.config = config
        self.capability = capability
        self.client = client
        self.region = config.trends_config.get("region", "US")
        self.max_results = config.trends_config.get("per_source_limit", 15)

    def _to_topic(self, video: dict) -> TrendingTopic | None:
        snippet = video.get("snippet", {})
        title = (snippet.get("title") or "").strip()
        if not title:
            return None

        stats = video.get("statistics", {})
        description = snippet.get("description")
        thumbnail = snippet.get("thumbnails", {}).get("medium", {}).get("url")

        return TrendingTopic(
            title=title,
            source=self.source,
            description=f"{description[:200]}..." if description else None,
            thumbnail=thumbnail,
            url=f"https://www.youtube.com/watch?v={video.get('id')}",
            related_queries=list(snippet.get("tags") or [])[:5],
            category=snippet.get("categoryId"),
            location=self.region,
            engagement=Engagement(
                views=format_count(stats.get("viewCount")),
                likes=format_count(stats.get("likeCount")),
                comments=format_count(stats.get("commentCount")),
            ),
        )

    async def fetch(self) -> list[TrendingTopic]:
        """Fetch video trends, or [] when unconfigured or on failure."""
        if not self.capability.available:
            logger.info("YouTube API key not provided, skipping YouTube trends")
            return []

        try:
            data = await get_json(
                self.client,
                f"{YOUTUBE_API_URL}/videos",
                self.config,
                params={
                    "part": "snippet,statistics",
                    "chart": "mostPopular",
                    "regionCode": self.region,
                    "maxResults": self.max_results,
                    "key": self.capability.credential,
                },
            )
            topics = [t for t in map(self._to_topic, data.get("items", [])) if t is not None]
        except Exception as e:
            logger.warning("Error fetching YouTube trends: %s", e)
            return []

        logger.info("Fetched %d YouTube trends for %s", len(topics), self.region)
        return topics[: self.max_results]
