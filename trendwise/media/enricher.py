"""Attach images, videos, posts and related articles to a topic."""

from __future__ import annotations

import asyncio

import httpx

from trendwise.capabilities import Capabilities
from trendwise.config import Config
from trendwise.media.articles import RelatedArticleSearcher
from trendwise.media.images import ImageSearcher, fallback_image
from trendwise.media.models import EnrichedTopic, MediaContent
from trendwise.media.tweets import TweetSearcher
from trendwise.media.videos import VideoSearcher
from trendwise.trends.models import TrendingTopic
from trendwise.utils.logger import get_logger

logger = get_logger()


class MediaEnricher:
    """Runs the four searches concurrently; each channel degrades on its own."""

    def __init__(
        self,
        images: ImageSearcher,
        videos: VideoSearcher,
        tweets: TweetSearcher,
        articles: RelatedArticleSearcher,
    ):
        self.images = images
        self.videos = videos
        self.tweets = tweets
        self.articles = articles

    @classmethod
    def from_config(
        cls,
        config: Config,
        client: httpx.AsyncClient,
        capabilities: Capabilities | None = None,
    ) -> MediaEnricher:
        capabilities = capabilities or Capabilities.from_config(config)
        return cls(
            images=ImageSearcher(config, capabilities.images, client),
            videos=VideoSearcher(config, capabilities.video, client),
            tweets=TweetSearcher(config, capabilities.social),
            articles=RelatedArticleSearcher(config, capabilities.articles, client),
        )

    @staticmethod
    async def _guard(name: str, search, query: str, default):
        try:
            return await search(query)
        except Exception as e:
            logger.warning("%s search failed: %s", name, e)
            return default

    async def enrich_topic_with_media(self, topic: TrendingTopic) -> EnrichedTopic:
        query = topic.title
        images, videos, tweets, articles = await asyncio.gather(
            self._guard("Image", self.images.search, query, None),
            self._guard("Video", self.videos.search, query, []),
            self._guard("Tweet", self.tweets.search, query, []),
            self._guard("Related article", self.articles.search, query, []),
        )

        media = MediaContent(
            images=list(images) if images else [fallback_image(query)],
            videos=list(videos),
            tweets=list(tweets),
        )
        logger.info(
            "Enriched %r: %d images, %d videos, %d tweets, %d related articles",
            query, len(media.images), len(media.videos), len(media.tweets), len(articles),
        )
        return EnrichedTopic(topic=topic, media=media, related_articles=list(articles))


async def enrich_topic_with_media(topic: TrendingTopic, config: Config | None = None) -> EnrichedTopic:
    """Convenience entry point that owns its own HTTP client."""
    config = config or Config.load()
    async with httpx.AsyncClient() as client:
        enricher = MediaEnricher.from_config(config, client)
        return await enricher.enrich_topic_with_media(topic)
