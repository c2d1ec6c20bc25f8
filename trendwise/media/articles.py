"""Related news articles from a Google News search feed."""

from __future__ import annotations

import feedparser
import httpx

from trendwise.capabilities import Capability
from trendwise.config import Config
from trendwise.media.models import RelatedArticle
from trendwise.utils.logger import get_logger
from trendwise.utils.scraper import fetch_page, strip_html

logger = get_logger()

NEWS_SEARCH_URL = "https://news.google.com/rss/search"


class RelatedArticleSearcher:
    """Up to five news articles for a topic; an empty result is acceptable."""

    def __init__(self, config: Config, capability: Capability, client: httpx.AsyncClient):
        self.config = config
        self.capability = capability
        self.client = client
        self.max_results = config.media_config.get("max_articles", 5)
        self.region = config.trends_config.get("region", "US")

    @staticmethod
    def _to_article(entry) -> RelatedArticle | None:
        title = (entry.get("title") or "").strip()
        url = entry.get("link")
        if not (title and url):
            return None
        publisher = (entry.get("source") or {}).get("title")
        return RelatedArticle(
            title=title,
            url=url,
            snippet=strip_html(entry.get("summary")),
            source=publisher or "Unknown",
        )

    async def search(self, topic: str) -> list[RelatedArticle]:
        if not self.capability.available:
            return []

        try:
            page = await fetch_page(
                self.client,
                NEWS_SEARCH_URL,
                self.config,
                params={"q": f"{topic} news articles", "hl": "en-US", "gl": self.region},
            )
            feed = feedparser.parse(page)
            articles = [a for a in map(self._to_article, feed.entries) if a is not None]
        except Exception as e:
            logger.warning("Error searching related articles: %s", e)
            return []

        return articles[: self.max_results]
