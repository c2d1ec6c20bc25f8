"""Search-trend discovery from the Google Trends daily trending-searches feed."""

from __future__ import annotations

import httpx
from bs4 import BeautifulSoup

from trendwise.capabilities import Capability
from trendwise.config import Config
from trendwise.exceptions import SourceUnavailable
from trendwise.trends.models import TopicSource, TrendingTopic, fallback_topics
from trendwise.utils.logger import get_logger
from trendwise.utils.scraper import fetch_page

logger = get_logger()

TRENDS_FEED_URL = "https://trends.google.com/trending/rss"


class GoogleTrendsFetcher:
    """Scrape daily search trends for a region.

    Falls back to the built-in topic list on any failure, including a page
    that loads but contains no trend items.
    """

    source = TopicSource.SEARCH

    def __init__(self, config: Config, capability: Capability, client: httpx.AsyncClient):
        self.config = config
        self.capability = capability
        self.client = client
        self.region = config.trends_config.get("region", "US")
        self.max_results = config.trends_config.get("per_source_limit", 15)

    def _parse(self, page: str) -> list[TrendingTopic]:
        soup = BeautifulSoup(page, "html.parser")
        trends: list[TrendingTopic] = []

        for item in soup.find_all("item"):
            title_el = item.find("title")
            title = title_el.get_text(strip=True) if title_el else ""
            if not title:
                continue

            traffic_el = item.find("ht:approx_traffic")
            picture_el = item.find("ht:picture")

            related: list[str] = []
            news_url = None
            for news in item.find_all("ht:news_item"):
                news_title_el = news.find("ht:news_item_title")
                query = news_title_el.get_text(strip=True) if news_title_el else ""
                if query and query != title:
                    related.append(query)
                url_el = news.find("ht:news_item_url")
                if news_url is None and url_el and url_el.get_text(strip=True):
                    news_url = url_el.get_text(strip=True)

            trends.append(TrendingTopic(
                title=title,
                source=self.source,
                search_volume=(traffic_el.get_text(strip=True) if traffic_el else "") or None,
                related_queries=related[:5],
                location=self.region,
                thumbnail=(picture_el.get_text(strip=True) if picture_el else "") or None,
                url=news_url,
            ))

        return trends

    async def fetch(self) -> list[TrendingTopic]:
        """Fetch the region's trending searches, or the fallback topics."""
        if not self.capability.available:
            logger.info("Search trends disabled, using fallback topics")
            return fallback_topics()

        try:
            page = await fetch_page(self.client, TRENDS_FEED_URL, self.config, params={"geo": self.region})
            trends = self._parse(page)
            if not trends:
                raise SourceUnavailable("no trend items on page")
        except Exception as e:
            logger.warning("Error scraping Google Trends, using fallback topics: %s", e)
            return fallback_topics()

        logger.info("Fetched %d Google Trends topics for %s", len(trends), self.region)
        return trends[: self.max_results]
