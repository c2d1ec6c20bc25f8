"""End-to-end run: trends → topic selection → enrichment → article."""

from __future__ import annotations

import random
from dataclasses import dataclass

import httpx

from trendwise.capabilities import Capabilities
from trendwise.config import Config
from trendwise.generator.article_generator import ArticleGenerator
from trendwise.generator.llm_client import LLMClient
from trendwise.generator.models import GeneratedArticle
from trendwise.media.enricher import MediaEnricher
from trendwise.media.models import EnrichedTopic
from trendwise.trends.aggregator import TrendAggregator, select_topic
from trendwise.trends.models import TopicSource, TrendingTopic
from trendwise.utils.logger import get_logger
from trendwise.utils.slug import generate_slug

logger = get_logger()

# The article store only knows google/twitter/manual; video topics are stored as manual
_PERSISTED_SOURCES = {
    TopicSource.SEARCH: "google",
    TopicSource.SOCIAL: "twitter",
    TopicSource.VIDEO: "manual",
    TopicSource.MANUAL: "manual",
}


def persisted_source(source: TopicSource) -> str:
    return _PERSISTED_SOURCES[TopicSource(source)]


@dataclass(frozen=True)
class PipelineResult:
    article: GeneratedArticle
    enriched: EnrichedTopic
    topic_source: TopicSource

    @property
    def persisted_source(self) -> str:
        return persisted_source(self.topic_source)

    @property
    def slug(self) -> str:
        return generate_slug(self.article.title)

    def to_record(self) -> dict:
        """Flat record for the article store."""
        record = self.article.to_dict()
        record.update({
            "slug": self.slug,
            "ogImage": self.article.featured_image,
            "trendingTopic": self.enriched.topic.title,
            "trendingSource": self.persisted_source,
            "relatedArticles": [a.to_dict() for a in self.enriched.related_articles],
        })
        return record


class TrendPipeline:
    """One bounded request/response run. Only article generation can fail it."""

    def __init__(
        self,
        config: Config,
        client: httpx.AsyncClient,
        llm: LLMClient | None = None,
        capabilities: Capabilities | None = None,
        rng: random.Random | None = None,
    ):
        self.config = config
        self.capabilities = capabilities or Capabilities.from_config(config)
        self.aggregator = TrendAggregator.from_config(config, client, self.capabilities)
        self.enricher = MediaEnricher.from_config(config, client, self.capabilities)
        self.generator = ArticleGenerator(config, llm=llm, capability=self.capabilities.generation)
        self.rng = rng

    async def choose_topic(self) -> TrendingTopic:
        trends_cfg = self.config.trends_config
        trends = await self.aggregator.fetch_all_trending_topics()
        selected = select_topic(trends, top_n=trends_cfg.get("selection_pool", 10), rng=self.rng)
        if selected is None:
            default = trends_cfg.get("default_topic", "Latest Technology Trends and Innovations")
            return TrendingTopic(title=default, source=TopicSource.MANUAL)
        logger.info("Selected trending topic: %s from %s", selected.title, selected.source.value)
        return selected

    async def generate(self, topic: str | None = None) -> PipelineResult:
        """Generate an article for ``topic``, or for a trending topic when omitted or blank.

        Raises GenerationFailure when the article cannot be generated.
        """
        topic = topic.strip() if topic else None
        if topic:
            selected = TrendingTopic(title=topic, source=TopicSource.MANUAL)
        else:
            selected = await self.choose_topic()

        logger.info("Enriching topic with media and related content...")
        enriched = await self.enricher.enrich_topic_with_media(selected)

        logger.info("Generating article with AI...")
        article = await self.generator.generate_article_from_trend(enriched)
        return PipelineResult(article=article, enriched=enriched, topic_source=selected.source)


async def generate_pipeline(
    topic: str | None = None,
    config: Config | None = None,
    llm: LLMClient | None = None,
) -> PipelineResult:
    """Convenience entry point that owns its own HTTP client."""
    config = config or Config.load()
    async with httpx.AsyncClient() as client:
        return await TrendPipeline(config, client, llm=llm).generate(topic)
