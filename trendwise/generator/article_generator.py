"""Article assembly: prompt → generative backend → validated JSON → media splicing."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone

from trendwise.capabilities import Capability
from trendwise.config import Config, FALLBACK_FEATURED_IMAGE_URL
from trendwise.exceptions import GenerationFailure
from trendwise.generator.llm_client import LLMClient, create_llm_client
from trendwise.generator.models import (
    ArticleRequest,
    ArticleResponse,
    GeneratedArticle,
    StructuredData,
)
from trendwise.generator.placeholders import substitute_media
from trendwise.generator.prompts import ARTICLE_SYSTEM_PROMPT, build_article_prompt, build_keywords
from trendwise.media.models import EnrichedTopic
from trendwise.utils.logger import get_logger

logger = get_logger()


def _strip_code_fence(text: str) -> str:
    content = text.strip()
    if content.startswith("```json"):
        content = content[7:]
    elif content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()


def parse_article_response(text: str | None) -> ArticleResponse:
    """Parse and validate the backend's JSON reply, or raise GenerationFailure."""
    if not text or not text.strip():
        raise GenerationFailure("Failed to generate article content: empty response")
    try:
        payload = json.loads(_strip_code_fence(text))
    except json.JSONDecodeError as e:
        raise GenerationFailure(f"Failed to parse generated article JSON: {e}") from e
    return ArticleResponse.from_payload(payload)


class ArticleGenerator:
    """Turns an article request into a publishable GeneratedArticle."""

    def __init__(self, config: Config, llm: LLMClient | None = None, capability: Capability | None = None):
        self.config = config
        gen_cfg = config.generation
        self.author = gen_cfg.get("author", "TrendWise Editorial Team")
        self.timeout = gen_cfg.get("timeout")
        self.capability = capability
        self._llm = llm

    @property
    def llm(self) -> LLMClient:
        if self._llm is None:
            if self.capability is not None and not self.capability.available:
                raise GenerationFailure(f"Article generation unavailable: {self.capability.reason}")
            gen_cfg = self.config.generation
            self._llm = create_llm_client(
                model=gen_cfg.get("model", "gpt-4o"),
                max_tokens=gen_cfg.get("max_tokens", 4000),
                temperature=gen_cfg.get("temperature", 0.7),
                provider=gen_cfg.get("provider"),
            )
        return self._llm

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        call = self.llm.generate(system_prompt, user_prompt)
        try:
            result = await (asyncio.wait_for(call, timeout=self.timeout) if self.timeout else call)
        except asyncio.TimeoutError as e:
            raise GenerationFailure(f"Generative backend timed out after {self.timeout}s") from e
        if result is None:
            raise GenerationFailure("Failed to generate article content: no result")
        return result.text

    async def generate_enhanced_article(self, request: ArticleRequest) -> GeneratedArticle:
        """Generate, validate and assemble one article.

        Raises GenerationFailure on any backend or parse problem; never returns
        a partially populated article.
        """
        user_prompt = build_article_prompt(request.topic, request.keywords, request.enriched)
        logger.info("Generating article for %r (%d keywords)", request.topic, len(request.keywords))

        response = parse_article_response(await self._complete(ARTICLE_SYSTEM_PROMPT, user_prompt))

        media = request.enriched.media if request.enriched else None
        substituted = substitute_media(response.content, media)

        if substituted.media.images:
            featured_image = substituted.media.images[0].url
        elif media and media.images:
            featured_image = media.images[0].url
        else:
            featured_image = FALLBACK_FEATURED_IMAGE_URL

        assembled_at = datetime.now(timezone.utc).isoformat()
        article = GeneratedArticle(
            title=response.title,
            content=substituted.content,
            excerpt=response.excerpt,
            meta_title=response.meta_title,
            meta_description=response.meta_description,
            og_title=response.og_title,
            og_description=response.og_description,
            tags=response.tags,
            featured_image=featured_image,
            media=substituted.media,
            structured_data=StructuredData(
                headline=response.title,
                author=self.author,
                date_published=assembled_at,
                date_modified=assembled_at,
                description=response.meta_description,
                image=featured_image,
            ),
        )
        logger.info(
            "Assembled %r with %d images, %d videos, %d tweets",
            article.title, len(article.media.images), len(article.media.videos), len(article.media.tweets),
        )
        return article

    async def generate_article_from_trend(self, enriched: EnrichedTopic) -> GeneratedArticle:
        return await self.generate_enhanced_article(ArticleRequest(
            topic=enriched.topic.title,
            keywords=build_keywords(enriched),
            enriched=enriched,
        ))
