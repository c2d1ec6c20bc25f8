"""Tests for article generation: prompt, response validation and assembly."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from trendwise.capabilities import Capability
from trendwise.config import Config, FALLBACK_FEATURED_IMAGE_URL
from trendwise.exceptions import GenerationFailure
from trendwise.generator.article_generator import ArticleGenerator, parse_article_response
from trendwise.generator.llm_client import GenerationResult, detect_provider, _estimate_cost, OPENAI_COSTS
from trendwise.generator.models import ArticleRequest
from trendwise.generator.prompts import build_article_prompt, build_keywords
from trendwise.media.models import (
    EnrichedTopic,
    ImageMedia,
    MediaContent,
    RelatedArticle,
    VideoMedia,
    VideoSource,
)
from trendwise.trends.models import TrendingTopic


def _payload(**overrides) -> dict:
    payload = {
        "title": "Quantum Computing Breakthroughs",
        "content": "<h1>Quantum</h1>[IMAGE-1]<p>Qubits.</p>[IMAGE-2]<h2>Watch</h2>[VIDEO-1]<p>Done.</p>",
        "excerpt": "What changed in quantum computing.",
        "metaTitle": "Quantum Computing Breakthroughs",
        "metaDescription": "The latest quantum computing breakthroughs explained.",
        "ogTitle": "Quantum leaps",
        "ogDescription": "Quantum computing, explained.",
        "tags": ["quantum", "computing", "quantum"],
        "mediaPlaceholders": {"images": ["chip", "lab"], "videos": ["explainer"], "tweets": []},
    }
    payload.update(overrides)
    return payload


def _mock_result(text: str | None) -> GenerationResult:
    return GenerationResult(
        text=text,
        model="test-model",
        input_tokens=100,
        output_tokens=50,
        total_tokens=150,
        estimated_cost=0.001,
    )


def _mock_llm(text: str | None) -> MagicMock:
    llm = MagicMock()
    llm.generate = AsyncMock(return_value=_mock_result(text))
    return llm


def _enriched(images: int = 2, videos: int = 1, tweets: int = 0) -> EnrichedTopic:
    return EnrichedTopic(
        topic=TrendingTopic(title="Quantum Computing Breakthroughs", related_queries=["qubits", "error correction"]),
        media=MediaContent(
            images=[
                ImageMedia(url=f"https://images.example/{i}.jpg", alt_text=f"quantum {i}", source="unsplash")
                for i in range(1, images + 1)
            ],
            videos=[
                VideoMedia(
                    url=f"https://www.youtube.com/watch?v=qc{i}",
                    title=f"Quantum video {i}",
                    thumbnail="https://i.ytimg.com/t.jpg",
                    source=VideoSource.VIDEO_PLATFORM,
                )
                for i in range(1, videos + 1)
            ],
        ),
        related_articles=[
            RelatedArticle(title="IBM unveils new quantum processor", url="https://news.example/1", snippet="IBM..."),
            RelatedArticle(title="Google claims quantum advantage", url="https://news.example/2", snippet="Google..."),
        ],
    )


# =============================================================================
# Keywords and prompt
# =============================================================================

def test_keywords_combine_title_queries_and_article_fragments():
    keywords = build_keywords(_enriched())
    assert keywords == [
        "Quantum Computing Breakthroughs",
        "qubits",
        "error correction",
        "IBM unveils",
        "Google claims",
    ]


def test_keywords_capped_at_ten():
    enriched = EnrichedTopic(
        topic=TrendingTopic(title="T", related_queries=[f"q{i}" for i in range(12)]),
        related_articles=[RelatedArticle(title="A B C", url="u")],
    )
    keywords = build_keywords(enriched)
    assert len(keywords) == 10
    assert keywords[0] == "T"


def test_prompt_includes_context_and_placeholder_instructions():
    enriched = _enriched()
    prompt = build_article_prompt("Quantum Computing Breakthroughs", build_keywords(enriched), enriched)

    assert '"Quantum Computing Breakthroughs"' in prompt
    assert "qubits, error correction" in prompt
    assert "ADDITIONAL CONTEXT" in prompt
    assert "Available Images: 2 high-quality images" in prompt
    assert "Quantum video 1" in prompt
    assert "Related Tweets: 0" in prompt
    assert "[IMAGE-1]" in prompt and "[VIDEO-1]" in prompt and "[TWEET-1]" in prompt
    assert '"mediaPlaceholders"' in prompt


def test_prompt_without_enrichment_has_no_context_block():
    prompt = build_article_prompt("Plain", ["Plain"])
    assert "ADDITIONAL CONTEXT" not in prompt


# =============================================================================
# Response parsing
# =============================================================================

def test_parse_valid_response_dedupes_tags():
    response = parse_article_response(json.dumps(_payload()))
    assert response.title == "Quantum Computing Breakthroughs"
    assert response.meta_description.startswith("The latest")
    assert response.tags == ["quantum", "computing"]
    assert response.media_placeholders["videos"] == ["explainer"]


def test_parse_strips_code_fences():
    text = "```json\n" + json.dumps(_payload()) + "\n```"
    assert parse_article_response(text).og_title == "Quantum leaps"


@pytest.mark.parametrize("text", [None, "", "   ", "not json", "[1, 2]", '{"title": "x"'])
def test_parse_rejects_empty_or_malformed(text):
    with pytest.raises(GenerationFailure):
        parse_article_response(text)


@pytest.mark.parametrize("key", ["title", "content", "metaDescription", "tags", "mediaPlaceholders"])
def test_parse_rejects_missing_keys(key):
    payload = _payload()
    del payload[key]
    with pytest.raises(GenerationFailure, match=key):
        parse_article_response(json.dumps(payload))


def test_parse_rejects_wrong_types():
    with pytest.raises(GenerationFailure):
        parse_article_response(json.dumps(_payload(tags="quantum")))
    with pytest.raises(GenerationFailure):
        parse_article_response(json.dumps(_payload(excerpt=42)))
    with pytest.raises(GenerationFailure):
        parse_article_response(json.dumps(_payload(content="  ")))


# =============================================================================
# Assembly
# =============================================================================

def test_end_to_end_quantum_scenario():
    """2 images, 1 video, 0 tweets → two image blocks, one video block, no tweets."""
    llm = _mock_llm(json.dumps(_payload()))
    generator = ArticleGenerator(Config.from_dict(), llm=llm)

    article = asyncio.run(generator.generate_article_from_trend(_enriched(images=2, videos=1, tweets=0)))

    assert article.content.count("<figure") == 2
    assert article.content.count("youtube.com/embed/qc1") == 1
    assert "twitter-tweet" not in article.content
    assert "[IMAGE-" not in article.content and "[VIDEO-" not in article.content
    assert article.featured_image == "https://images.example/1.jpg"
    assert article.structured_data.image == article.featured_image
    assert len(article.media.images) == 2
    assert len(article.media.videos) == 1
    assert article.media.tweets == []


def test_structured_data_dates_match_assembly_instant():
    generator = ArticleGenerator(Config.from_dict(), llm=_mock_llm(json.dumps(_payload())))
    article = asyncio.run(generator.generate_article_from_trend(_enriched()))

    data = article.structured_data
    assert data.date_published == data.date_modified
    assert data.headline == article.title
    assert data.author == "TrendWise Editorial Team"
    assert data.description == article.meta_description
    assert article.to_dict()["structuredData"]["type"] == "Article"


def test_prompt_sent_to_backend_carries_topic_and_keywords():
    llm = _mock_llm(json.dumps(_payload()))
    generator = ArticleGenerator(Config.from_dict(), llm=llm)
    asyncio.run(generator.generate_article_from_trend(_enriched()))

    system_prompt, user_prompt = llm.generate.call_args[0]
    assert "JSON" in system_prompt
    assert "Quantum Computing Breakthroughs" in user_prompt
    assert "IBM unveils" in user_prompt


def test_featured_image_falls_back_without_enrichment():
    generator = ArticleGenerator(Config.from_dict(), llm=_mock_llm(json.dumps(_payload())))
    article = asyncio.run(generator.generate_enhanced_article(ArticleRequest(topic="Quantum", keywords=["Quantum"])))

    assert article.featured_image == FALLBACK_FEATURED_IMAGE_URL
    assert "[IMAGE-" not in article.content
    assert article.media.images == []


def test_featured_image_uses_first_available_when_no_placeholder_consumed():
    payload = _payload(content="<p>No media slots at all.</p>")
    generator = ArticleGenerator(Config.from_dict(), llm=_mock_llm(json.dumps(payload)))
    article = asyncio.run(generator.generate_article_from_trend(_enriched()))

    assert article.media.images == []
    assert article.featured_image == "https://images.example/1.jpg"


@pytest.mark.parametrize("text", [None, ""])
def test_empty_backend_output_raises(text):
    """Null or empty content fails the run instead of returning a partial article."""
    generator = ArticleGenerator(Config.from_dict(), llm=_mock_llm(text))
    with pytest.raises(GenerationFailure):
        asyncio.run(generator.generate_article_from_trend(_enriched()))


def test_backend_error_propagates():
    llm = MagicMock()
    llm.generate = AsyncMock(side_effect=GenerationFailure("OpenAI request failed: 503"))
    generator = ArticleGenerator(Config.from_dict(), llm=llm)
    with pytest.raises(GenerationFailure, match="503"):
        asyncio.run(generator.generate_article_from_trend(_enriched()))


def test_backend_timeout_becomes_generation_failure():
    async def slow(system_prompt, user_prompt):
        await asyncio.sleep(1)

    llm = MagicMock()
    llm.generate = slow
    generator = ArticleGenerator(Config.from_dict({"generation": {"timeout": 0.05}}), llm=llm)
    with pytest.raises(GenerationFailure, match="timed out"):
        asyncio.run(generator.generate_article_from_trend(_enriched()))


@patch("trendwise.generator.article_generator.create_llm_client")
def test_llm_client_built_from_config(mock_create):
    mock_create.return_value = _mock_llm(json.dumps(_payload()))
    config = Config.from_dict({"generation": {"model": "claude-sonnet-4-5-20250929", "max_tokens": 2000}})

    generator = ArticleGenerator(config)
    asyncio.run(generator.generate_article_from_trend(_enriched()))

    mock_create.assert_called_once_with(
        model="claude-sonnet-4-5-20250929", max_tokens=2000, temperature=0.7, provider=None,
    )


def test_missing_backend_key_is_generation_failure(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    generator = ArticleGenerator(Config.from_dict())
    with pytest.raises(GenerationFailure, match="OPENAI_API_KEY"):
        asyncio.run(generator.generate_article_from_trend(_enriched()))


def test_unknown_model_is_generation_failure(monkeypatch):
    """An undetectable provider fails the run like any other backend problem."""
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    generator = ArticleGenerator(Config.from_dict({"generation": {"model": "llama-3-70b"}}))
    with pytest.raises(GenerationFailure, match="llama-3-70b"):
        asyncio.run(generator.generate_enhanced_article(ArticleRequest(topic="X", keywords=["X"])))


def test_unknown_explicit_provider_is_generation_failure():
    generator = ArticleGenerator(Config.from_dict({"generation": {"provider": "mistral", "model": "gpt-4o"}}))
    with pytest.raises(GenerationFailure, match="mistral"):
        asyncio.run(generator.generate_enhanced_article(ArticleRequest(topic="X", keywords=["X"])))


@patch("trendwise.generator.article_generator.create_llm_client")
def test_unavailable_generation_capability_skips_client(mock_create):
    capability = Capability("generation", False, missing="OPENAI_API_KEY not set")
    generator = ArticleGenerator(Config.from_dict(), capability=capability)

    with pytest.raises(GenerationFailure, match="OPENAI_API_KEY not set"):
        asyncio.run(generator.generate_article_from_trend(_enriched()))
    mock_create.assert_not_called()


# =============================================================================
# LLM client helpers
# =============================================================================

def test_detect_provider():
    assert detect_provider("gpt-4o") == "openai"
    assert detect_provider("claude-haiku-4-5-20251001") == "anthropic"
    assert detect_provider("gemini-2.5-pro") == "google"
    with pytest.raises(GenerationFailure):
        detect_provider("llama-3")


def test_estimate_cost_prefers_longest_prefix():
    # gpt-4o pricing, not gpt-4
    cost = _estimate_cost("gpt-4o-2024-08-06", 1_000_000, 0, OPENAI_COSTS)
    assert cost == pytest.approx(2.50)
