"""Prompt templates for article generation."""

from __future__ import annotations

from trendwise.media.models import EnrichedTopic

MAX_KEYWORDS = 10

ARTICLE_SYSTEM_PROMPT = """\
You are an expert SEO content strategist and blogger with deep knowledge of content marketing, \
search engine optimization, and digital media integration. Create content that ranks well, \
engages readers, and drives conversions. Respond with a single JSON object and nothing else."""


ARTICLE_PROMPT_TEMPLATE = """\
Write a comprehensive, SEO-optimized blog article about "{topic}".

Requirements:
- 2000-2500 words
- Include H1, H2, and H3 headings with proper hierarchy
- Use the keywords naturally: {keywords}
- Write in an engaging, authoritative style
- Include actionable insights and practical advice
- Add calls-to-action and engagement elements
- Format in clean HTML with semantic tags
- Include placeholder spots for media integration
- Optimize for featured snippets and voice search
- Include internal linking opportunities
{context_section}
MEDIA INTEGRATION INSTRUCTIONS:
- Include [IMAGE-1], [IMAGE-2], etc. placeholders where relevant images should be inserted
- Include [VIDEO-1], [VIDEO-2], etc. placeholders where videos would enhance the content
- Include [TWEET-1], [TWEET-2], etc. placeholders where social media embeds would add value
- Number each placeholder kind from 1 without gaps
- Ensure media placements enhance the narrative and break up text naturally

SEO OPTIMIZATION:
- Target long-tail keywords and semantic variations
- Include FAQ sections for voice search optimization
- Use schema markup friendly structure
- Optimize for E-A-T (Expertise, Authoritativeness, Trustworthiness)

Format the response as JSON with the following structure:
{{
  "title": "Compelling article title (under 60 characters)",
  "content": "Full HTML content with headings, paragraphs, and media placeholders",
  "excerpt": "Engaging article summary (under 200 characters)",
  "metaTitle": "SEO optimized title (under 60 characters)",
  "metaDescription": "Compelling meta description (under 160 characters)",
  "ogTitle": "Social media optimized title",
  "ogDescription": "Social media description (under 200 characters)",
  "tags": ["primary-tag", "secondary-tag", "long-tail-keyword", "category-tag", "trending-tag"],
  "mediaPlaceholders": {{
    "images": ["Description of IMAGE-1", "Description of IMAGE-2"],
    "videos": ["Description of VIDEO-1"],
    "tweets": ["Context for TWEET-1"]
  }}
}}"""


def build_keywords(enriched: EnrichedTopic) -> list[str]:
    """Topic title, its related queries, then the first two words of up to three
    related article titles, capped at ``MAX_KEYWORDS``."""
    keywords = [enriched.topic.title, *enriched.topic.related_queries]
    keywords += [" ".join(a.title.split()[:2]) for a in enriched.related_articles[:3]]
    return keywords[:MAX_KEYWORDS]


def build_context_section(enriched: EnrichedTopic | None) -> str:
    """Summarize the available enrichment for the model. Empty without enrichment."""
    if enriched is None:
        return ""

    articles = "; ".join(f'"{a.title}" - {a.snippet}' for a in enriched.related_articles) or "none"
    videos = ", ".join(v.title for v in enriched.media.videos) or "none"
    return (
        "\nADDITIONAL CONTEXT:\n"
        f"- Related Articles: {articles}\n"
        f"- Available Images: {len(enriched.media.images)} high-quality images\n"
        f"- Available Videos: {videos}\n"
        f"- Related Tweets: {len(enriched.media.tweets)} relevant social media posts\n"
    )


def build_article_prompt(topic: str, keywords: list[str], enriched: EnrichedTopic | None = None) -> str:
    return ARTICLE_PROMPT_TEMPLATE.format(
        topic=topic,
        keywords=", ".join(keywords),
        context_section=build_context_section(enriched),
    )
