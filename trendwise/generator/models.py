"""Article request, backend response and generated article models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from trendwise.exceptions import GenerationFailure
from trendwise.media.models import EnrichedTopic


@dataclass(frozen=True)
class ArticleRequest:
    topic: str
    keywords: list[str] = field(default_factory=list)
    enriched: EnrichedTopic | None = None


_STRING_FIELDS = {
    "title": "title",
    "content": "content",
    "excerpt": "excerpt",
    "metaTitle": "meta_title",
    "metaDescription": "meta_description",
    "ogTitle": "og_title",
    "ogDescription": "og_description",
}
REQUIRED_RESPONSE_KEYS = (*_STRING_FIELDS, "tags", "mediaPlaceholders")


@dataclass(frozen=True)
class ArticleResponse:
    """The JSON object the backend must return, validated field by field."""

    title: str
    content: str
    excerpt: str
    meta_title: str
    meta_description: str
    og_title: str
    og_description: str
    tags: list[str]
    media_placeholders: dict[str, list[str]]

    @classmethod
    def from_payload(cls, payload: Any) -> ArticleResponse:
        if not isinstance(payload, dict):
            raise GenerationFailure(f"Expected a JSON object, got {type(payload).__name__}")

        missing = [key for key in REQUIRED_RESPONSE_KEYS if key not in payload]
        if missing:
            raise GenerationFailure(f"Response is missing required keys: {', '.join(missing)}")

        values: dict[str, Any] = {}
        for key, attr in _STRING_FIELDS.items():
            value = payload[key]
            if not isinstance(value, str):
                raise GenerationFailure(f"Response key {key!r} must be a string")
            values[attr] = value
        if not values["title"].strip() or not values["content"].strip():
            raise GenerationFailure("Response has an empty title or content")

        tags = payload["tags"]
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise GenerationFailure("Response key 'tags' must be a list of strings")

        placeholders = payload["mediaPlaceholders"]
        if not isinstance(placeholders, dict):
            raise GenerationFailure("Response key 'mediaPlaceholders' must be an object")

        return cls(
            tags=list(dict.fromkeys(tags)),
            media_placeholders={
                str(kind): [str(d) for d in descriptions]
                for kind, descriptions in placeholders.items()
                if isinstance(descriptions, list)
            },
            **values,
        )


@dataclass(frozen=True)
class UsedImage:
    url: str
    alt: str
    caption: str = "Image related to the article topic"


@dataclass(frozen=True)
class UsedVideo:
    url: str
    title: str
    embed_code: str


@dataclass(frozen=True)
class UsedTweet:
    id: str
    embed_code: str


@dataclass(frozen=True)
class UsedMedia:
    """The media actually spliced into an article body."""

    images: list[UsedImage] = field(default_factory=list)
    videos: list[UsedVideo] = field(default_factory=list)
    tweets: list[UsedTweet] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "images": [{"url": i.url, "alt": i.alt, "caption": i.caption} for i in self.images],
            "videos": [{"url": v.url, "title": v.title, "embedCode": v.embed_code} for v in self.videos],
            "tweets": [{"id": t.id, "embedCode": t.embed_code} for t in self.tweets],
        }


@dataclass(frozen=True)
class StructuredData:
    headline: str
    author: str
    date_published: str
    date_modified: str
    description: str
    image: str
    type: str = "Article"

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "headline": self.headline,
            "author": self.author,
            "datePublished": self.date_published,
            "dateModified": self.date_modified,
            "description": self.description,
            "image": self.image,
        }


@dataclass(frozen=True)
class GeneratedArticle:
    """A publishable article. Never mutated after assembly."""

    title: str
    content: str
    excerpt: str
    meta_title: str
    meta_description: str
    og_title: str
    og_description: str
    tags: list[str]
    featured_image: str
    media: UsedMedia
    structured_data: StructuredData

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "content": self.content,
            "excerpt": self.excerpt,
            "metaTitle": self.meta_title,
            "metaDescription": self.meta_description,
            "ogTitle": self.og_title,
            "ogDescription": self.og_description,
            "tags": list(self.tags),
            "featuredImage": self.featured_image,
            "media": self.media.to_dict(),
            "structuredData": self.structured_data.to_dict(),
        }
