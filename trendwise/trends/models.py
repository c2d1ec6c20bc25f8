"""Trend data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class TopicSource(str, Enum):
    SEARCH = "search"
    SOCIAL = "social"
    VIDEO = "video"
    MANUAL = "manual"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Engagement:
    views: str | None = None
    likes: str | None = None
    comments: str | None = None

    def to_dict(self) -> dict:
        return {"views": self.views, "likes": self.likes, "comments": self.comments}


@dataclass(frozen=True)
class TrendingTopic:
    """A candidate topic from one trend source."""

    title: str
    source: TopicSource = TopicSource.MANUAL
    search_volume: str | None = None
    related_queries: list[str] = field(default_factory=list)
    category: str | None = None
    location: str | None = None
    timestamp: datetime = field(default_factory=utc_now)
    thumbnail: str | None = None
    description: str | None = None
    url: str | None = None
    engagement: Engagement | None = None

    def __post_init__(self):
        if not self.title or not self.title.strip():
            raise ValueError("TrendingTopic title must be non-empty")
        if not isinstance(self.source, TopicSource):
            object.__setattr__(self, "source", TopicSource(self.source))

    @property
    def dedup_key(self) -> str:
        return self.title.lower()

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "source": self.source.value,
            "searchVolume": self.search_volume,
            "relatedQueries": list(self.related_queries),
            "category": self.category,
            "location": self.location,
            "timestamp": self.timestamp.isoformat(),
            "thumbnail": self.thumbnail,
            "description": self.description,
            "url": self.url,
            "engagement": self.engagement.to_dict() if self.engagement else None,
        }


_FALLBACK_TOPICS = [
    ("AI and Machine Learning Trends 2024", [
        "artificial intelligence", "machine learning", "AI trends", "ML applications", "AI future",
    ]),
    ("Sustainable Technology Solutions", [
        "green technology", "renewable energy", "sustainable development", "eco-friendly tech", "climate tech",
    ]),
    ("Remote Work Best Practices", [
        "work from home", "remote productivity", "digital nomad", "virtual collaboration", "remote team management",
    ]),
    ("Cryptocurrency Market Analysis", [
        "bitcoin", "ethereum", "crypto trading", "blockchain technology", "digital currency",
    ]),
    ("Health and Wellness Technology", [
        "health tech", "fitness apps", "mental health", "wearable devices", "telemedicine",
    ]),
]


def fallback_topics() -> list[TrendingTopic]:
    """The fixed built-in topic list used when live trend data is unavailable."""
    return [
        TrendingTopic(title=title, source=TopicSource.SEARCH, related_queries=list(queries))
        for title, queries in _FALLBACK_TOPICS
    ]
