"""Media and enrichment data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from trendwise.trends.models import TrendingTopic


class VideoSource(str, Enum):
    VIDEO_PLATFORM = "video-platform"
    OTHER = "other"


@dataclass(frozen=True)
class ImageMedia:
    url: str
    alt_text: str
    source: str
    width: int | None = None
    height: int | None = None

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "alt": self.alt_text,
            "source": self.source,
            "width": self.width,
            "height": self.height,
        }


@dataclass(frozen=True)
class VideoMedia:
    url: str
    title: str
    thumbnail: str
    source: VideoSource = VideoSource.OTHER
    description: str | None = None
    channel_name: str | None = None
    duration: str | None = None

    @property
    def video_id(self) -> str | None:
        """The platform video id for watch URLs (``...watch?v=<id>``)."""
        if "v=" not in self.url:
            return None
        return self.url.split("v=", 1)[1].split("&", 1)[0] or None

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "title": self.title,
            "thumbnail": self.thumbnail,
            "source": self.source.value,
            "description": self.description,
            "channelName": self.channel_name,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class TweetMetrics:
    likes: int = 0
    retweets: int = 0
    replies: int = 0


@dataclass(frozen=True)
class TweetMedia:
    id: str
    text: str
    author: str
    url: str
    embed_markup: str
    metrics: TweetMetrics | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "text": self.text,
            "author": self.author,
            "url": self.url,
            "embedCode": self.embed_markup,
            "metrics": vars(self.metrics) if self.metrics else None,
        }


@dataclass(frozen=True)
class MediaContent:
    images: list[ImageMedia] = field(default_factory=list)
    videos: list[VideoMedia] = field(default_factory=list)
    tweets: list[TweetMedia] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.images or self.videos or self.tweets)

    def to_dict(self) -> dict:
        return {
            "images": [i.to_dict() for i in self.images],
            "videos": [v.to_dict() for v in self.videos],
            "tweets": [t.to_dict() for t in self.tweets],
        }


@dataclass(frozen=True)
class RelatedArticle:
    title: str
    url: str
    snippet: str = ""
    source: str = "Unknown"

    def to_dict(self) -> dict:
        return {"title": self.title, "url": self.url, "snippet": self.snippet, "source": self.source}


@dataclass(frozen=True)
class EnrichedTopic:
    """A topic with the media and articles gathered for one generation request."""

    topic: TrendingTopic
    media: MediaContent = field(default_factory=MediaContent)
    related_articles: list[RelatedArticle] = field(default_factory=list)
