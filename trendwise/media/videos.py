"""Video search against the YouTube Data API."""

from __future__ import annotations

import httpx

from trendwise.capabilities import Capability
from trendwise.config import Config
from trendwise.media.models import VideoMedia, VideoSource
from trendwise.utils.api import YOUTUBE_API_URL, get_json
from trendwise.utils.logger import get_logger

logger = get_logger()


class VideoSearcher:
    """Up to three related videos; an empty result is acceptable."""

    def __init__(self, config: Config, capability: Capability, client: httpx.AsyncClient):
        self.config = config
        self.capability = capability
        self.client = client
        self.max_results = config.media_config.get("max_videos", 3)

    @staticmethod
    def _to_video(item: dict) -> VideoMedia | None:
        video_id = item.get("id", {}).get("videoId")
        snippet = item.get("snippet", {})
        title = snippet.get("title")
        thumbnail = snippet.get("thumbnails", {}).get("medium", {}).get("url")
        if not (video_id and title and thumbnail):
            return None
        return VideoMedia(
            url=f"https://www.youtube.com/watch?v={video_id}",
            title=title,
            thumbnail=thumbnail,
            source=VideoSource.VIDEO_PLATFORM,
            description=snippet.get("description"),
            channel_name=snippet.get("channelTitle"),
        )

    async def search(self, topic: str) -> list[VideoMedia]:
        if not self.capability.available:
            logger.info("YouTube API key not provided, skipping video search")
            return []

        try:
            data = await get_json(
                self.client,
                f"{YOUTUBE_API_URL}/search",
                self.config,
                params={
                    "part": "snippet",
                    "q": topic,
                    "type": "video",
                    "maxResults": self.max_results,
                    "key": self.capability.credential,
                },
            )
            videos = [v for v in map(self._to_video, data.get("items", [])) if v is not None]
        except Exception as e:
            logger.warning("Error searching YouTube videos: %s", e)
            return []

        return videos[: self.max_results]
