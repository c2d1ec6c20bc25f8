"""Image search against the Unsplash API."""

from __future__ import annotations

import httpx

from trendwise.capabilities import Capability
from trendwise.config import Config, FALLBACK_IMAGE_URL
from trendwise.media.models import ImageMedia
from trendwise.utils.api import UNSPLASH_API_URL, get_json
from trendwise.utils.logger import get_logger

logger = get_logger()


def fallback_image(topic: str) -> ImageMedia:
    return ImageMedia(
        url=FALLBACK_IMAGE_URL,
        alt_text=f"{topic} related image",
        source="unsplash",
        width=800,
        height=400,
    )


class ImageSearcher:
    """Landscape photos for a topic. The result is never empty."""

    def __init__(self, config: Config, capability: Capability, client: httpx.AsyncClient):
        self.config = config
        self.capability = capability
        self.client = client
        self.max_results = config.media_config.get("max_images", 5)

    def _to_image(self, photo: dict, topic: str) -> ImageMedia | None:
        url = photo.get("urls", {}).get("regular")
        if not url:
            return None
        return ImageMedia(
            url=url,
            alt_text=photo.get("alt_description") or f"{topic} related image",
            source="unsplash",
            width=photo.get("width"),
            height=photo.get("height"),
        )

    async def search(self, topic: str) -> list[ImageMedia]:
        if not self.capability.available:
            logger.info("Unsplash access key not provided, using fallback image")
            return [fallback_image(topic)]

        try:
            data = await get_json(
                self.client,
                f"{UNSPLASH_API_URL}/search/photos",
                self.config,
                params={"query": topic, "per_page": self.max_results, "orientation": "landscape"},
                headers={"Authorization": f"Client-ID {self.capability.credential}"},
            )
            images = [i for i in (self._to_image(p, topic) for p in data.get("results", [])) if i]
        except Exception as e:
            logger.warning("Error searching Unsplash images: %s", e)
            return [fallback_image(topic)]

        if not images:
            logger.info("No Unsplash images for %r, using fallback image", topic)
            return [fallback_image(topic)]
        return images[: self.max_results]
