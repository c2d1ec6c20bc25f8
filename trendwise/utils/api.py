"""JSON API calls that report failures as SourceUnavailable."""

from __future__ import annotations

from typing import Any

import httpx

from trendwise.config import Config
from trendwise.exceptions import SourceUnavailable

YOUTUBE_API_URL = "https://www.googleapis.com/youtube/v3"
UNSPLASH_API_URL = "https://api.unsplash.com"


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    config: Config,
    params: dict | None = None,
    headers: dict | None = None,
) -> Any:
    timeout = float(config.scraper.get("api_timeout", 15))
    try:
        response = await client.get(url, params=params, headers=headers, timeout=timeout)
        response.raise_for_status()
        return response.json()
    except (httpx.HTTPError, ValueError) as e:
        # Strip the query string: it carries the API key
        raise SourceUnavailable(f"{url.split('?')[0]}: {type(e).__name__}") from e
