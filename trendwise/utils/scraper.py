"""Page fetching with the scrape timeout discipline.

Scrape-based sources load a page within ``page_load_timeout`` seconds and
give each read ``selector_timeout`` seconds before giving up. Any failure is
reported as :class:`SourceUnavailable`; callers turn that into an empty or
fallback result.
"""

from __future__ import annotations

import httpx
from bs4 import BeautifulSoup

from trendwise.config import Config, DEFAULT_USER_AGENT
from trendwise.exceptions import SourceUnavailable


def scrape_timeout(config: Config) -> httpx.Timeout:
    page_load = float(config.scraper.get("page_load_timeout", 30))
    selector = float(config.scraper.get("selector_timeout", 10))
    return httpx.Timeout(page_load, read=selector)


async def fetch_page(
    client: httpx.AsyncClient,
    url: str,
    config: Config,
    params: dict | None = None,
) -> str:
    """GET a page as text or raise SourceUnavailable."""
    headers = {
        "User-Agent": config.scraper.get("user_agent", DEFAULT_USER_AGENT),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }
    try:
        response = await client.get(
            url,
            params=params,
            headers=headers,
            timeout=scrape_timeout(config),
            follow_redirects=True,
        )
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise SourceUnavailable(f"{url[:80]}: {e}") from e
    return response.text


def strip_html(fragment: str | None) -> str:
    """Plain text of an HTML fragment with whitespace collapsed."""
    if not fragment:
        return ""
    text = BeautifulSoup(fragment, "html.parser").get_text(" ")
    return " ".join(text.split())
