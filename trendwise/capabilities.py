"""Per-channel availability, derived once from configuration.

Each fetcher and searcher receives its :class:`Capability` at construction and
returns an empty result straight away when the channel is unavailable, so the
credential check lives here instead of inside every source.
"""

from __future__ import annotations

from dataclasses import dataclass

from trendwise.config import Config


@dataclass(frozen=True)
class Capability:
    """Whether one external channel can be used, and with which credential."""

    name: str
    available: bool
    credential: str | None = None
    missing: str = "credential not configured"

    @property
    def reason(self) -> str:
        return "available" if self.available else self.missing


@dataclass(frozen=True)
class Capabilities:
    search_trends: Capability
    social: Capability
    video: Capability
    images: Capability
    articles: Capability
    generation: Capability

    @classmethod
    def from_config(cls, config: Config) -> Capabilities:
        bearer = config.credential("twitter_bearer_token")
        youtube_key = config.credential("youtube_api_key")
        unsplash_key = config.credential("unsplash_access_key")

        return cls(
            # Scrape-based channels need no credential
            search_trends=Capability("search_trends", True),
            social=Capability("social", bearer is not None, bearer),
            video=Capability("video", youtube_key is not None, youtube_key),
            images=Capability("images", unsplash_key is not None, unsplash_key),
            articles=Capability("articles", True),
            generation=_generation_capability(config),
        )

    def all(self) -> tuple[Capability, ...]:
        return (self.search_trends, self.social, self.video, self.images, self.articles, self.generation)

    def summary(self) -> dict[str, bool]:
        return {cap.name: cap.available for cap in self.all()}


def _generation_capability(config: Config) -> Capability:
    env_key = config.llm_api_key_env
    if env_key is None:
        model = config.get("generation.model")
        provider = config.get("generation.provider")
        missing = f"unsupported provider '{provider}'" if provider else f"cannot detect provider for model '{model}'"
        return Capability("generation", False, missing=missing)

    key = config.env(env_key) or None
    return Capability("generation", key is not None, key, missing=f"{env_key} not set")
