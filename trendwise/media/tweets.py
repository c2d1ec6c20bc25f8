"""Recent post search against the Twitter/X v2 API."""

from __future__ import annotations

import asyncio
import html

import tweepy

from trendwise.capabilities import Capability
from trendwise.config import Config
from trendwise.media.models import TweetMedia, TweetMetrics
from trendwise.utils.logger import get_logger

logger = get_logger()

# search_recent_tweets rejects max_results below 10
_API_MIN_RESULTS = 10


def tweet_url(author: str | None, tweet_id: str) -> str:
    if author:
        return f"https://twitter.com/{author}/status/{tweet_id}"
    return f"https://twitter.com/i/web/status/{tweet_id}"


def render_tweet_embed(text: str, url: str) -> str:
    """Blockquote markup picked up by the platform's widgets.js."""
    return (
        f'<blockquote class="twitter-tweet"><p>{html.escape(text)}</p>'
        f'<a href="{html.escape(url, quote=True)}"></a></blockquote>'
    )


class TweetSearcher:
    """Up to five recent posts about a topic; an empty result is acceptable."""

    def __init__(self, config: Config, capability: Capability, client: tweepy.Client | None = None):
        self.config = config
        self.capability = capability
        self.max_results = config.media_config.get("max_tweets", 5)
        self._client = client

    @property
    def client(self) -> tweepy.Client:
        if self._client is None:
            self._client = tweepy.Client(bearer_token=self.capability.credential)
        return self._client

    def _search(self, topic: str) -> tweepy.Response:
        return self.client.search_recent_tweets(
            topic,
            max_results=max(self.max_results, _API_MIN_RESULTS),
            tweet_fields=["author_id", "created_at", "public_metrics"],
            user_fields=["username", "name"],
            expansions=["author_id"],
        )

    def _to_tweets(self, response: tweepy.Response) -> list[TweetMedia]:
        includes = response.includes or {}
        usernames = {str(user.id): user.username for user in includes.get("users", [])}

        tweets: list[TweetMedia] = []
        for tweet in (response.data or [])[: self.max_results]:
            tweet_id = str(tweet.id)
            username = usernames.get(str(tweet.author_id))
            url = tweet_url(username, tweet_id)
            metrics = tweet.public_metrics or {}
            tweets.append(TweetMedia(
                id=tweet_id,
                text=tweet.text,
                author=username or "Unknown",
                url=url,
                embed_markup=render_tweet_embed(tweet.text, url),
                metrics=TweetMetrics(
                    likes=metrics.get("like_count", 0),
                    retweets=metrics.get("retweet_count", 0),
                    replies=metrics.get("reply_count", 0),
                ),
            ))
        return tweets

    async def search(self, topic: str) -> list[TweetMedia]:
        if not self.capability.available:
            logger.info("Twitter bearer token not provided, skipping tweet search")
            return []

        try:
            response = await asyncio.to_thread(self._search, topic)
            return self._to_tweets(response)
        except Exception as e:
            logger.warning("Error searching related tweets: %s", e)
            return []
