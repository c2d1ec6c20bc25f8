"""Splice real media into generated article bodies.

Generated content marks media slots with ``[IMAGE-n]``, ``[VIDEO-n]`` and
``[TWEET-n]``. The body is tokenized once into text and placeholder tokens;
each placeholder kind then consumes media from its own cursor in arrival
order. The literal ``n`` is ignored: the third ``[IMAGE-*]`` seen gets the
third image. Placeholders left over once a kind's media runs out are deleted.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from enum import Enum

from trendwise.generator.models import UsedImage, UsedMedia, UsedTweet, UsedVideo
from trendwise.media.models import ImageMedia, MediaContent, TweetMedia, VideoMedia, VideoSource


class PlaceholderKind(str, Enum):
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"
    TWEET = "TWEET"


@dataclass(frozen=True)
class TextToken:
    text: str


@dataclass(frozen=True)
class PlaceholderToken:
    kind: PlaceholderKind
    index: int
    raw: str


Token = TextToken | PlaceholderToken

_PLACEHOLDER = re.compile(r"\[(IMAGE|VIDEO|TWEET)-(\d+)\]")


def tokenize(content: str) -> list[Token]:
    """Split content into text and placeholder tokens, in document order."""
    tokens: list[Token] = []
    pos = 0
    for match in _PLACEHOLDER.finditer(content):
        if match.start() > pos:
            tokens.append(TextToken(content[pos:match.start()]))
        tokens.append(PlaceholderToken(PlaceholderKind(match.group(1)), int(match.group(2)), match.group(0)))
        pos = match.end()
    if pos < len(content):
        tokens.append(TextToken(content[pos:]))
    return tokens


def strip_placeholders(content: str) -> str:
    return "".join(t.text for t in tokenize(content) if isinstance(t, TextToken))


# =============================================================================
# Rendering
# =============================================================================

def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def render_image(image: ImageMedia) -> str:
    return (
        '<figure class="my-8">\n'
        f'  <img src="{_attr(image.url)}" alt="{_attr(image.alt_text)}" class="w-full rounded-lg shadow-lg" />\n'
        f'  <figcaption class="text-sm text-gray-600 mt-2 text-center italic">{html.escape(image.alt_text)}</figcaption>\n'
        "</figure>"
    )


def video_embed(video: VideoMedia) -> str:
    """Platform player for platform videos with a known id, a plain link otherwise."""
    video_id = video.video_id if video.source == VideoSource.VIDEO_PLATFORM else None
    if video_id:
        return (
            f'<iframe width="100%" height="315" src="https://www.youtube.com/embed/{_attr(video_id)}" '
            'frameborder="0" allowfullscreen></iframe>'
        )
    return (
        f'<a href="{_attr(video.url)}" target="_blank" rel="noopener noreferrer" class="block">'
        f"{html.escape(video.title)}</a>"
    )


def render_video(video: VideoMedia, embed: str) -> str:
    return (
        '<div class="my-8">\n'
        '  <div class="aspect-video rounded-lg overflow-hidden shadow-lg">\n'
        f"    {embed}\n"
        "  </div>\n"
        f'  <p class="text-sm text-gray-600 mt-2">{html.escape(video.title)}</p>\n'
        "</div>"
    )


def render_tweet(tweet: TweetMedia) -> str:
    return f'<div class="my-8">\n  {tweet.embed_markup}\n</div>'


# =============================================================================
# Substitution
# =============================================================================

@dataclass(frozen=True)
class SubstitutionResult:
    content: str
    media: UsedMedia


def substitute_media(content: str, media: MediaContent | None) -> SubstitutionResult:
    """Replace placeholders with rendered media blocks.

    With no media at all, every placeholder is stripped.
    """
    if media is None or media.is_empty:
        return SubstitutionResult(strip_placeholders(content), UsedMedia())

    cursors = {kind: 0 for kind in PlaceholderKind}
    used_images: list[UsedImage] = []
    used_videos: list[UsedVideo] = []
    used_tweets: list[UsedTweet] = []
    parts: list[str] = []

    for token in tokenize(content):
        if isinstance(token, TextToken):
            parts.append(token.text)
            continue

        cursor = cursors[token.kind]
        if token.kind is PlaceholderKind.IMAGE and cursor < len(media.images):
            image = media.images[cursor]
            used_images.append(UsedImage(url=image.url, alt=image.alt_text))
            parts.append(render_image(image))
        elif token.kind is PlaceholderKind.VIDEO and cursor < len(media.videos):
            video = media.videos[cursor]
            embed = video_embed(video)
            used_videos.append(UsedVideo(url=video.url, title=video.title, embed_code=embed))
            parts.append(render_video(video, embed))
        elif token.kind is PlaceholderKind.TWEET and cursor < len(media.tweets):
            tweet = media.tweets[cursor]
            used_tweets.append(UsedTweet(id=tweet.id, embed_code=tweet.embed_markup))
            parts.append(render_tweet(tweet))
        else:
            # Media for this kind exhausted: drop the placeholder
            continue
        cursors[token.kind] = cursor + 1

    return SubstitutionResult(
        content="".join(parts),
        media=UsedMedia(images=used_images, videos=used_videos, tweets=used_tweets),
    )
