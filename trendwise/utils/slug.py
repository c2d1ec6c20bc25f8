"""URL slug helper used to detect articles that already exist."""

from __future__ import annotations

import re

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


def generate_slug(title: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to one hyphen, trim hyphens.

    >>> generate_slug("AI & ML: Trends!!")
    'ai-ml-trends'
    """
    return _NON_ALNUM_RUN.sub("-", title.lower()).strip("-")
