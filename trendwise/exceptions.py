"""Exception types shared across the pipeline."""


class TrendWiseError(Exception):
    """Base class for all TrendWise errors."""


class SourceUnavailable(TrendWiseError):
    """Raised when a trend source or media search cannot be reached or parsed.

    Always caught by the fetcher or searcher that raised it.
    """


class GenerationFailure(TrendWiseError):
    """Raised when the generative backend errors or returns unusable output."""
