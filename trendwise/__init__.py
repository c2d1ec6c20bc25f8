"""TrendWise: trending topics in, media-rich articles out."""

try:
    from importlib.metadata import version

    __version__ = version("trendwise")
except Exception:
    __version__ = "0.1.0"
