"""Series loading and normalization module."""

from candlestick.data.normalize import format_instant, normalize, parse_instant
from candlestick.data.sources import (CSVPointSource, FramePointSource,
                                      JSONPointSource, PointSource,
                                      YahooPointSource, resolve_point_source)

__all__ = [
    "normalize",
    "parse_instant",
    "format_instant",
    "PointSource",
    "CSVPointSource",
    "JSONPointSource",
    "FramePointSource",
    "YahooPointSource",
    "resolve_point_source",
]
