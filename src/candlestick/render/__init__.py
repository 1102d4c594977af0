"""Render-side data: candle segments and backend adapters."""

from candlestick.render.backend import JsonBackend, RenderBackend, TableBackend
from candlestick.render.segments import (build_segment, build_segments,
                                         segment_columns, value_domain)

__all__ = [
    "build_segment",
    "build_segments",
    "value_domain",
    "segment_columns",
    "RenderBackend",
    "JsonBackend",
    "TableBackend",
]
