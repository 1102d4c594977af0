"""Conversion of visible points into renderable candle segments.

Each candle is drawn by a graphics backend as a stacked bar (an invisible bar
up to ``body_bottom`` plus a ``bar_height`` bar for the body) and two one-sided
error bars hanging off invisible anchor lines for the wicks. Values pass
through in the caller's unit without rounding.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np
from numpy.typing import NDArray

from candlestick.types import Direction, NormalizedPoint, RawPoint, RenderSegment

# Padding applied below the lowest low and above the highest high
DOMAIN_PADDING = 2.0

SEGMENT_COLUMNS = (
    "low",
    "high",
    "body_bottom",
    "body_top",
    "bar_height",
    "wick_high_offset",
    "wick_low_offset",
    "low_up",
    "high_up",
    "low_down",
    "high_down",
)


def build_segment(point: RawPoint) -> RenderSegment:
    """Build the segment for a single point."""
    body_bottom = min(point.open, point.close)
    body_top = max(point.open, point.close)
    direction = Direction.UP if point.close > point.open else Direction.DOWN

    upper = (point.high - body_top) / 2
    lower = (body_bottom - point.low) / 2

    wicks: dict[str, float] = (
        {"high_up": upper, "low_up": lower}
        if direction is Direction.UP
        else {"high_down": upper, "low_down": lower}
    )

    return RenderSegment(
        date=point.date,
        low=point.low,
        high=point.high,
        body_bottom=body_bottom,
        body_top=body_top,
        bar_height=body_top - body_bottom,
        wick_high_offset=body_top + upper,
        wick_low_offset=body_bottom - lower,
        direction=direction,
        **wicks,
    )


def build_segments(points: Iterable[NormalizedPoint]) -> list[RenderSegment]:
    """Build segments for the visible points, preserving their order."""
    return [build_segment(p) for p in points]


def value_domain(
    segments: Sequence[RenderSegment],
    padding: float = DOMAIN_PADDING,
) -> tuple[float, float] | None:
    """Padded value range covering every segment.

    :param segments: Segments to cover.
    :param padding: Amount subtracted from the lowest low and added to the
        highest high.
    :returns: ``(low, high)`` or None when there are no segments.
    """
    if not segments:
        return None
    return (
        min(s.low for s in segments) - padding,
        max(s.high for s in segments) + padding,
    )


def segment_columns(segments: Sequence[RenderSegment]) -> dict[str, NDArray[np.float64]]:
    """Column-oriented view of segments for array-based backends.

    Absent wick magnitudes become ``NaN``. The ``date`` column holds strings
    and ``up`` holds booleans.

    :param segments: Segments to convert.
    :returns: Mapping of field name to array, all of equal length.
    """
    columns: dict[str, NDArray] = {
        name: np.array(
            [np.nan if getattr(s, name) is None else getattr(s, name) for s in segments],
            dtype=np.float64,
        )
        for name in SEGMENT_COLUMNS
    }
    columns["date"] = np.array([s.date for s in segments], dtype=object)
    columns["up"] = np.array([s.is_up for s in segments], dtype=bool)
    return columns


__all__ = [
    "DOMAIN_PADDING",
    "SEGMENT_COLUMNS",
    "build_segment",
    "build_segments",
    "value_domain",
    "segment_columns",
]
