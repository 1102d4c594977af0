"""Core type definitions for the candlestick chart core.

All data models use Pydantic BaseModel for automatic validation, JSON
serialization, and better error messages.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Base Configuration
# ---------------------------------------------------------------------------


class FrozenModel(BaseModel):
    """Base model with frozen (immutable) configuration."""

    model_config = ConfigDict(frozen=True)


class MutableModel(BaseModel):
    """Base model for mutable state objects."""

    model_config = ConfigDict(validate_assignment=True)


# ---------------------------------------------------------------------------
# Series Types
# ---------------------------------------------------------------------------


class RawPoint(FrozenModel):
    """Raw OHLC observation as supplied by the caller.

    :param date: Date of the observation, parseable as an instant.
    :param open: Opening value.
    :param high: Highest value during the period.
    :param low: Lowest value during the period.
    :param close: Closing value.
    """

    date: str
    open: float
    high: float
    low: float
    close: float


class NormalizedPoint(RawPoint):
    """Point whose date has been parsed into an instant.

    :param date_time: Parsed instant in epoch milliseconds (UTC).
    """

    date_time: int


class TimeWindow(FrozenModel):
    """Inclusive time window over the normalized series.

    Bounds are compared as date strings against ``NormalizedPoint.date``, so
    they must use the same format as the input dates.

    :param start: First date of the window (inclusive).
    :param end: Last date of the window (inclusive).
    """

    start: str
    end: str


class DragSelection(MutableModel):
    """Bounds of an in-progress drag gesture.

    :param left: Label under the pointer when the drag started.
    :param right: Label under the pointer at the latest move.
    """

    left: str | None = None
    right: str | None = None

    @property
    def complete(self) -> bool:
        """Whether both ends of the drag are known."""
        return bool(self.left) and bool(self.right)


# ---------------------------------------------------------------------------
# Render Types
# ---------------------------------------------------------------------------


class Direction(str, Enum):
    """Direction of a candle."""

    UP = "up"
    DOWN = "down"


class RenderSegment(FrozenModel):
    """Renderable primitives for one candle.

    Wick magnitudes are split by direction so a renderer can draw each pair in
    the matching colour by only reading the populated fields.

    :param date: Date of the source point.
    :param low: Lowest value.
    :param high: Highest value.
    :param body_bottom: ``min(open, close)``.
    :param body_top: ``max(open, close)``.
    :param bar_height: ``body_top - body_bottom``.
    :param wick_high_offset: Midpoint between the body top and the high.
    :param wick_low_offset: Midpoint between the low and the body bottom.
    :param direction: ``UP`` when close is above open, ``DOWN`` otherwise.
    :param low_up: Lower wick magnitude for up candles.
    :param high_up: Upper wick magnitude for up candles.
    :param low_down: Lower wick magnitude for down candles.
    :param high_down: Upper wick magnitude for down candles.
    """

    date: str
    low: float
    high: float
    body_bottom: float
    body_top: float
    bar_height: float
    wick_high_offset: float
    wick_low_offset: float
    direction: Direction
    low_up: float | None = None
    high_up: float | None = None
    low_down: float | None = None
    high_down: float | None = None

    @property
    def is_up(self) -> bool:
        return self.direction is Direction.UP


# ---------------------------------------------------------------------------
# Configuration Types
# ---------------------------------------------------------------------------


class SeriesStyle(FrozenModel):
    """Display entry for a named series (opaque to the core).

    :param label: Human readable label.
    :param color: Colour used by the renderer, if any.
    """

    label: str
    color: str | None = None


class DisplayConfig(FrozenModel):
    """Numeric and colour parameters passed through to the renderer.

    :param height: Plot height in pixels.
    :param color_up: Colour for up candles.
    :param color_down: Colour for down candles.
    :param bar_width: Candle body width in pixels.
    :param line_width: Wick cap width in pixels.
    :param series: Display entries keyed by series name.
    """

    height: int = 400
    color_up: str = "#00906F"
    color_down: str = "#B23507"
    bar_width: int = 8
    line_width: int = 4
    series: dict[str, SeriesStyle] = Field(default_factory=dict)

    @property
    def wick_stroke_width(self) -> int:
        """Stroke width of the wick lines."""
        return self.line_width - 1


class ZoomPolicy(FrozenModel):
    """Tuning for wheel and pinch zoom.

    The defaults leave zoom unbounded: the window may collapse or invert.

    :param step: Fraction of the current span removed or added per event.
    :param clamp_to_series: Clamp new bounds to the first/last instants.
    :param min_span_ms: Refuse zoom-ins that would go below this span.
    """

    step: float = Field(default=0.1, gt=0.0)
    clamp_to_series: bool = False
    min_span_ms: int | None = Field(default=None, ge=0)


class ChartFrame(FrozenModel):
    """Everything a render backend needs to draw one frame.

    :param segments: Candles for the visible window.
    :param selection: Drag bounds to highlight, only when both ends are set.
    :param reset_available: Whether a window has been set.
    :param window: The stored window, ``None`` for full range.
    :param value_domain: Padded ``(min, max)`` of the visible values.
    :param window_fallback: Whether the window selected fewer than two points
        and the first two points were substituted.
    :param display: Display parameters.
    """

    segments: list[RenderSegment] = Field(default_factory=list)
    selection: DragSelection | None = None
    reset_available: bool = False
    window: TimeWindow | None = None
    value_domain: tuple[float, float] | None = None
    window_fallback: bool = False
    display: DisplayConfig = Field(default_factory=DisplayConfig)


class ChartConfig(FrozenModel):
    """Configuration for rendering a chart from a point source.

    :param source: Point source type (e.g., "csv", "json", "yahoo").
    :param source_params: Source-specific parameters.
    :param display: Display parameters.
    :param window: Initial window, or None for full range.
    :param zoom: Zoom tuning.
    :param log_level: Logging level.
    """

    source: str
    source_params: dict[str, Any] = Field(default_factory=dict)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    window: TimeWindow | None = None
    zoom: ZoomPolicy = Field(default_factory=ZoomPolicy)
    log_level: str = "INFO"


# ---------------------------------------------------------------------------
# Exports
# ---------------------------------------------------------------------------

__all__ = [
    # Base models
    "FrozenModel",
    "MutableModel",
    # Series
    "RawPoint",
    "NormalizedPoint",
    "TimeWindow",
    "DragSelection",
    # Render
    "Direction",
    "RenderSegment",
    "ChartFrame",
    # Configuration
    "SeriesStyle",
    "DisplayConfig",
    "ZoomPolicy",
    "ChartConfig",
]
