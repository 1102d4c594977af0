"""Chart controller: the command surface of an interactive candlestick chart.

Example usage::

    from candlestick import ChartController

    chart = ChartController(points)
    chart.begin_select("2024-01-02")
    chart.update_select("2024-01-04")
    chart.commit_select()

    chart.handle_wheel(delta_y=-1, pivot=0.5)
    backend.draw(chart.frame())

Every command is a complete state transition. Reads of derived data go through
a cache keyed by the window and a version counter bumped on every
:meth:`ChartController.set_points`.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from candlestick.interaction.selection import RangeSelector
from candlestick.interaction.viewport import ViewportState
from candlestick.interaction.zoom import Touch, ZoomController
from candlestick.render.segments import build_segments, value_domain
from candlestick.types import (ChartFrame, DisplayConfig, DragSelection,
                               RawPoint, RenderSegment, TimeWindow, ZoomPolicy)

logger = logging.getLogger(__name__)


class ChartController:
    """Mutable chart state with command methods for each input event.

    :param points: Raw points of the series.
    :param display: Display parameters passed through to frames.
    :param zoom_policy: Zoom step and clamping.
    :param window: Initial window, or None for full range.
    :param strict: Raise :class:`InvalidWindowError` instead of substituting
        the first two points for a window that is too narrow.
    """

    def __init__(
        self,
        points: Iterable[RawPoint | Mapping[str, Any]] = (),
        display: DisplayConfig | None = None,
        zoom_policy: ZoomPolicy | None = None,
        window: TimeWindow | None = None,
        strict: bool = False,
    ) -> None:
        self.display = display or DisplayConfig()
        self.strict = strict
        self.viewport = ViewportState(points, window=window)
        self.selector = RangeSelector(self.viewport)
        self.zoom = ZoomController(self.viewport, zoom_policy)

        self.source_version = 0
        self._cache_key: tuple[TimeWindow | None, int] | None = None
        self._cached_segments: list[RenderSegment] = []
        self._cached_fallback = False

    # ------------------------------------------------------------------
    # Source
    # ------------------------------------------------------------------

    def set_points(self, points: Iterable[RawPoint | Mapping[str, Any]]) -> None:
        """Replace the series, keeping the current window."""
        self.viewport.set_series(points)
        self.source_version += 1
        logger.debug(
            "Series replaced: %d points (version %d)",
            len(self.viewport.series),
            self.source_version,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def begin_select(self, label: str | None) -> None:
        self.selector.pointer_down(label)

    def update_select(self, label: str | None) -> None:
        self.selector.pointer_move(label)

    def commit_select(self) -> TimeWindow | None:
        return self.selector.pointer_up()

    def cancel_select(self) -> TimeWindow | None:
        """Pointer left the plot area; ends the drag like a release."""
        return self.selector.pointer_leave()

    def reset_window(self) -> TimeWindow:
        """Set the window to the full series range.

        :raises EmptySeriesError: If the series has no points.
        """
        window = self.viewport.reset()
        logger.debug("Window reset to [%s, %s]", window.start, window.end)
        return window

    def apply_zoom(self, direction: int, pivot: float) -> TimeWindow | None:
        return self.zoom.apply(direction, pivot)

    def handle_wheel(self, delta_y: float, pivot: float) -> TimeWindow | None:
        return self.zoom.handle_wheel(delta_y, pivot)

    def handle_pinch(
        self,
        touches: Sequence[Touch],
        plot_left: float,
        plot_width: float,
    ) -> TimeWindow | None:
        return self.zoom.handle_pinch(touches, plot_left, plot_width)

    def end_pinch(self) -> None:
        self.zoom.end_pinch()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def window(self) -> TimeWindow | None:
        return self.viewport.window

    @property
    def reset_available(self) -> bool:
        return self.viewport.reset_available

    @property
    def selection(self) -> DragSelection:
        return self.selector.selection

    def segments(self) -> list[RenderSegment]:
        """Segments for the visible window, recomputed when the window or series changes."""
        key = (self.viewport.window, self.source_version)
        if key != self._cache_key:
            points = self.viewport.visible_points(strict=self.strict)
            self._cached_segments = build_segments(points)
            self._cached_fallback = self.viewport.last_fallback
            self._cache_key = key
        return list(self._cached_segments)

    def frame(self) -> ChartFrame:
        """Snapshot of everything a render backend needs."""
        segments = self.segments()
        selection = self.selection
        return ChartFrame(
            segments=segments,
            selection=selection.model_copy() if selection.complete else None,
            reset_available=self.reset_available,
            window=self.window,
            value_domain=value_domain(segments),
            window_fallback=self._cached_fallback,
            display=self.display,
        )


__all__ = ["ChartController"]
