"""Wheel and pinch zoom around a pivot point.

Each zoom event removes (zoom in) or adds (zoom out) a fixed fraction of the
current span. The change is split between the two bounds according to the
pivot fraction, so the instant under the cursor or pinch centroid stays put.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from candlestick.data.normalize import format_instant, parse_instant
from candlestick.interaction.viewport import ViewportState
from candlestick.types import TimeWindow, ZoomPolicy

logger = logging.getLogger(__name__)

ZOOM_IN = 1
ZOOM_OUT = -1
NO_ZOOM = 0

Touch = tuple[float, float]


def wheel_direction(delta_y: float) -> int:
    """Zoom direction for a wheel event: scrolling up zooms in."""
    return ZOOM_IN if delta_y < 0 else ZOOM_OUT


def pivot_fraction(client_x: float, left: float, width: float) -> float:
    """Horizontal position of ``client_x`` within the plot area.

    The result is not clamped; positions outside the plot area give values
    outside ``[0, 1]``.

    :param client_x: Pointer x coordinate.
    :param left: Left edge of the plot area.
    :param width: Width of the plot area.
    :returns: ``0`` at the left edge, ``1`` at the right edge.
    """
    if width <= 0:
        return 0.5
    return (client_x - left) / width


def touch_distance(first: Touch, second: Touch) -> float:
    return math.hypot(first[0] - second[0], first[1] - second[1])


def touch_centroid_x(first: Touch, second: Touch) -> float:
    return (first[0] + second[0]) / 2


class PinchTracker:
    """Derives a zoom direction from successive two-finger distances.

    The first event of a gesture only records a baseline and yields
    :data:`NO_ZOOM`.
    """

    def __init__(self) -> None:
        self.last_distance: float | None = None

    def update(self, distance: float) -> int:
        """Record ``distance`` and return the direction relative to the last one."""
        direction = NO_ZOOM
        if self.last_distance:
            direction = ZOOM_IN if distance > self.last_distance else ZOOM_OUT
        self.last_distance = distance
        return direction

    def end_gesture(self) -> None:
        self.last_distance = None


class ZoomController:
    """Applies zoom steps to a viewport window.

    :param viewport: Viewport whose window is read and rewritten.
    :param policy: Step size and optional clamping.
    """

    def __init__(self, viewport: ViewportState, policy: ZoomPolicy | None = None) -> None:
        self.viewport = viewport
        self.policy = policy or ZoomPolicy()
        self.pinch = PinchTracker()

    def _bounds(self) -> tuple[int, int] | None:
        window = self.viewport.effective_window()
        start = parse_instant(window.start)
        end = parse_instant(window.end)
        if start is None or end is None:
            logger.warning(
                "Cannot zoom window [%s, %s]: bounds are not dates",
                window.start,
                window.end,
            )
            return None
        return start, end

    def apply(self, direction: int, pivot: float) -> TimeWindow | None:
        """Zoom the current window one step.

        With the default policy the new window is committed unconditionally:
        it is neither clamped to the series nor corrected when it inverts.

        :param direction: ``1`` to zoom in, ``-1`` to zoom out, ``0`` for none.
        :param pivot: Fraction of the plot width the zoom is centred on.
        :returns: The committed window, or None if nothing changed.
        """
        if direction == NO_ZOOM or not self.viewport.series:
            return None

        bounds = self._bounds()
        if bounds is None:
            return None
        start, end = bounds

        span = end - start
        delta = span * self.policy.step * direction
        new_start = start + delta * pivot
        new_end = end - delta * (1 - pivot)

        if self.policy.min_span_ms is not None and direction == ZOOM_IN:
            if new_end - new_start < self.policy.min_span_ms:
                logger.debug("Zoom in refused below %d ms", self.policy.min_span_ms)
                return None

        if self.policy.clamp_to_series:
            first = self.viewport.series[0].date_time
            last = self.viewport.series[-1].date_time
            new_start = min(max(new_start, first), last)
            new_end = min(max(new_end, first), last)

        try:
            window = TimeWindow(
                start=format_instant(new_start), end=format_instant(new_end)
            )
        except OverflowError:
            logger.warning(
                "Zoom %+d at %.3f leaves the representable time range; window kept",
                direction,
                pivot,
            )
            return None
        self.viewport.set_window(window)
        logger.debug(
            "Zoom %+d at %.3f -> [%s, %s]", direction, pivot, window.start, window.end
        )
        return window

    def handle_wheel(self, delta_y: float, pivot: float) -> TimeWindow | None:
        return self.apply(wheel_direction(delta_y), pivot)

    def handle_pinch(
        self,
        touches: Sequence[Touch],
        plot_left: float,
        plot_width: float,
    ) -> TimeWindow | None:
        """Zoom from a touch-move event.

        Events with anything other than two touches are ignored.

        :param touches: ``(x, y)`` screen positions of the active touches.
        :param plot_left: Left edge of the plot area.
        :param plot_width: Width of the plot area.
        :returns: The committed window, or None if nothing changed.
        """
        if len(touches) != 2:
            return None
        first, second = touches
        direction = self.pinch.update(touch_distance(first, second))
        pivot = pivot_fraction(touch_centroid_x(first, second), plot_left, plot_width)
        return self.apply(direction, pivot)

    def end_pinch(self) -> None:
        self.pinch.end_gesture()


__all__ = [
    "ZOOM_IN",
    "ZOOM_OUT",
    "NO_ZOOM",
    "wheel_direction",
    "pivot_fraction",
    "touch_distance",
    "touch_centroid_x",
    "PinchTracker",
    "ZoomController",
]
