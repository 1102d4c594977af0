"""Viewport state: the active time window over a normalized series."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from candlestick.data.normalize import normalize
from candlestick.exceptions import EmptySeriesError, InvalidWindowError
from candlestick.types import NormalizedPoint, RawPoint, TimeWindow

logger = logging.getLogger(__name__)

# Smallest number of points a chart is drawn with
MIN_VISIBLE_POINTS = 2


class ViewportState:
    """Holds the normalized series and the optional active window.

    A window of ``None`` means the full range is shown. Once a window has been
    written (by a drag, a zoom or a reset) it stays set; :attr:`reset_available`
    distinguishes the two cases.

    :param points: Raw or normalized points of the series.
    :param window: Initial window, or None for full range.
    """

    def __init__(
        self,
        points: Iterable[RawPoint | Mapping[str, Any]] = (),
        window: TimeWindow | None = None,
    ) -> None:
        self.series: list[NormalizedPoint] = normalize(points)
        self.window = window
        self.last_fallback = False

    def set_series(self, points: Iterable[RawPoint | Mapping[str, Any]]) -> None:
        """Replace the series. The window is kept as is."""
        self.series = normalize(points)

    def set_window(self, window: TimeWindow | None) -> None:
        self.window = window

    @property
    def reset_available(self) -> bool:
        """Whether a window value has been set."""
        return self.window is not None

    def full_window(self) -> TimeWindow:
        """Window spanning the first and last points of the series.

        :raises EmptySeriesError: If the series has no points.
        """
        if not self.series:
            raise EmptySeriesError("Cannot derive a window from an empty series")
        return TimeWindow(start=self.series[0].date, end=self.series[-1].date)

    def effective_window(self) -> TimeWindow:
        """The stored window, or the full range when none is set.

        :raises EmptySeriesError: If no window is set and the series is empty.
        """
        if self.window is not None:
            return self.window
        return self.full_window()

    def reset(self) -> TimeWindow:
        """Set the window to the full range explicitly.

        The result is a concrete window, not ``None``, so
        :attr:`reset_available` stays true after a reset.

        :returns: The new window.
        :raises EmptySeriesError: If the series has no points.
        """
        self.window = self.full_window()
        return self.window

    def visible_points(self, strict: bool = False) -> list[NormalizedPoint]:
        """Points of the series inside the window.

        Bounds are inclusive and compared as strings against each point's date.
        If fewer than two points fall inside, the first two points of the full
        series are returned instead.

        :param strict: Raise instead of substituting the first two points.
        :returns: Visible points in series order.
        :raises InvalidWindowError: In strict mode, if the window selects
            fewer than two points.
        """
        self.last_fallback = False
        if self.window is None:
            return list(self.series)

        start, end = self.window.start, self.window.end
        selected = [p for p in self.series if start <= p.date <= end]
        if len(selected) >= MIN_VISIBLE_POINTS:
            return selected

        if strict:
            raise InvalidWindowError(
                f"Window [{start}, {end}] selects {len(selected)} point(s); "
                f"at least {MIN_VISIBLE_POINTS} are required"
            )
        logger.warning(
            "Window [%s, %s] selects %d point(s), showing the first %d instead",
            start,
            end,
            len(selected),
            MIN_VISIBLE_POINTS,
        )
        self.last_fallback = True
        return self.series[:MIN_VISIBLE_POINTS]


__all__ = ["MIN_VISIBLE_POINTS", "ViewportState"]
