"""Tests for the viewport window state."""

import pytest

from candlestick.exceptions import EmptySeriesError, InvalidWindowError
from candlestick.interaction.viewport import ViewportState
from candlestick.types import RawPoint, TimeWindow

DATES = ["2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04", "2024-01-05"]


@pytest.fixture
def viewport() -> ViewportState:
    """Viewport over five daily points, supplied out of order."""
    points = [
        RawPoint(date=d, open=10.0 + i, high=13.0 + i, low=9.0 + i, close=11.0 + i)
        for i, d in enumerate(DATES)
    ]
    return ViewportState(list(reversed(points)))


class TestEffectiveWindow:
    """Tests for effective_window."""

    def test_full_range_when_unset(self, viewport: ViewportState) -> None:
        """Without a window the first and last dates are used."""
        assert viewport.effective_window() == TimeWindow(start=DATES[0], end=DATES[-1])

    def test_stored_window_returned(self, viewport: ViewportState) -> None:
        """A stored window is returned as is."""
        window = TimeWindow(start=DATES[1], end=DATES[3])
        viewport.set_window(window)

        assert viewport.effective_window() == window

    def test_empty_series_raises(self) -> None:
        """No window and no points cannot produce a window."""
        with pytest.raises(EmptySeriesError):
            ViewportState([]).effective_window()


class TestVisiblePoints:
    """Tests for visible_points."""

    def test_no_window_returns_full_series(self, viewport: ViewportState) -> None:
        """Unset window shows every point in order."""
        assert viewport.visible_points() == viewport.series
        assert viewport.last_fallback is False

    def test_inclusive_bounds(self, viewport: ViewportState) -> None:
        """Both bounds are inclusive."""
        viewport.set_window(TimeWindow(start=DATES[1], end=DATES[3]))

        assert [p.date for p in viewport.visible_points()] == DATES[1:4]

    def test_string_comparison_against_iso_bounds(self, viewport: ViewportState) -> None:
        """Datetime bounds compare against date labels as strings."""
        viewport.set_window(
            TimeWindow(start="2024-01-01T04:48:00.000Z", end="2024-01-04T19:12:00.000Z")
        )

        assert [p.date for p in viewport.visible_points()] == DATES[1:4]

    def test_single_point_window_falls_back(self, viewport: ViewportState) -> None:
        """A window holding one point shows the first two points instead."""
        viewport.set_window(TimeWindow(start=DATES[3], end=DATES[3]))

        result = viewport.visible_points()

        assert [p.date for p in result] == DATES[:2]
        assert viewport.last_fallback is True

    def test_empty_window_falls_back(self, viewport: ViewportState) -> None:
        """A window holding nothing shows the first two points."""
        viewport.set_window(TimeWindow(start="2030-01-01", end="2030-02-01"))

        assert [p.date for p in viewport.visible_points()] == DATES[:2]

    def test_inverted_window_falls_back(self, viewport: ViewportState) -> None:
        """An inverted window selects nothing and triggers the fallback."""
        viewport.set_window(TimeWindow(start=DATES[4], end=DATES[0]))

        assert [p.date for p in viewport.visible_points()] == DATES[:2]

    def test_strict_mode_raises(self, viewport: ViewportState) -> None:
        """Strict mode reports the narrow window instead of substituting."""
        viewport.set_window(TimeWindow(start=DATES[3], end=DATES[3]))

        with pytest.raises(InvalidWindowError, match="1 point"):
            viewport.visible_points(strict=True)

    def test_fallback_flag_cleared_on_next_call(self, viewport: ViewportState) -> None:
        """last_fallback reflects only the latest call."""
        viewport.set_window(TimeWindow(start=DATES[3], end=DATES[3]))
        viewport.visible_points()
        viewport.set_window(None)
        viewport.visible_points()

        assert viewport.last_fallback is False


class TestReset:
    """Tests for reset and reset availability."""

    def test_reset_sets_concrete_window(self, viewport: ViewportState) -> None:
        """Reset stores the full range rather than clearing the window."""
        window = viewport.reset()

        assert window == TimeWindow(start=DATES[0], end=DATES[-1])
        assert viewport.window == window

    def test_reset_available_only_after_write(self, viewport: ViewportState) -> None:
        """reset_available is false until a window exists."""
        assert viewport.reset_available is False

        viewport.reset()

        assert viewport.reset_available is True

    def test_reset_empty_series_raises(self) -> None:
        """Resetting an empty series is an error."""
        with pytest.raises(EmptySeriesError):
            ViewportState([]).reset()

    def test_set_series_keeps_window(self, viewport: ViewportState) -> None:
        """Replacing the series leaves the window alone."""
        window = TimeWindow(start=DATES[1], end=DATES[2])
        viewport.set_window(window)

        viewport.set_series(
            [RawPoint(date="2024-01-02", open=1, high=2, low=0, close=1)]
        )

        assert viewport.window == window
        assert len(viewport.series) == 1
