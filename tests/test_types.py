"""Tests for core type definitions."""

import pytest
from pydantic import ValidationError

from candlestick.types import (ChartConfig, ChartFrame, Direction,
                               DisplayConfig, DragSelection, NormalizedPoint,
                               RawPoint, RenderSegment, SeriesStyle,
                               TimeWindow, ZoomPolicy)


def test_raw_point_creation_and_attributes() -> None:
    """RawPoint should store all OHLC fields."""
    point = RawPoint(date="2024-01-01", open=1.0, high=2.0, low=0.5, close=1.5)

    assert point.date == "2024-01-01"
    assert point.open == 1.0
    assert point.high == 2.0
    assert point.low == 0.5
    assert point.close == 1.5


def test_raw_point_is_frozen() -> None:
    """Points cannot be mutated in place."""
    point = RawPoint(date="2024-01-01", open=1.0, high=2.0, low=0.5, close=1.5)

    with pytest.raises(ValidationError):
        point.close = 3.0  # type: ignore[misc]


def test_normalized_point_is_subclass_of_raw_point() -> None:
    """NormalizedPoint should inherit from RawPoint."""
    point = NormalizedPoint(
        date="2024-01-01", open=1.0, high=2.0, low=0.5, close=1.5, date_time=0
    )

    assert isinstance(point, RawPoint)
    assert point.date_time == 0


def test_time_window_equality_and_hash() -> None:
    """Windows compare by value and can be used as cache keys."""
    a = TimeWindow(start="2024-01-01", end="2024-01-02")
    b = TimeWindow(start="2024-01-01", end="2024-01-02")

    assert a == b
    assert hash(a) == hash(b)


def test_drag_selection_complete() -> None:
    """A selection is complete only with both ends."""
    selection = DragSelection(left="2024-01-01")
    assert selection.complete is False

    selection.right = "2024-01-03"
    assert selection.complete is True


def test_render_segment_defaults_leave_magnitudes_absent() -> None:
    """Unset magnitude fields are None."""
    seg = RenderSegment(
        date="2024-01-01",
        low=1.0,
        high=4.0,
        body_bottom=2.0,
        body_top=3.0,
        bar_height=1.0,
        wick_high_offset=3.5,
        wick_low_offset=1.5,
        direction=Direction.UP,
        low_up=0.5,
        high_up=0.5,
    )

    assert seg.low_down is None
    assert seg.high_down is None
    assert seg.is_up is True


def test_direction_values() -> None:
    """Direction serializes as lowercase strings."""
    assert Direction.UP.value == "up"
    assert Direction("down") is Direction.DOWN


def test_display_config_defaults() -> None:
    """Display defaults match the stock chart colours and sizes."""
    display = DisplayConfig()

    assert display.height == 400
    assert display.color_up == "#00906F"
    assert display.color_down == "#B23507"
    assert display.bar_width == 8
    assert display.line_width == 4
    assert display.wick_stroke_width == 3
    assert display.series == {}


def test_display_config_series() -> None:
    """Series entries are parsed into SeriesStyle."""
    display = DisplayConfig.model_validate(
        {"series": {"close": {"label": "Close", "color": "#333"}}}
    )

    assert display.series["close"] == SeriesStyle(label="Close", color="#333")


def test_zoom_policy_defaults_are_unbounded() -> None:
    """Default zoom has a 10% step and no clamping."""
    policy = ZoomPolicy()

    assert policy.step == 0.1
    assert policy.clamp_to_series is False
    assert policy.min_span_ms is None


def test_zoom_policy_rejects_non_positive_step() -> None:
    """A zero step is invalid."""
    with pytest.raises(ValidationError):
        ZoomPolicy(step=0.0)


def test_chart_frame_json_roundtrip() -> None:
    """Frames serialize to JSON for backends."""
    frame = ChartFrame(window=TimeWindow(start="a", end="b"), reset_available=True)

    restored = ChartFrame.model_validate_json(frame.model_dump_json())

    assert restored == frame


def test_chart_config_defaults() -> None:
    """ChartConfig only requires a source."""
    config = ChartConfig(source="csv")

    assert config.source_params == {}
    assert config.window is None
    assert config.zoom == ZoomPolicy()
    assert config.log_level == "INFO"
