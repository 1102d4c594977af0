"""Interaction state: viewport window, drag selection and zoom."""

from candlestick.interaction.selection import RangeSelector, SelectionState
from candlestick.interaction.viewport import MIN_VISIBLE_POINTS, ViewportState
from candlestick.interaction.zoom import (NO_ZOOM, ZOOM_IN, ZOOM_OUT,
                                         PinchTracker, ZoomController,
                                         pivot_fraction, touch_centroid_x,
                                         touch_distance, wheel_direction)

__all__ = [
    "ViewportState",
    "MIN_VISIBLE_POINTS",
    "RangeSelector",
    "SelectionState",
    "ZoomController",
    "PinchTracker",
    "ZOOM_IN",
    "ZOOM_OUT",
    "NO_ZOOM",
    "wheel_direction",
    "pivot_fraction",
    "touch_distance",
    "touch_centroid_x",
]
