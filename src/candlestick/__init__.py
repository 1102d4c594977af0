"""Candlestick chart package root."""

from candlestick.controller import ChartController
from candlestick.exceptions import ChartError

__all__ = ["ChartController", "ChartError"]
