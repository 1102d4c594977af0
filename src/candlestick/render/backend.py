"""Render backends consuming :class:`ChartFrame` objects.

The core never paints anything itself. A graphics library integrates by
implementing :class:`RenderBackend`; the JSON and table backends here serve the
command-line interface.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import TextIO

from candlestick.types import ChartFrame


class RenderBackend(ABC):
    """Abstract base class for render backends.

    All backends must implement the `draw` method, which receives the complete
    state needed for one frame.
    """

    @abstractmethod
    def draw(self, frame: ChartFrame) -> None:
        """Draw a frame.

        :param frame: Segments, drag highlight and reset state to draw.
        """
        ...


class JsonBackend(RenderBackend):
    """Writes each frame as a JSON document.

    :param stream: Output stream (defaults to stdout).
    :param indent: JSON indentation, or None for compact output.
    """

    def __init__(self, stream: TextIO | None = None, indent: int | None = 2) -> None:
        self.stream = stream or sys.stdout
        self.indent = indent

    def draw(self, frame: ChartFrame) -> None:
        self.stream.write(frame.model_dump_json(indent=self.indent))
        self.stream.write("\n")


class TableBackend(RenderBackend):
    """Prints segments as a fixed-width text table.

    :param stream: Output stream (defaults to stdout).
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout

    def _line(self, text: str = "") -> None:
        self.stream.write(text + "\n")

    def draw(self, frame: ChartFrame) -> None:
        window = frame.window
        self._line("=" * 78)
        if window is None:
            self._line("Window:  full range")
        else:
            self._line(f"Window:  {window.start} to {window.end}")
        if frame.window_fallback:
            self._line("         (too narrow, showing the first two points)")
        if frame.value_domain is not None:
            low, high = frame.value_domain
            self._line(f"Domain:  {low:.4f} to {high:.4f}")
        self._line(f"Reset:   {'available' if frame.reset_available else 'unavailable'}")
        if frame.selection is not None:
            self._line(f"Select:  {frame.selection.left} to {frame.selection.right}")
        self._line("=" * 78)
        self._line(
            f"{'Date':<26} {'Dir':<4} {'Low':>10} {'Bottom':>10} "
            f"{'Top':>10} {'High':>10}"
        )
        self._line("-" * 78)
        for s in frame.segments:
            self._line(
                f"{s.date:<26} {s.direction.value:<4} {s.low:>10.4f} "
                f"{s.body_bottom:>10.4f} {s.body_top:>10.4f} {s.high:>10.4f}"
            )
        self._line(f"\n{len(frame.segments)} candles")


__all__ = ["RenderBackend", "JsonBackend", "TableBackend"]
