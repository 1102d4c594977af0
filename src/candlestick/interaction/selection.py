"""Drag-to-select state machine.

A drag starts on the label under the pointer, follows the pointer while it
moves and commits the sorted pair of labels as the new window when released.
"""

from __future__ import annotations

import logging
from enum import Enum

from candlestick.interaction.viewport import ViewportState
from candlestick.types import DragSelection, TimeWindow

logger = logging.getLogger(__name__)


class SelectionState(str, Enum):
    """State of the range selector."""

    IDLE = "idle"
    SELECTING = "selecting"


class RangeSelector:
    """Turns pointer events into a committed window on a viewport.

    :param viewport: Viewport whose window is written on commit.
    """

    def __init__(self, viewport: ViewportState) -> None:
        self.viewport = viewport
        self.state = SelectionState.IDLE
        self.selection = DragSelection()

    @property
    def selecting(self) -> bool:
        return self.state is SelectionState.SELECTING

    def pointer_down(self, label: str | None) -> None:
        """Start a selection at ``label``. Ignored without a label."""
        if not label:
            return
        self.selection = DragSelection(left=label)
        self.state = SelectionState.SELECTING
        logger.debug("Selection started at %s", label)

    def pointer_move(self, label: str | None) -> None:
        """Extend the selection to ``label`` while selecting."""
        if self.state is not SelectionState.SELECTING or not label:
            return
        self.selection.right = label

    def pointer_up(self) -> TimeWindow | None:
        """Finish the gesture.

        When both ends are known the pair is sorted and committed as the
        viewport window; otherwise the window is left alone. The selection is
        cleared either way.

        :returns: The committed window, or None if nothing was committed.
        """
        committed: TimeWindow | None = None
        if self.selection.complete:
            start, end = sorted([self.selection.left, self.selection.right])
            committed = TimeWindow(start=start, end=end)
            self.viewport.set_window(committed)
            logger.debug("Selection committed [%s, %s]", start, end)
        elif self.state is SelectionState.SELECTING:
            logger.debug("Selection discarded")

        self.selection = DragSelection()
        self.state = SelectionState.IDLE
        return committed

    # Leaving the plot area ends the gesture the same way as a release.
    pointer_leave = pointer_up


__all__ = ["SelectionState", "RangeSelector"]
