"""Tray selection for a shelf view.

Cells are selected by clicking, or by long-pressing a cell and dragging across
others to select a contiguous run. The selection map is shared with whatever
renders the shelf and lives as long as the view does.
"""
import asyncio
import enum
import logging
from typing import Callable, Dict, Hashable, List, Optional, Sequence

from stockroom.config import settings

logger = logging.getLogger(__name__)

Grid = Sequence[Sequence[Hashable]]


class GestureState(str, enum.Enum):
    IDLE = "idle"
    PRESS_ARMED = "press_armed"
    DRAGGING = "dragging"


def call_later(delay: float, callback: Callable[[], None]):
    """Schedule ``callback`` on the running event loop; returns a cancellable handle."""
    return asyncio.get_running_loop().call_later(delay, callback)


def drag_order(grid: Grid) -> List[Hashable]:
    """
    Flatten a grid into drag order: columns left to right, and within a column
    from the last cell to the first, so that dragging up the screen extends the
    run upwards.
    """
    return [cell for column in grid for cell in reversed(list(column))]


def select_range(grid: Grid, selected: Dict[Hashable, bool], anchor: Hashable, target: Hashable) -> None:
    """
    Mark the contiguous run between ``anchor`` and ``target`` (inclusive) in drag order.

    The walk flips its "inside" flag once at each endpoint, so it does not need
    to know which endpoint comes first; when both are the same cell only that
    cell is marked. Nothing is marked unless both endpoints are in the grid.
    """
    order = drag_order(grid)
    if not (any(cell is anchor for cell in order) and any(cell is target for cell in order)):
        return
    inside = False
    for cell in order:
        is_anchor = cell is anchor
        is_target = cell is target
        if inside or is_anchor or is_target:
            selected[cell] = True
        inside ^= is_anchor ^ is_target


class RangeSelector:
    """
    Click and long-press-drag selection over a grid of tray cells.

    ``grid`` returns the current columns of cells (trays and spaces). Cells are
    compared by identity, so spaces must come from a ``TraySpaceCache``.
    """

    def __init__(
        self,
        grid: Callable[[], Grid],
        selected: Optional[Dict[Hashable, bool]] = None,
        long_press_timeout: Optional[float] = None,
        scheduler: Callable = call_later,
    ):
        self.grid = grid
        self.selected = selected if selected is not None else {}
        if long_press_timeout is None:
            long_press_timeout = settings.LONG_PRESS_TIMEOUT_MS / 1000
        self.long_press_timeout = long_press_timeout
        self.scheduler = scheduler

        self.state = GestureState.IDLE
        self.is_multiple_select = False
        self.anchor: Optional[Hashable] = None
        self.selected_before: Dict[Hashable, bool] = {}
        self._timer = None

    @property
    def selected_cells(self) -> List[Hashable]:
        return [cell for cell, is_selected in self.selected.items() if is_selected]

    def clear(self) -> None:
        self._cancel_timer()
        self.selected.clear()
        self.state = GestureState.IDLE
        self.is_multiple_select = False
        self.anchor = None

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def pointer_down(self, cell: Hashable) -> None:
        """Arm a long press on ``cell``."""
        self._cancel_timer()
        self.anchor = cell
        self.state = GestureState.PRESS_ARMED
        self._timer = self.scheduler(self.long_press_timeout, self._on_long_press)

    def pointer_enter(self, cell: Hashable) -> None:
        if self.state == GestureState.DRAGGING:
            self.update_range(cell)

    def pointer_leave(self) -> None:
        """Leaving the pressed cell before the long press fires abandons the gesture."""
        if self.state == GestureState.PRESS_ARMED:
            self._cancel_timer()
            self.state = GestureState.IDLE
            self.anchor = None

    def pointer_up(self, cell: Hashable) -> None:
        if self.state == GestureState.DRAGGING:
            self.end_drag()
        elif self.state == GestureState.PRESS_ARMED:
            self._cancel_timer()
            self.state = GestureState.IDLE
            self.anchor = None
            self.click(cell)
        else:
            self.click(cell)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_long_press(self) -> None:
        self._timer = None
        if self.state == GestureState.PRESS_ARMED:
            self.start_drag()

    def start_drag(self) -> None:
        """Enter drag mode from the armed cell, remembering the selection to build on."""
        self.state = GestureState.DRAGGING
        self.is_multiple_select = True
        self.selected_before = dict(self.selected)
        self.update_range(self.anchor)

    def update_range(self, target: Hashable) -> None:
        """Reset to the selection from before the drag, then add the run from the anchor to ``target``."""
        for cell in list(self.selected):
            self.selected[cell] = self.selected_before.get(cell, False)
        select_range(self.grid(), self.selected, self.anchor, target)

    def end_drag(self) -> None:
        self.state = GestureState.IDLE
        self.anchor = None
        self.selected_before = {}
        if len(self.selected_cells) == 1:
            self.is_multiple_select = False

    def click(self, cell: Hashable) -> None:
        """
        Toggle ``cell``.

        Outside multiple select a click that selects a cell replaces the current
        selection; inside it, clicks toggle cells independently and the view drops
        back to single select once only one cell is left.
        """
        newly_selected = not self.selected.get(cell, False)
        if not self.is_multiple_select and newly_selected:
            for other in list(self.selected):
                self.selected[other] = False
            self.selected[cell] = True
        else:
            self.selected[cell] = newly_selected
            if self.is_multiple_select and len(self.selected_cells) == 1:
                self.is_multiple_select = False
