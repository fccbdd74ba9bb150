# -*- coding: utf-8 -*-
"""
Viewport state and commands for the grid inspector.

ViewState is an immutable value; ViewportController replaces it in response
to discrete UI commands and calls its redraw callback after every change.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_CELL_SIZE = 20
MIN_CELL_SIZE = 8
MAX_CELL_SIZE = 60
ZOOM_STEP = 2


def clamp(v: int, lo: int, hi: int) -> int:
    """Clamp ``v`` to the inclusive ``[lo, hi]`` range."""
    return lo if v < lo else hi if v > hi else v


@dataclass(frozen=True)
class ViewState:
    """Everything besides the matrix that affects the rendered pixels."""
    cell_size: int = DEFAULT_CELL_SIZE
    show_regions: bool = False
    show_crosshair: bool = True
    hover_row: Optional[int] = None
    hover_col: Optional[int] = None

    @property
    def has_hover(self) -> bool:
        return self.hover_row is not None and self.hover_col is not None


class ViewportController:
    """
    Owns the ViewState of a rendering session.

    Every command replaces the state and synchronously invokes ``on_change``
    with the new state, which is expected to run a full redraw.
    """

    def __init__(self, state: Optional[ViewState] = None,
                 on_change: Optional[Callable[[ViewState], None]] = None) -> None:
        self.state = state or ViewState()
        self.on_change = on_change

    def _apply(self, state: ViewState) -> ViewState:
        self.state = state
        if self.on_change is not None:
            self.on_change(state)
        return state

    def set_zoom(self, cell_size: int) -> ViewState:
        """Set the module size in pixels, clamped to [MIN_CELL_SIZE, MAX_CELL_SIZE]."""
        size = clamp(int(cell_size), MIN_CELL_SIZE, MAX_CELL_SIZE)
        logger.debug(f"Zoom {self.state.cell_size}px -> {size}px")
        return self._apply(replace(self.state, cell_size=size))

    def zoom_by(self, delta: int = ZOOM_STEP) -> ViewState:
        return self.set_zoom(self.state.cell_size + delta)

    def toggle_regions(self) -> ViewState:
        return self._apply(replace(self.state, show_regions=not self.state.show_regions))

    def toggle_crosshair(self) -> ViewState:
        return self._apply(replace(self.state, show_crosshair=not self.state.show_crosshair))

    def set_hover(self, row: Optional[int], col: Optional[int]) -> ViewState:
        """Set the hovered module; passing None for either axis clears hover."""
        if row is None or col is None:
            row = col = None
        return self._apply(replace(self.state, hover_row=row, hover_col=col))

    def clear_hover(self) -> ViewState:
        return self.set_hover(None, None)
