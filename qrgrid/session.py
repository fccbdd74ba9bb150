# -*- coding: utf-8 -*-
"""
Grid inspection session.

A GridSession owns the current QR symbol and the viewport, redraws after every
command and keeps the coordinate readout in sync with pointer events. UI
adapters (the Flask app, tests) only talk to the session through its command
methods.
"""

import logging
from typing import Any, Iterable, NamedTuple, Optional

from PIL import Image

from .functional_areas import version_from_size
from .hit_test import NO_HOVER_STATUS, HoverInfo, format_status, probe
from .qr_generator import DEFAULT_EC_LEVEL, EC_LEVELS, QRSymbol, encode, matrix_from_rows
from .renderer import render_grid, render_grid_png
from .viewport import ZOOM_STEP, ViewportController, ViewState

logger = logging.getLogger(__name__)


class KeyAction(NamedTuple):
    name: str
    snapshot: Optional[bytes] = None


class GridSession:
    """
    Rendering session for a single QR symbol.

    Attributes:
        symbol (QRSymbol): Currently displayed symbol, None before the first
            successful encode
        viewport (ViewportController): Zoom, overlay and hover state
        image (Image.Image): Last rendered frame, None without a symbol
        status (str): Coordinate readout for the hovered module
        fullscreen (bool): Layout flag, does not affect the rendered pixels
    """

    def __init__(self, state: Optional[ViewState] = None) -> None:
        self.symbol: Optional[QRSymbol] = None
        self.image: Optional[Image.Image] = None
        self.status = NO_HOVER_STATUS
        self.hover: Optional[HoverInfo] = None
        self.fullscreen = False
        self.viewport = ViewportController(state, on_change=self._redraw)

    @property
    def state(self) -> ViewState:
        return self.viewport.state

    # Symbol management

    def generate(self, text: str, ec_level: str = DEFAULT_EC_LEVEL) -> QRSymbol:
        """
        Encode text and display the new symbol.

        The symbol is fully built before it replaces the current one, so an
        EncodingError leaves the previous symbol displayed and renderable.

        Surrounding whitespace is trimmed before encoding.

        Raises:
            EncodingError: If the text cannot be encoded or is blank
        """
        symbol = encode((text or "").strip(), ec_level)
        self._install(symbol)
        return symbol

    def load_matrix(self, rows: Iterable[Iterable[Any]], ec_level: str = DEFAULT_EC_LEVEL) -> QRSymbol:
        """
        Display a matrix produced by another encoder.

        Raises:
            ValueError: If the matrix is not a valid QR module grid or the
                error correction level is unknown
        """
        ecc = (ec_level or DEFAULT_EC_LEVEL).strip().upper()
        if ecc not in EC_LEVELS:
            raise ValueError(f"Unknown error correction level: {ec_level!r}")
        matrix = matrix_from_rows(rows)
        symbol = QRSymbol(matrix=matrix, version=version_from_size(len(matrix)), ec_level=ecc)
        self._install(symbol)
        return symbol

    def _install(self, symbol: QRSymbol) -> None:
        self.symbol = symbol
        self.hover = None
        self.status = NO_HOVER_STATUS
        self.viewport.clear_hover()

    # Rendering

    def _redraw(self, state: ViewState) -> None:
        if self.symbol is None:
            return
        self.image = render_grid(self.symbol.matrix, self.symbol.version, state)
        logger.debug(f"Rendered {self.image.size[0]}x{self.image.size[1]}px frame")

    def render(self) -> Optional[Image.Image]:
        """Redraw with the current state and return the frame."""
        self._redraw(self.state)
        return self.image

    # Pointer events

    def pointer_move(self, x: float, y: float,
                     display_width: Optional[float] = None,
                     display_height: Optional[float] = None) -> str:
        """
        Update hover from a pointer position and return the status readout.

        Positions outside the module area clear the hover state.
        """
        if self.symbol is None:
            return self.status
        info = probe(self.symbol.matrix, self.symbol.version, self.state.cell_size,
                     x, y, display_width, display_height)
        self.hover = info
        self.status = format_status(info)
        if info is None:
            self.viewport.clear_hover()
        else:
            self.viewport.set_hover(info.row, info.col)
        return self.status

    def pointer_leave(self) -> str:
        self.hover = None
        self.status = NO_HOVER_STATUS
        self.viewport.clear_hover()
        return self.status

    # Layout

    def toggle_fullscreen(self) -> bool:
        self.fullscreen = not self.fullscreen
        self.render()
        return self.fullscreen

    def exit_fullscreen(self) -> bool:
        """Leave fullscreen; returns False if it was not active."""
        if not self.fullscreen:
            return False
        self.toggle_fullscreen()
        return True

    # Snapshots

    def snapshot_png(self) -> Optional[bytes]:
        """
        Capture the grid as PNG without any hover overlay.

        Hover is cleared and the grid redrawn before the capture, then the
        previous hover is restored and the grid redrawn again.

        Returns:
            Optional[bytes]: PNG bytes, or None when no symbol is loaded
        """
        if self.symbol is None:
            return None
        prev = self.state
        self.viewport.clear_hover()
        try:
            return render_grid_png(self.symbol.matrix, self.symbol.version, self.state)
        finally:
            self.viewport.set_hover(prev.hover_row, prev.hover_col)

    def export_png(self) -> Optional[bytes]:
        data = self.snapshot_png()
        if data is not None:
            logger.info(f"Exported {self.export_filename()}")
        return data

    def print_png(self) -> Optional[bytes]:
        data = self.snapshot_png()
        if data is not None:
            logger.info("Prepared print snapshot")
        return data

    def export_filename(self) -> str:
        n = self.symbol.size if self.symbol is not None else 0
        return f"qr-grid-{n}x{n}.png"

    # Keyboard

    def handle_key(self, key: str, text_entry_focused: bool = False) -> Optional[KeyAction]:
        """
        Dispatch a keyboard shortcut.

        Shortcuts are ignored while a text entry control has focus.

        Returns:
            Optional[KeyAction]: The action performed (with the snapshot for
            'export' and 'print'), or None if the key was not handled
        """
        if text_entry_focused:
            return None

        if key in ('+', '='):
            self.viewport.zoom_by(ZOOM_STEP)
            return KeyAction('zoom_in')
        if key in ('-', '_'):
            self.viewport.zoom_by(-ZOOM_STEP)
            return KeyAction('zoom_out')
        if key in ('r', 'R'):
            self.viewport.toggle_regions()
            return KeyAction('toggle_regions')
        if key in ('c', 'C'):
            self.viewport.toggle_crosshair()
            return KeyAction('toggle_crosshair')
        if key in ('f', 'F'):
            self.toggle_fullscreen()
            return KeyAction('toggle_fullscreen')
        if key in ('p', 'P'):
            return KeyAction('print', self.print_png())
        if key in ('e', 'E'):
            return KeyAction('export', self.export_png())
        if key == 'Escape' and self.exit_fullscreen():
            return KeyAction('exit_fullscreen')
        return None
