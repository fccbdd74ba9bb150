# -*- coding: utf-8 -*-
"""
QR Grid Renderer Module

This module draws a QR module matrix as a labeled inspection grid with Pillow:
module fills (flat or colored by structural region), minor and major grid
lines, an outer border, an optional hover crosshair and row/column indices in
a gutter along the top and left edges.

Rendering is a pure function of (matrix, version, view state): drawing the
same inputs twice yields byte-identical pixels.

Functions:
    grid_geometry: Gutter width and canvas extent for a symbol
    render_grid: Draw the inspection grid into a PIL image
    render_grid_png: Same, encoded as PNG bytes
    render_grid_b64: Same, encoded as base64 PNG
    image_png, image_b64: Encode an already rendered frame
    legend_entries: Legend items for the regions present in a version
"""

import base64
import logging
from functools import lru_cache
from io import BytesIO
from typing import Dict, List, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from .functional_areas import Region, classify

logger = logging.getLogger(__name__)


# Region palette: (dark module tone, light module tone)
REGION_COLORS: Dict[Region, Tuple[str, str]] = {
    Region.FINDER_TL: ('#c026d3', '#f0abfc'),   # Fuchsia - Finder patterns
    Region.FINDER_TR: ('#c026d3', '#f0abfc'),
    Region.FINDER_BL: ('#c026d3', '#f0abfc'),
    Region.TIMING: ('#0ea5e9', '#7dd3fc'),      # Sky - Timing patterns
    Region.ALIGNMENT: ('#f59e0b', '#fcd34d'),   # Amber - Alignment patterns
    Region.FORMAT: ('#10b981', '#6ee7b7'),      # Emerald - Format information
    Region.VERSION: ('#ef4444', '#fca5a5'),     # Red - Version information (v≥7)
    Region.DATA: ('#1c1917', '#fafaf9'),        # Stone - Data / ECC
}

PALETTE = {
    'page': (255, 255, 255),
    'dark': '#1c1917',
    'light': '#fafaf9',
    'border': '#1c1917',
    'crosshair_band': (59, 130, 246, 20),      # rgba(59,130,246,0.08)
    'crosshair_line': (59, 130, 246, 153),     # rgba(59,130,246,0.6)
    'grid_minor': (0, 0, 0, 64),               # 0.25
    'grid_major': (0, 0, 0, 115),              # 0.45
    'grid_minor_regions': (0, 0, 0, 51),       # 0.20
    'grid_major_regions': (0, 0, 0, 89),       # 0.35
    'label': '#78716c',
    'label_major': '#44403c',
    'label_hover': '#3b82f6',
}

MIN_GUTTER = 20
MAJOR_EVERY = 5

_FONT_FILES = {
    False: 'DejaVuSansMono.ttf',
    True: 'DejaVuSansMono-Bold.ttf',
}

# Legend items in display order; the finder swatch stands for all three corners
_LEGEND_REGIONS = [
    (Region.FINDER_TL, 'Finder Pattern'),
    (Region.TIMING, 'Timing Pattern'),
    (Region.ALIGNMENT, 'Alignment Pattern'),
    (Region.FORMAT, 'Format Info'),
    (Region.VERSION, 'Version Info'),
    (Region.DATA, 'Data / Error Correction'),
]


def grid_geometry(size: int, cell_size: int) -> Tuple[int, int]:
    """
    Return (gutter, extent) in pixels for a size x size symbol.

    The gutter holds the axis labels; the canvas is extent x extent pixels.
    """
    gutter = max(MIN_GUTTER, cell_size)
    return gutter, gutter + size * cell_size


@lru_cache(maxsize=32)
def _label_font(size: int, bold: bool) -> ImageFont.FreeTypeFont:
    """Monospace label font, falling back to Pillow's bundled font."""
    try:
        return ImageFont.truetype(_FONT_FILES[bold], size=size)
    except OSError:
        logger.debug(f"{_FONT_FILES[bold]} not found, using Pillow default font")
        return ImageFont.load_default(size=size)


def _label_font_size(cell_size: int) -> int:
    return int(max(9, min(cell_size * 0.55, 14)))


def _hline(draw: ImageDraw.ImageDraw, y: int, x0: int, x1: int, width: int, fill) -> None:
    # A width-w line at boundary y covers rows y - w//2 .. y - w//2 + w - 1
    top = y - width // 2
    draw.rectangle([x0, top, x1, top + width - 1], fill=fill)


def _vline(draw: ImageDraw.ImageDraw, x: int, y0: int, y1: int, width: int, fill) -> None:
    left = x - width // 2
    draw.rectangle([left, y0, left + width - 1, y1], fill=fill)


def _has_hover(state) -> bool:
    return state.show_crosshair and state.hover_row is not None and state.hover_col is not None


def module_fill(is_dark: bool, region: Region, show_regions: bool) -> str:
    """
    Return the fill color of a single module.

    Raises:
        KeyError: If region has no palette entry
    """
    if show_regions:
        dark, light = REGION_COLORS[region]
        return dark if is_dark else light
    return PALETTE['dark'] if is_dark else PALETTE['light']


def render_grid(matrix: Sequence[Sequence[bool]], version: int, state) -> Image.Image:
    """
    Render a QR matrix as an inspection grid.

    Layers are drawn bottom to top:

    1. Page and module area background
    2. Crosshair bands under the hovered row/column
    3. Module fills (region overlay or flat two-tone)
    4. 1px grid at every module boundary, 2px grid every 5 modules
    5. 2px outer border
    6. Crosshair edge lines around the hovered row/column
    7. Row and column indices in the gutter

    Args:
        matrix (Sequence[Sequence[bool]]): QR code matrix (True=dark, False=light)
        version (int): QR code version (1-40), selects region geometry
        state (ViewState): cell_size, show_regions, show_crosshair, hover_row,
            hover_col

    Returns:
        Image.Image: RGB image of extent x extent pixels, see grid_geometry

    Example:
        >>> from qrgrid.viewport import ViewState
        >>> img = render_grid(v1_symbol.matrix, 1, ViewState(cell_size=10))
        >>> img.size  # 20px gutter + 21 modules * 10px
        (230, 230)
    """
    rows = list(matrix)
    n = len(rows)
    cell = state.cell_size
    gutter, extent = grid_geometry(n, cell)
    area_end = gutter + n * cell - 1
    hover = _has_hover(state)

    img = Image.new('RGB', (extent, extent), PALETTE['page'])
    # RGBA draw mode blends translucent fills into the RGB canvas
    draw = ImageDraw.Draw(img, 'RGBA')

    # 1. Module area background
    draw.rectangle([gutter, gutter, area_end, area_end], fill=PALETTE['light'])

    # 2. Crosshair background bands
    if hover:
        hy = gutter + state.hover_row * cell
        hx = gutter + state.hover_col * cell
        draw.rectangle([gutter, hy, area_end, hy + cell - 1], fill=PALETTE['crosshair_band'])
        draw.rectangle([hx, gutter, hx + cell - 1, area_end], fill=PALETTE['crosshair_band'])

    # 3. Modules
    for r in range(n):
        for c in range(n):
            x0 = gutter + c * cell
            y0 = gutter + r * cell
            if state.show_regions:
                fill = module_fill(bool(rows[r][c]), classify(r, c, n, version), True)
            else:
                fill = PALETTE['dark'] if rows[r][c] else PALETTE['light']
            draw.rectangle([x0, y0, x0 + cell - 1, y0 + cell - 1], fill=fill)

    # 4. Grid lines, lighter when region colors already carry the contrast
    if state.show_regions:
        minor, major = PALETTE['grid_minor_regions'], PALETTE['grid_major_regions']
    else:
        minor, major = PALETTE['grid_minor'], PALETTE['grid_major']
    for i in range(n + 1):
        pos = gutter + i * cell
        _vline(draw, pos, gutter, area_end, 1, minor)
        _hline(draw, pos, gutter, area_end, 1, minor)
    for i in range(0, n + 1, MAJOR_EVERY):
        pos = gutter + i * cell
        _vline(draw, pos, gutter, area_end, 2, major)
        _hline(draw, pos, gutter, area_end, 2, major)

    # 5. Outer border
    edge = gutter + n * cell
    _hline(draw, gutter, gutter - 1, edge, 2, PALETTE['border'])
    _hline(draw, edge, gutter - 1, edge, 2, PALETTE['border'])
    _vline(draw, gutter, gutter - 1, edge, 2, PALETTE['border'])
    _vline(draw, edge, gutter - 1, edge, 2, PALETTE['border'])

    # 6. Crosshair edge lines
    if hover:
        hy = gutter + state.hover_row * cell
        hx = gutter + state.hover_col * cell
        _hline(draw, hy, gutter, area_end, 2, PALETTE['crosshair_line'])
        _hline(draw, hy + cell, gutter, area_end, 2, PALETTE['crosshair_line'])
        _vline(draw, hx, gutter, area_end, 2, PALETTE['crosshair_line'])
        _vline(draw, hx + cell, gutter, area_end, 2, PALETTE['crosshair_line'])

    # 7. Row & column numbers
    font_size = _label_font_size(cell)
    regular = _label_font(font_size, False)
    bold = _label_font(font_size, True)
    mid_gutter = gutter / 2
    for i in range(n):
        major_label = i % MAJOR_EVERY == 0
        font = bold if major_label else regular
        base_color = PALETTE['label_major'] if major_label else PALETTE['label']
        center = gutter + i * cell + cell / 2

        col_color = PALETTE['label_hover'] if (state.show_crosshair and i == state.hover_col) else base_color
        draw.text((center, mid_gutter), str(i), fill=col_color, font=font, anchor='mm')

        row_color = PALETTE['label_hover'] if (state.show_crosshair and i == state.hover_row) else base_color
        draw.text((mid_gutter, center), str(i), fill=row_color, font=font, anchor='mm')

    return img


def image_png(img: Image.Image) -> bytes:
    """Encode an already rendered frame as PNG bytes."""
    buf = BytesIO()
    img.save(buf, format='PNG')
    return buf.getvalue()


def image_b64(img: Image.Image) -> str:
    """Encode an already rendered frame as base64 PNG, ready for a data: URL."""
    return base64.b64encode(image_png(img)).decode('ascii')


def render_grid_png(matrix: Sequence[Sequence[bool]], version: int, state) -> bytes:
    """Render the grid and encode it as PNG bytes."""
    return image_png(render_grid(matrix, version, state))


def render_grid_b64(matrix: Sequence[Sequence[bool]], version: int, state) -> str:
    """Render the grid as a base64 encoded PNG."""
    return image_b64(render_grid(matrix, version, state))


def legend_entries(version: int) -> List[Dict[str, str]]:
    """
    Build the legend for the regions present in a symbol of this version.

    Alignment patterns only exist from version 2 and version information
    from version 7. The dark/light module entries are always included.

    Returns:
        List[Dict[str, str]]: Items with 'key', 'label' and 'color' (dark tone)
    """
    items = []
    for region, label in _LEGEND_REGIONS:
        if region is Region.ALIGNMENT and version < 2:
            continue
        if region is Region.VERSION and version < 7:
            continue
        items.append({'key': region.value, 'label': label, 'color': REGION_COLORS[region][0]})

    items.append({'key': 'dark-module', 'label': 'Dark Module (fill in)', 'color': PALETTE['dark']})
    items.append({'key': 'light-module', 'label': 'Light Module (leave empty)', 'color': PALETTE['light']})
    return items
