# -*- coding: utf-8 -*-
"""
QR Grid Inspector - Core Module

This module renders QR code module matrices as labeled, zoomable inspection
grids, with every module classified into its structural region.

Modules:
    functional_areas: Alignment table and structural region classifier
    qr_generator: segno-backed encoder producing boolean matrices
    renderer: Pillow grid renderer and legend
    hit_test: Pointer to module coordinate mapping
    viewport: View state and zoom/toggle/hover commands
    session: Rendering session tying the pieces together
"""

__version__ = "1.0.0"

from .functional_areas import Region, classify, compute_alignment_centers, build_region_map, version_from_size
from .qr_generator import EncodingError, QRSymbol, encode, symbol_metrics
from .renderer import render_grid, render_grid_png, render_grid_b64, legend_entries
from .hit_test import hit_test, probe, format_status
from .viewport import ViewState, ViewportController
from .session import GridSession

__all__ = [
    'Region',
    'classify',
    'compute_alignment_centers',
    'build_region_map',
    'version_from_size',
    'EncodingError',
    'QRSymbol',
    'encode',
    'symbol_metrics',
    'render_grid',
    'render_grid_png',
    'render_grid_b64',
    'legend_entries',
    'hit_test',
    'probe',
    'format_status',
    'ViewState',
    'ViewportController',
    'GridSession',
]
