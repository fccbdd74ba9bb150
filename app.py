#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
QR Grid Inspector - Flask Web Application

Thin HTTP adapter over a single GridSession: every route maps to one session
command and answers with JSON or a PNG frame.
"""

import logging
import math
from io import BytesIO
from typing import Optional, Tuple

from flask import Flask, jsonify, request, send_file

from qrgrid.qr_generator import DEFAULT_EC_LEVEL, EncodingError, symbol_metrics
from qrgrid.renderer import image_b64, image_png, legend_entries
from qrgrid.session import GridSession
from qrgrid.viewport import DEFAULT_CELL_SIZE, ZOOM_STEP, ViewState

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.from_mapping(
    DEFAULT_CELL_SIZE=DEFAULT_CELL_SIZE,
    DEFAULT_EC_LEVEL=DEFAULT_EC_LEVEL,
)
# e.g. QRGRID_DEFAULT_CELL_SIZE=24 in the environment
app.config.from_prefixed_env("QRGRID")

_session = GridSession(ViewState(cell_size=app.config['DEFAULT_CELL_SIZE']))


def _read_params(req) -> Tuple[str, str]:
    """Extract and normalize QR generation parameters from Flask request."""
    text = (req.values.get('text') or "").strip()
    ecc = (req.values.get('ecc') or app.config['DEFAULT_EC_LEVEL']).strip().upper()
    return text, ecc


def _read_number(req, name: str) -> Optional[float]:
    """Read a numeric request parameter; missing, malformed, inf and nan read as None."""
    try:
        raw = req.values.get(name)
        value = float(raw) if raw not in (None, "") else None
    except (ValueError, TypeError):
        return None
    if value is None or not math.isfinite(value):
        return None
    return value


def _read_flag(req, name: str) -> bool:
    return (req.values.get(name) or "").strip().lower() in ('1', 'true', 'yes')


def _state_view():
    state = _session.state
    return {
        'cell_size': state.cell_size,
        'show_regions': state.show_regions,
        'show_crosshair': state.show_crosshair,
        'hover_row': state.hover_row,
        'hover_col': state.hover_col,
        'fullscreen': _session.fullscreen,
        'status': _session.status,
        'loaded': _session.symbol is not None,
    }


def _png_response(data: bytes, as_attachment: bool = False):
    return send_file(BytesIO(data), mimetype='image/png', as_attachment=as_attachment,
                     download_name=_session.export_filename())


def _no_symbol():
    return jsonify({'error': "Genera un QR primero."}), 409


@app.route('/generate', methods=['POST'])
def generate():
    text, ecc = _read_params(request)
    if not text:
        return jsonify({'error': "Debes ingresar el texto que quieres codificar."}), 400

    try:
        logger.info(f"Generating QR code with parameters: ecc={ecc}")
        symbol = _session.generate(text, ecc)
    except EncodingError as ex:
        logger.warning(f"QR generation failed: {ex}")
        return jsonify({'error': f"No se pudo generar el QR con los parámetros elegidos: {ex}"}), 400

    metrics = symbol_metrics(symbol)
    metrics['img_b64'] = image_b64(_session.image)
    metrics['legend'] = legend_entries(symbol.version)
    return jsonify(metrics)


@app.route('/grid.png', methods=['GET'])
def grid_png():
    if _session.symbol is None:
        return _no_symbol()
    return _png_response(image_png(_session.render()))


@app.route('/zoom', methods=['POST'])
def zoom():
    cell_size = _read_number(request, 'cell_size')
    if cell_size is not None:
        _session.viewport.set_zoom(int(cell_size))
    else:
        delta = _read_number(request, 'delta')
        _session.viewport.zoom_by(int(delta) if delta is not None else ZOOM_STEP)
    return jsonify(_state_view())


@app.route('/toggle/<name>', methods=['POST'])
def toggle(name):
    if name == 'regions':
        _session.viewport.toggle_regions()
    elif name == 'crosshair':
        _session.viewport.toggle_crosshair()
    elif name == 'fullscreen':
        _session.toggle_fullscreen()
    else:
        return jsonify({'error': f"Unknown toggle: {name}"}), 404
    return jsonify(_state_view())


@app.route('/pointer', methods=['POST'])
def pointer():
    x = _read_number(request, 'x')
    y = _read_number(request, 'y')
    if x is None or y is None:
        _session.pointer_leave()
    else:
        _session.pointer_move(x, y,
                              _read_number(request, 'display_width'),
                              _read_number(request, 'display_height'))
    return jsonify(_state_view())


@app.route('/pointer/leave', methods=['POST'])
def pointer_leave():
    _session.pointer_leave()
    return jsonify(_state_view())


@app.route('/key', methods=['POST'])
def key():
    action = _session.handle_key(request.values.get('key') or "", _read_flag(request, 'text_focus'))
    if action is None:
        return jsonify({'action': None, **_state_view()})
    if action.name in ('export', 'print'):
        if action.snapshot is None:
            return _no_symbol()
        return _png_response(action.snapshot, as_attachment=action.name == 'export')
    return jsonify({'action': action.name, **_state_view()})


@app.route('/export/png', methods=['GET'])
def export_png():
    data = _session.export_png()
    if data is None:
        return _no_symbol()
    return _png_response(data, as_attachment=True)


@app.route('/print', methods=['GET'])
def print_png():
    data = _session.print_png()
    if data is None:
        return _no_symbol()
    return _png_response(data)


@app.route('/legend', methods=['GET'])
def legend():
    if _session.symbol is None:
        return _no_symbol()
    return jsonify(legend_entries(_session.symbol.version))


@app.route('/state', methods=['GET'])
def state():
    return jsonify(_state_view())


if __name__ == "__main__":
    app.run(debug=True)
