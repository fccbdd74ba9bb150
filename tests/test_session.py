from dataclasses import replace

import pytest

from qrgrid.hit_test import NO_HOVER_STATUS
from qrgrid.qr_generator import EncodingError, encode, symbol_metrics
from qrgrid.renderer import grid_geometry, render_grid, render_grid_png
from qrgrid.session import GridSession
from qrgrid.viewport import ViewState


def center(index: int, size: int, cell_size: int) -> float:
    gutter, _ = grid_geometry(size, cell_size)
    return gutter + index * cell_size + cell_size / 2


@pytest.fixture
def session() -> GridSession:
    s = GridSession()
    s.generate("https://example.com", "M")
    return s


def test_new_session_has_nothing_to_render() -> None:
    s = GridSession()
    assert s.render() is None
    assert s.export_png() is None
    assert s.print_png() is None
    assert s.status == NO_HOVER_STATUS


def test_generate_renders_initial_frame(session: GridSession) -> None:
    assert session.symbol.version == 2
    _, extent = grid_geometry(25, session.state.cell_size)
    assert session.image.size == (extent, extent)


def test_failed_generate_keeps_previous_symbol(session: GridSession) -> None:
    symbol, image = session.symbol, session.image
    with pytest.raises(EncodingError):
        session.generate("a" * 8000, "H")
    assert session.symbol is symbol
    assert session.image is image
    assert session.render() is not None


def test_every_command_redraws(session: GridSession) -> None:
    before = session.image.tobytes()
    session.viewport.toggle_regions()
    regions = session.image.tobytes()
    assert regions != before
    session.viewport.set_zoom(30)
    assert session.image.size[0] == grid_geometry(25, 30)[1]


def test_frame_matches_pure_render(session: GridSession) -> None:
    session.viewport.set_hover(3, 9)
    expected = render_grid(session.symbol.matrix, session.symbol.version, session.state)
    assert session.image.tobytes() == expected.tobytes()


def test_pointer_move_sets_hover_and_status(session: GridSession) -> None:
    cell = session.state.cell_size
    status = session.pointer_move(center(18, 25, cell), center(18, 25, cell))
    bit = '■' if session.symbol.matrix[18][18] else '□'
    assert status == f"R18 C18 · {bit} · Alignment Pattern"
    assert (session.state.hover_row, session.state.hover_col) == (18, 18)
    assert session.hover.row == 18


def test_pointer_outside_clears_hover(session: GridSession) -> None:
    cell = session.state.cell_size
    session.pointer_move(center(2, 25, cell), center(2, 25, cell))
    assert session.state.has_hover
    assert session.pointer_move(1, 1) == NO_HOVER_STATUS
    assert not session.state.has_hover
    assert session.hover is None


def test_pointer_leave(session: GridSession) -> None:
    session.viewport.set_hover(1, 1)
    assert session.pointer_leave() == NO_HOVER_STATUS
    assert not session.state.has_hover


def test_pointer_move_with_scaled_display(session: GridSession) -> None:
    cell = session.state.cell_size
    _, extent = grid_geometry(25, cell)
    status = session.pointer_move(center(0, 25, cell) / 2, center(6, 25, cell) / 2,
                                  extent / 2, extent / 2)
    assert status.startswith("R6 C0 · ")
    assert status.endswith("Finder Pattern")


def test_snapshot_has_no_hover_and_restores_it(session: GridSession) -> None:
    session.viewport.set_hover(5, 10)
    hovered = session.state
    snapshot = session.export_png()
    expected = render_grid_png(session.symbol.matrix, session.symbol.version,
                               replace(hovered, hover_row=None, hover_col=None))
    assert snapshot == expected
    assert session.state == hovered
    assert session.image.tobytes() == render_grid(
        session.symbol.matrix, session.symbol.version, hovered).tobytes()


def test_print_snapshot_matches_export(session: GridSession) -> None:
    session.viewport.set_hover(5, 10)
    assert session.print_png() == session.export_png()


def test_export_filename(session: GridSession) -> None:
    assert session.export_filename() == "qr-grid-25x25.png"


def test_generate_resets_hover(session: GridSession) -> None:
    session.viewport.set_hover(4, 4)
    session.generate("hello", "L")
    assert not session.state.has_hover
    assert session.status == NO_HOVER_STATUS
    assert session.symbol.size == 21


def test_load_matrix() -> None:
    s = GridSession(ViewState(cell_size=10))
    symbol = s.load_matrix([[1, 0] * 12 + [1] for _ in range(25)])
    assert symbol.version == 2
    assert s.image.size == (270, 270)
    with pytest.raises(ValueError):
        s.load_matrix([[0] * 24 for _ in range(24)])
    assert s.symbol is symbol


def test_load_matrix_checks_ec_level() -> None:
    s = GridSession()
    rows = [[1, 0] * 10 + [1] for _ in range(21)]
    assert s.load_matrix(rows, " h ").ec_level == 'H'
    symbol = s.symbol
    with pytest.raises(ValueError):
        s.load_matrix(rows, "X")
    assert s.symbol is symbol
    assert symbol_metrics(s.symbol)['ec_label'] == 'High'


def test_generate_trims_text(session: GridSession) -> None:
    symbol = session.symbol
    with pytest.raises(EncodingError):
        session.generate("   \n\t", "M")
    assert session.symbol is symbol
    assert session.generate("  hello  ", "M").matrix == encode("hello", "M").matrix


def test_keyboard_shortcuts(session: GridSession) -> None:
    assert session.handle_key('+').name == 'zoom_in'
    assert session.state.cell_size == 22
    assert session.handle_key('=').name == 'zoom_in'
    assert session.handle_key('-').name == 'zoom_out'
    assert session.handle_key('_').name == 'zoom_out'
    assert session.state.cell_size == 20

    assert session.handle_key('r').name == 'toggle_regions'
    assert session.state.show_regions
    assert session.handle_key('R').name == 'toggle_regions'
    assert not session.state.show_regions

    assert session.handle_key('c').name == 'toggle_crosshair'
    assert not session.state.show_crosshair
    session.handle_key('C')
    assert session.state.show_crosshair


def test_fullscreen_and_escape(session: GridSession) -> None:
    assert session.handle_key('Escape') is None
    assert session.handle_key('f').name == 'toggle_fullscreen'
    assert session.fullscreen
    assert session.handle_key('Escape').name == 'exit_fullscreen'
    assert not session.fullscreen
    session.handle_key('F')
    assert session.fullscreen
    session.handle_key('F')
    assert not session.fullscreen


def test_fullscreen_does_not_change_pixels(session: GridSession) -> None:
    before = session.image.tobytes()
    session.toggle_fullscreen()
    assert session.image.tobytes() == before


def test_export_and_print_keys(session: GridSession) -> None:
    session.viewport.set_hover(5, 5)
    action = session.handle_key('e')
    assert action.name == 'export'
    assert action.snapshot.startswith(b'\x89PNG')
    action = session.handle_key('P')
    assert action.name == 'print'
    assert action.snapshot == session.export_png()
    assert session.state.has_hover


def test_keys_ignored_while_typing(session: GridSession) -> None:
    before = session.state
    for key in ('+', '-', 'r', 'c', 'f', 'p', 'e', 'Escape'):
        assert session.handle_key(key, text_entry_focused=True) is None
    assert session.state == before
    assert not session.fullscreen


def test_unknown_key(session: GridSession) -> None:
    assert session.handle_key('x') is None
