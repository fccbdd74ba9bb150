import pytest

from qrgrid.qr_generator import EncodingError, QRSymbol, encode, matrix_from_rows, symbol_metrics


def test_encode_small_payload_is_version_1() -> None:
    symbol = encode("hello", "M")
    assert isinstance(symbol, QRSymbol)
    assert symbol.version == 1
    assert symbol.size == 21
    assert symbol.ec_level == 'M'
    assert isinstance(symbol.matrix, tuple)
    assert all(isinstance(v, bool) for row in symbol.matrix for v in row)


def test_encode_produces_finder_patterns() -> None:
    matrix = encode("hello", "L").matrix
    n = len(matrix)
    for r0, c0 in ((0, 0), (0, n - 7), (n - 7, 0)):
        assert all(matrix[r0][c0 + i] for i in range(7))
        assert matrix[r0 + 3][c0 + 3]
        assert not matrix[r0 + 1][c0 + 1]


def test_version_follows_size_law() -> None:
    symbol = encode("https://example.com", "M")
    assert symbol.version == 2
    assert symbol.size == 21 + 4 * (symbol.version - 1)


def test_higher_ec_level_needs_larger_symbol() -> None:
    text = "The quick brown fox jumps over the lazy dog"
    assert encode(text, "H").version > encode(text, "L").version


def test_ec_level_is_normalized() -> None:
    assert encode("hello", " q ").ec_level == 'Q'


def test_encode_rejects_unknown_level() -> None:
    with pytest.raises(EncodingError):
        encode("hello", "X")


def test_encode_rejects_empty_text() -> None:
    with pytest.raises(EncodingError):
        encode("", "M")


def test_encode_capacity_exceeded() -> None:
    with pytest.raises(EncodingError) as excinfo:
        encode("a" * 8000, "H")
    assert excinfo.value.__cause__ is not None


def test_matrix_from_rows_validates_shape() -> None:
    with pytest.raises(ValueError):
        matrix_from_rows([[0] * 21 for _ in range(20)])
    with pytest.raises(ValueError):
        matrix_from_rows([[0] * 23 for _ in range(23)][:-1] + [[0] * 22])
    with pytest.raises(ValueError):
        matrix_from_rows([[0] * 19 for _ in range(19)])
    with pytest.raises(ValueError):
        matrix_from_rows([[0] * 22 for _ in range(22)])


def test_matrix_from_rows_accepts_bytearrays() -> None:
    rows = [bytearray([1, 0] * 10 + [1]) for _ in range(21)]
    matrix = matrix_from_rows(rows)
    assert matrix[0][0] is True
    assert matrix[0][1] is False


def test_symbol_metrics() -> None:
    symbol = encode("hello", "M")
    metrics = symbol_metrics(symbol)
    assert metrics['size'] == 21
    assert metrics['modules'] == 441
    assert metrics['dark_modules'] + metrics['light_modules'] == 441
    assert metrics['dark_modules'] == sum(sum(row) for row in symbol.matrix)
    assert metrics['ec_label'] == 'Medium'
    assert metrics['version'] == 1
    assert 99 <= metrics['dark_percent'] + metrics['light_percent'] <= 101
