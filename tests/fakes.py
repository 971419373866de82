from __future__ import annotations

from qrcodeine.errors import SerializationError
from qrcodeine.options import ECLevel, Mode
from qrcodeine.symbol import SymbolMatrix


def checker_matrix(width: int = 21, version: int = 1) -> SymbolMatrix:
    """Matrix whose module (row, col) is dark when row + col is even."""
    cells = bytes((row + col + 1) % 2 for row in range(width) for col in range(width))
    return SymbolMatrix(width=width, version=version, cells=cells)


def diagonal_matrix(width: int = 21, version: int = 1) -> SymbolMatrix:
    """Asymmetric matrix: dark on the main diagonal and along the first row."""
    cells = bytes(1 if row == col or row == 0 else 0 for row in range(width) for col in range(width))
    return SymbolMatrix(width=width, version=version, cells=cells)


class FakeGenerator:
    def __init__(self, matrix: SymbolMatrix | None = None, error: Exception | None = None) -> None:
        self._matrix = matrix or checker_matrix()
        self._error = error
        self.calls: list[tuple[bytes, Mode, int, ECLevel]] = []

    def generate(self, text: bytes, mode: Mode, version: int, ec_level: ECLevel) -> SymbolMatrix:
        self.calls.append((text, mode, version, ec_level))
        if self._error is not None:
            raise self._error
        return self._matrix


class CapturingSerializer:
    """Records the header and a copy of every row, writes a marker to the sink."""

    def __init__(self) -> None:
        self.header = None
        self.rows: list[bytes] = []

    def serialize(self, width, height, palette, rows, sink) -> None:
        self.header = (width, height, palette)
        for row in rows:
            self.rows.append(bytes(row))
        sink.write(b"IMG")


class FailingSerializer:
    """Writes some bytes, consumes a few rows, then fails like a codec would."""

    def __init__(self, after_rows: int = 3, error: Exception | None = None) -> None:
        self._after_rows = after_rows
        self._error = error or SerializationError("codec exploded")
        self.rows_seen = 0
        self.sink = None

    def serialize(self, width, height, palette, rows, sink) -> None:
        self.sink = sink
        sink.write(b"\x89PNG partial")
        for _ in rows:
            self.rows_seen += 1
            if self.rows_seen == self._after_rows:
                raise self._error


class ShortSerializer:
    """Reads only the first few rows, then returns as if it had finished."""

    def __init__(self, rows_to_read: int = 3) -> None:
        self._rows_to_read = rows_to_read
        self.sink = None

    def serialize(self, width, height, palette, rows, sink) -> None:
        self.sink = sink
        for index, _ in enumerate(rows, start=1):
            if index == self._rows_to_read:
                break
        sink.write(b"trunc")
