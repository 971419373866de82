"""Symbol generation: turn payload bytes into a QR module matrix.

Two backends are available, segno (default, all four modes) and the qrcode
library. Both treat a requested version as the minimum: when the payload does
not fit, the smallest larger version that holds it is used instead.
"""

from dataclasses import dataclass
from typing import Protocol

import qrcode
import qrcode.constants
import qrcode.util
import segno
from qrcode.exceptions import DataOverflowError as QRCodeOverflowError

from qrcodeine.errors import EncodeFailure, InvalidInput, OutOfMemory
from qrcodeine.logging import audit, get_logger, trace
from qrcodeine.options import ECLevel, Mode

log = get_logger("symbol")


@dataclass(frozen=True)
class SymbolMatrix:
    """Square module matrix, row-major, one byte per module (1 = dark)."""
    width: int
    version: int
    cells: bytes

    def __post_init__(self):
        if len(self.cells) != self.width * self.width:
            raise ValueError(
                f"matrix of width {self.width} needs {self.width * self.width} cells, got {len(self.cells)}"
            )

    def module(self, row: int, col: int) -> int:
        return self.cells[row * self.width + col] & 1

    @classmethod
    def from_rows(cls, rows, version: int) -> "SymbolMatrix":
        """Build a matrix from an iterable of rows of truthy/falsy modules."""
        rows = [bytes(1 if m else 0 for m in row) for row in rows]
        return cls(width=len(rows), version=version, cells=b"".join(rows))


class SymbolGenerator(Protocol):
    """Interface for symbol generation backends."""

    def generate(self, text: bytes, mode: Mode, version: int, ec_level: ECLevel) -> SymbolMatrix:
        """Encode text, raising InvalidInput, OutOfMemory or EncodeFailure on failure."""
        ...


def _as_text(text: bytes, mode: Mode) -> str:
    try:
        return text.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidInput(f"input data is invalid for {mode.name.lower()} mode") from exc


class SegnoGenerator:
    """Symbol generation via segno."""

    MODES = {
        Mode.NUMERIC: "numeric",
        Mode.ALPHANUMERIC: "alphanumeric",
        Mode.BYTE: "byte",
        Mode.KANJI: "kanji",
    }

    def _make(self, content, mode: Mode, version: int | None, ec_level: ECLevel):
        return segno.make_qr(
            content,
            error=ec_level.name,
            version=version,
            mode=self.MODES[mode],
            boost_error=False,
        )

    @trace
    def generate(self, text: bytes, mode: Mode, version: int, ec_level: ECLevel) -> SymbolMatrix:
        content = text if mode == Mode.BYTE else _as_text(text, mode)
        try:
            try:
                qr = self._make(content, mode, version or None, ec_level)
            except segno.DataOverflowError:
                if not version:
                    raise
                log.debug("payload exceeds version %d, selecting a larger one", version)
                qr = self._make(content, mode, None, ec_level)
        except segno.DataOverflowError as exc:
            raise EncodeFailure("could not encode input") from exc
        except ValueError as exc:
            raise InvalidInput("input data is invalid") from exc
        except MemoryError as exc:
            raise OutOfMemory("not enough memory") from exc

        matrix = SymbolMatrix.from_rows(qr.matrix, version=qr.version)
        audit("symbol.generated", logger=log, backend="segno", version=matrix.version,
              width=matrix.width, mode=mode.name, ecc=ec_level.name)
        return matrix


class QRCodeGenerator:
    """Symbol generation via the qrcode library. Kanji mode is not supported."""

    LEVELS = {
        ECLevel.L: qrcode.constants.ERROR_CORRECT_L,
        ECLevel.M: qrcode.constants.ERROR_CORRECT_M,
        ECLevel.Q: qrcode.constants.ERROR_CORRECT_Q,
        ECLevel.H: qrcode.constants.ERROR_CORRECT_H,
    }
    MODES = {
        Mode.NUMERIC: qrcode.util.MODE_NUMBER,
        Mode.ALPHANUMERIC: qrcode.util.MODE_ALPHA_NUM,
        Mode.BYTE: qrcode.util.MODE_8BIT_BYTE,
    }

    @trace
    def generate(self, text: bytes, mode: Mode, version: int, ec_level: ECLevel) -> SymbolMatrix:
        if mode not in self.MODES:
            raise InvalidInput(f"{mode.name.lower()} mode is not supported by the qrcode backend")

        qr = qrcode.QRCode(
            version=version or None,
            error_correction=self.LEVELS[ec_level],
            box_size=1,
            border=0,
        )
        try:
            qr.add_data(qrcode.util.QRData(text, mode=self.MODES[mode]))
        except ValueError as exc:
            raise InvalidInput("input data is invalid") from exc
        except MemoryError as exc:
            raise OutOfMemory("not enough memory") from exc

        try:
            # best_fit starts from the requested version, so it acts as a minimum.
            # Past version 40 qrcode raises DataOverflowError or, in newer
            # releases, ValueError("Invalid version ...").
            qr.make(fit=True)
        except (QRCodeOverflowError, ValueError) as exc:
            raise EncodeFailure("could not encode input") from exc
        except MemoryError as exc:
            raise OutOfMemory("not enough memory") from exc

        matrix = SymbolMatrix.from_rows(qr.modules, version=qr.version)
        audit("symbol.generated", logger=log, backend="qrcode", version=matrix.version,
              width=matrix.width, mode=mode.name, ecc=ec_level.name)
        return matrix


GENERATORS = {
    "segno": SegnoGenerator,
    "qrcode": QRCodeGenerator,
}


def get_generator(name: str) -> SymbolGenerator:
    """Instantiate a generator backend by name."""
    try:
        return GENERATORS[name]()
    except KeyError:
        raise ValueError(f"Unknown generator: {name!r}. Choose from {list(GENERATORS)}") from None
