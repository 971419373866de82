"""qrcodeine: QR code module matrices and 2-color PNG rendering."""

from qrcodeine.api import EncodeResult, encode, encode_png
from qrcodeine.errors import (
    EncodeFailure,
    GenerationError,
    InvalidInput,
    OptionTypeError,
    OutOfMemory,
    QRCodeineError,
    RangeError,
    SerializationError,
    SinkClosed,
    ValidationError,
)
from qrcodeine.options import ECLevel, Mode, RenderRequest, validate

EC_L = ECLevel.L
EC_M = ECLevel.M
EC_Q = ECLevel.Q
EC_H = ECLevel.H

MODE_NUM = Mode.NUMERIC
MODE_AN = Mode.ALPHANUMERIC
MODE_8 = Mode.BYTE
MODE_KANJI = Mode.KANJI

__all__ = [
    "EC_H", "EC_L", "EC_M", "EC_Q",
    "MODE_8", "MODE_AN", "MODE_KANJI", "MODE_NUM",
    "ECLevel", "EncodeFailure", "EncodeResult", "GenerationError", "InvalidInput",
    "Mode", "OptionTypeError", "OutOfMemory", "QRCodeineError", "RangeError",
    "RenderRequest", "SerializationError", "SinkClosed", "ValidationError",
    "encode", "encode_png", "validate",
]
