"""Request validation: normalize caller options into a RenderRequest."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import IntEnum

from qrcodeine.errors import OptionTypeError, RangeError
from qrcodeine.logging import get_logger

log = get_logger("options")


class ECLevel(IntEnum):
    L = 0  # 7%
    M = 1  # 15%
    Q = 2  # 25%
    H = 3  # 30%


class Mode(IntEnum):
    NUMERIC = 0
    ALPHANUMERIC = 1
    BYTE = 2
    KANJI = 3


# Longest accepted payload in bytes, indexed by ECLevel
MAX_LENGTH = (2938, 2319, 1655, 1268)

VERSION_MAX = 40
DOT_SIZE_MAX = 50
MARGIN_MAX = 10
# Colors must be strictly below pure white
COLOR_LIMIT = 0xFFFFFF

DEFAULTS = {
    "ec_level": ECLevel.L,
    "mode": Mode.BYTE,
    "version": 0,
    "dot_size": 3,
    "margin": 4,
    "foreground_color": 0x000000,
    "background_color": 0xFFFFFF,
}

ALIASES = {
    "ecLevel": "ec_level",
    "dotSize": "dot_size",
    "foregroundColor": "foreground_color",
    "backgroundColor": "background_color",
}


def rgb(color: int) -> tuple[int, int, int]:
    """Split a 24-bit 0xRRGGBB integer into an (R, G, B) triple."""
    return (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF


@dataclass(frozen=True)
class RenderRequest:
    """Canonical, validated parameters for one encode call."""
    text: bytes
    ec_level: ECLevel = ECLevel.L
    mode: Mode = Mode.BYTE
    version: int = 0  # 0 = let the encoder choose
    dot_size: int = 3
    margin: int = 4
    foreground_color: int = 0x000000
    background_color: int = 0xFFFFFF

    @property
    def foreground_rgb(self) -> tuple[int, int, int]:
        return rgb(self.foreground_color)

    @property
    def background_rgb(self) -> tuple[int, int, int]:
        return rgb(self.background_color)


def _to_bytes(text) -> bytes:
    if isinstance(text, str):
        return text.encode("utf-8")
    if isinstance(text, (bytes, bytearray, memoryview)):
        return bytes(text)
    raise OptionTypeError("no source string given")


def _check_length(data: bytes, level: ECLevel):
    if len(data) < 1 or len(data) > MAX_LENGTH[level]:
        raise RangeError("source string length out of range")


def _normalize(options: Mapping) -> dict:
    """Fold camelCase aliases into snake_case keys and drop unset values."""
    normalized = {}
    for key, value in options.items():
        name = ALIASES.get(key, key)
        if name not in DEFAULTS:
            log.debug("ignoring unknown option %r", key)
            continue
        if value is not None:
            normalized[name] = value
    return normalized


def _int_field(options: dict, name: str, label: str, low: int, high: int, *, exclusive: bool = False):
    """Return options[name] as an int within [low, high] (or [low, high) when exclusive)."""
    value = options.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise OptionTypeError(f"wrong type for {label}")
    too_high = value >= high if exclusive else value > high
    if value < low or too_high:
        raise RangeError(f"{label} out of range")
    return int(value)


def validate(text, options: Mapping | None = None) -> RenderRequest:
    """Check text and options, returning a RenderRequest or raising.

    Checks run in a fixed order and the first failure aborts the call:
    text type, text length against level L, options type, then version,
    EC level (re-checking length for that level), mode, dot size, margin,
    foreground and background color.

    Raises:
        OptionTypeError: a value has the wrong type.
        RangeError: a value is out of range.
    """
    data = _to_bytes(text)
    _check_length(data, ECLevel.L)

    if options is None:
        return RenderRequest(text=data)
    if not isinstance(options, Mapping):
        raise OptionTypeError("options must be a mapping")

    opts = _normalize(options)
    params = dict(DEFAULTS)

    version = _int_field(opts, "version", "version", 1, VERSION_MAX)
    if version is not None:
        params["version"] = version

    level = _int_field(opts, "ec_level", "EC level", ECLevel.L, ECLevel.H)
    if level is not None:
        params["ec_level"] = ECLevel(level)
        _check_length(data, params["ec_level"])

    mode = _int_field(opts, "mode", "mode", Mode.NUMERIC, Mode.KANJI)
    if mode is not None:
        params["mode"] = Mode(mode)

    for name, label, low, high in (
        ("dot_size", "dot size", 1, DOT_SIZE_MAX),
        ("margin", "margin size", 0, MARGIN_MAX),
    ):
        value = _int_field(opts, name, label, low, high)
        if value is not None:
            params[name] = value

    for name, label in (
        ("foreground_color", "foreground color"),
        ("background_color", "background color"),
    ):
        value = _int_field(opts, name, label, 0, COLOR_LIMIT, exclusive=True)
        if value is not None:
            params[name] = value

    return RenderRequest(text=data, **params)
