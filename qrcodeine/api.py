"""Public entry points: encode() returns the raw module matrix, encode_png() a PNG."""

from collections.abc import Mapping
from dataclasses import dataclass

from qrcodeine import config
from qrcodeine.errors import OptionTypeError, SerializationError
from qrcodeine.logging import audit, get_logger, trace
from qrcodeine.options import RenderRequest, validate
from qrcodeine.raster import Palette, image_side, rasterize
from qrcodeine.serializer import ImageSerializer, get_serializer
from qrcodeine.sink import OutputSink
from qrcodeine.symbol import SymbolGenerator, SymbolMatrix, get_generator

log = get_logger("api")


@dataclass(frozen=True)
class EncodeResult:
    """Outcome of a successful encode.

    width is in modules, not pixels; version is the symbol version actually
    used, which may be larger than the one requested.
    """
    width: int
    version: int
    data: bytes


def _request(text, options, overrides) -> RenderRequest:
    if overrides:
        if options is not None and not isinstance(options, Mapping):
            raise OptionTypeError("options must be a mapping")
        options = {**(options or {}), **overrides}
    return validate(text, options)


def _generate(request: RenderRequest, generator: SymbolGenerator | None) -> SymbolMatrix:
    generator = generator or get_generator(config.GENERATOR)
    return generator.generate(request.text, request.mode, request.version, request.ec_level)


@trace
def encode(text, options: Mapping | None = None, *,
           generator: SymbolGenerator | None = None, **overrides) -> EncodeResult:
    """Encode text into a QR module matrix without rasterizing it.

    Args:
        text: Payload as str (encoded UTF-8) or bytes.
        options: Mapping of version, ec_level, mode, dot_size, margin,
            foreground_color, background_color (camelCase names accepted).
        generator: Symbol generation backend (defaults to config.GENERATOR).
        **overrides: Option values taking precedence over `options`.

    Returns:
        EncodeResult whose data holds width*width bytes, low bit set for dark modules.
    """
    request = _request(text, options, overrides)
    matrix = _generate(request, generator)
    audit("matrix.encoded", logger=log, version=matrix.version, width=matrix.width,
          ecc=request.ec_level.name, mode=request.mode.name)
    return EncodeResult(width=matrix.width, version=matrix.version, data=matrix.cells)


@trace
def encode_png(text, options: Mapping | None = None, *,
               generator: SymbolGenerator | None = None,
               serializer: ImageSerializer | None = None, **overrides) -> EncodeResult:
    """Encode text into a 1-bit, 2-color palette PNG.

    The image is square with side (width + 2*margin) * dot_size pixels.
    Any codec failure discards the partial output and raises
    SerializationError; a truncated image is never returned.

    Args:
        text: Payload as str (encoded UTF-8) or bytes.
        options: Same keys as encode().
        generator: Symbol generation backend (defaults to config.GENERATOR).
        serializer: Image codec backend (defaults to config.SERIALIZER).
        **overrides: Option values taking precedence over `options`.
    """
    request = _request(text, options, overrides)
    matrix = _generate(request, generator)
    serializer = serializer or get_serializer(config.SERIALIZER)

    side = image_side(matrix.width, request.margin, request.dot_size)
    rows = rasterize(matrix, request.margin, request.dot_size)
    with OutputSink() as sink:
        try:
            serializer.serialize(side, side, Palette.for_request(request), rows, sink)
            if next(rows, None) is not None:
                raise SerializationError(f"serializer stopped before the last of {side} rows")
        except SerializationError:
            raise
        except Exception as exc:
            raise SerializationError("could not serialize image") from exc
        finally:
            rows.close()
        data = sink.finalize()

    audit("png.encoded", logger=log, version=matrix.version, width=matrix.width,
          image_px=f"{side}x{side}", bytes=len(data))
    return EncodeResult(width=matrix.width, version=matrix.version, data=data)
