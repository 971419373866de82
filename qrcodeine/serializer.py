"""Image serializers: write palette rows as a 1-bit, 2-color PNG into a sink."""

import io
from collections.abc import Iterable
from typing import Protocol

import png
from PIL import Image

from qrcodeine.errors import OutOfMemory, SerializationError
from qrcodeine.logging import get_logger, trace
from qrcodeine.raster import Palette
from qrcodeine.sink import OutputSink

log = get_logger("serializer")


class ImageSerializer(Protocol):
    """Interface for image codecs fed one row of palette indices at a time."""

    def serialize(self, width: int, height: int, palette: Palette,
                  rows: Iterable[bytes], sink: OutputSink) -> None:
        """Write the encoded image to sink, raising SerializationError on failure."""
        ...


class PngSerializer:
    """Streaming PNG writer backed by pypng.

    Rows are packed and compressed as they arrive, so only one row is held in
    memory at a time. pypng packs indices most-significant-bit first.
    """

    @trace
    def serialize(self, width: int, height: int, palette: Palette,
                  rows: Iterable[bytes], sink: OutputSink) -> None:
        try:
            writer = png.Writer(width, height, palette=palette.entries(), bitdepth=1)
            writer.write(sink, rows)
        except png.Error as exc:
            raise SerializationError(f"png encoding failed: {exc}") from exc


class PillowSerializer:
    """PNG writer backed by Pillow.

    Pillow needs the whole image up front, so indices for all rows are
    buffered before encoding.
    """

    @trace
    def serialize(self, width: int, height: int, palette: Palette,
                  rows: Iterable[bytes], sink: OutputSink) -> None:
        pixels = bytearray()
        try:
            for row in rows:
                pixels += row
        except MemoryError as exc:
            raise OutOfMemory("could not buffer image rows") from exc

        if len(pixels) != width * height:
            raise SerializationError(f"expected {width * height} pixels, got {len(pixels)}")

        try:
            img = Image.frombytes("P", (width, height), bytes(pixels))
            img.putpalette([channel for color in palette.entries() for channel in color])
            buf = io.BytesIO()
            img.save(buf, format="PNG", bits=1)
        except (OSError, ValueError) as exc:
            raise SerializationError(f"png encoding failed: {exc}") from exc
        sink.write(buf.getvalue())


SERIALIZERS = {
    "pypng": PngSerializer,
    "pillow": PillowSerializer,
}


def get_serializer(name: str) -> ImageSerializer:
    """Instantiate a serializer backend by name."""
    try:
        return SERIALIZERS[name]()
    except KeyError:
        raise ValueError(f"Unknown serializer: {name!r}. Choose from {list(SERIALIZERS)}") from None
