"""Rasterizer: expand a module matrix into magnified, margin-padded pixel rows.

Rows hold one palette index per pixel (0 = background, 1 = foreground).
Packing to 1 bit per pixel is left to the image serializer.
"""

from collections.abc import Iterator
from dataclasses import dataclass

from qrcodeine.logging import get_logger
from qrcodeine.options import RenderRequest
from qrcodeine.symbol import SymbolMatrix

log = get_logger("raster")

BACKGROUND = 0
FOREGROUND = 1


@dataclass(frozen=True)
class Palette:
    """Two-entry palette: index 0 = background, index 1 = foreground."""
    background: tuple[int, int, int] = (255, 255, 255)
    foreground: tuple[int, int, int] = (0, 0, 0)

    @classmethod
    def for_request(cls, request: RenderRequest) -> "Palette":
        return cls(background=request.background_rgb, foreground=request.foreground_rgb)

    def entries(self) -> list[tuple[int, int, int]]:
        return [self.background, self.foreground]


def image_side(width: int, margin: int, dot_size: int) -> int:
    """Side length in pixels of the square image for a matrix of `width` modules."""
    return (width + 2 * margin) * dot_size


def rasterize(matrix: SymbolMatrix, margin: int, dot_size: int) -> Iterator[bytearray]:
    """Yield the image rows top to bottom, one row at a time.

    Every logical module row is yielded `dot_size` times and every module is
    `dot_size` pixels wide. Modules outside the matrix (the margin) are always
    background, whatever the matrix holds.

    The same bytearray is reused for every row: consume or copy each row
    before advancing the iterator.
    """
    width = matrix.width
    side = image_side(width, margin, dot_size)
    runs = (bytes([BACKGROUND]) * dot_size, bytes([FOREGROUND]) * dot_size)
    row = bytearray(side)

    for y in range(-margin, width + margin):
        inside = 0 <= y < width
        for col in range(-margin, width + margin):
            if inside and 0 <= col < width:
                value = FOREGROUND if matrix.module(y, col) else BACKGROUND
            else:
                value = BACKGROUND
            start = (col + margin) * dot_size
            row[start:start + dot_size] = runs[value]
        for _ in range(dot_size):
            yield row

    log.debug("rasterized %dx%d modules into %dx%d pixels", width, width, side, side)
