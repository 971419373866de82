from __future__ import annotations

import io

import png
import pytest
from PIL import Image

import qrcodeine
from qrcodeine import config
from qrcodeine.api import EncodeResult, encode, encode_png
from qrcodeine.errors import (
    EncodeFailure,
    InvalidInput,
    OptionTypeError,
    OutOfMemory,
    RangeError,
    SerializationError,
)
from qrcodeine.options import ECLevel, Mode
from tests.fakes import (
    CapturingSerializer,
    FailingSerializer,
    FakeGenerator,
    ShortSerializer,
    checker_matrix,
    diagonal_matrix,
)


def test_encode_returns_raw_matrix() -> None:
    matrix = diagonal_matrix(25, version=2)
    result = encode("hi", generator=FakeGenerator(matrix))
    assert result == EncodeResult(width=25, version=2, data=matrix.cells)


def test_encode_passes_canonical_parameters_to_generator() -> None:
    gen = FakeGenerator()
    encode("hi", {"ecLevel": 2, "mode": 1, "version": 7}, generator=gen)
    assert gen.calls == [(b"hi", Mode.ALPHANUMERIC, 7, ECLevel.Q)]


def test_keyword_overrides_win_over_options() -> None:
    gen = FakeGenerator()
    encode("hi", {"ec_level": 1}, generator=gen, ec_level=qrcodeine.EC_H)
    assert gen.calls[0][3] is ECLevel.H


def test_validation_runs_before_generation() -> None:
    gen = FakeGenerator()
    with pytest.raises(RangeError):
        encode("", generator=gen)
    with pytest.raises(OptionTypeError):
        encode_png("hi", {"dot_size": "big"}, generator=gen)
    assert gen.calls == []


def test_options_must_be_mapping_with_overrides() -> None:
    with pytest.raises(OptionTypeError):
        encode("hi", ["margin"], generator=FakeGenerator(), margin=2)


@pytest.mark.parametrize("error", [InvalidInput("bad"), OutOfMemory("oom"), EncodeFailure("big")])
def test_generator_errors_propagate_unchanged(error) -> None:
    with pytest.raises(type(error)):
        encode("hi", generator=FakeGenerator(error=error))
    with pytest.raises(type(error)):
        encode_png("hi", generator=FakeGenerator(error=error), serializer=CapturingSerializer())


def test_encode_png_feeds_serializer() -> None:
    serializer = CapturingSerializer()
    result = encode_png(
        "hi",
        {"margin": 4, "dot_size": 3, "foreground_color": 0x0000FF},
        generator=FakeGenerator(checker_matrix(21)),
        serializer=serializer,
    )
    width, height, palette = serializer.header
    assert (width, height) == (87, 87)
    assert palette.entries() == [(255, 255, 255), (0, 0, 255)]
    assert len(serializer.rows) == 87
    assert result == EncodeResult(width=21, version=1, data=b"IMG")


def test_serializer_failure_returns_nothing() -> None:
    serializer = FailingSerializer(after_rows=5)
    with pytest.raises(SerializationError):
        encode_png("hi", generator=FakeGenerator(), serializer=serializer)
    assert serializer.rows_seen == 5
    assert serializer.sink.closed


def test_sink_growth_failure_is_serialization_error() -> None:
    serializer = FailingSerializer(after_rows=1, error=OutOfMemory("write error"))
    with pytest.raises(SerializationError) as excinfo:
        encode_png("hi", generator=FakeGenerator(), serializer=serializer)
    assert isinstance(excinfo.value.__cause__, OutOfMemory)
    assert serializer.sink.closed


@pytest.mark.parametrize("error", [MemoryError(), RuntimeError("codec"), ValueError("bad")])
def test_any_codec_exception_is_serialization_error(error: Exception) -> None:
    serializer = FailingSerializer(after_rows=1, error=error)
    with pytest.raises(SerializationError) as excinfo:
        encode_png("hi", generator=FakeGenerator(), serializer=serializer)
    assert excinfo.value.__cause__ is error
    assert serializer.sink.closed


def test_serializer_that_stops_early_is_rejected() -> None:
    serializer = ShortSerializer(rows_to_read=3)
    with pytest.raises(SerializationError, match="stopped before the last of 87 rows"):
        encode_png("hi", generator=FakeGenerator(), serializer=serializer)
    assert serializer.sink.closed


def test_encode_png_end_to_end_with_real_backends() -> None:
    result = encode_png("hello", margin=0, dot_size=1)
    assert (result.width, result.version) == (21, 1)

    matrix = encode("hello")
    width, height, rows, info = png.Reader(bytes=result.data).read()
    assert (width, height) == (21, 21)
    assert info["bitdepth"] == 1
    pixels = b"".join(bytes(row) for row in rows)
    assert pixels == matrix.data


def test_encode_png_default_size() -> None:
    result = encode_png("hello")
    width, height, _, _ = png.Reader(bytes=result.data).read()
    assert (width, height) == (87, 87)


def test_configured_backends_are_used(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "GENERATOR", "qrcode")
    monkeypatch.setattr(config, "SERIALIZER", "pillow")
    result = encode_png("hello", {"ec_level": qrcodeine.EC_M, "dot_size": 2, "margin": 1})
    img = Image.open(io.BytesIO(result.data))
    assert img.size == ((21 + 2) * 2, (21 + 2) * 2)
    assert img.mode == "P"
    assert result.version == 1


def test_preferred_version_is_reported() -> None:
    assert encode("hello", version=3).version == 3
    assert encode("x" * 30, version=1).version == 2


def test_package_constants() -> None:
    assert (qrcodeine.EC_L, qrcodeine.EC_M, qrcodeine.EC_Q, qrcodeine.EC_H) == (0, 1, 2, 3)
    assert (qrcodeine.MODE_NUM, qrcodeine.MODE_AN, qrcodeine.MODE_8, qrcodeine.MODE_KANJI) == (0, 1, 2, 3)
