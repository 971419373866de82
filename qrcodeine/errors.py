"""Exception hierarchy for qrcodeine.

Validation errors are cheap and safe to retry with corrected input. Generation
and serialization errors come from the symbol encoder or the image codec and
are surfaced unchanged in kind.
"""


class QRCodeineError(Exception):
    """Base class for every error raised by qrcodeine."""


class ValidationError(QRCodeineError):
    """A caller-supplied argument was rejected before any work was done."""


class OptionTypeError(ValidationError, TypeError):
    """An argument has the wrong type."""


class RangeError(ValidationError, ValueError):
    """An argument is outside its accepted range."""


class GenerationError(QRCodeineError):
    """The symbol encoder could not produce a module matrix."""


class InvalidInput(GenerationError):
    """The encoder rejected the input (e.g. letters in numeric mode)."""


class EncodeFailure(GenerationError):
    """The input does not fit any symbol the encoder can build."""


class OutOfMemory(QRCodeineError, MemoryError):
    """An allocation failed while generating a symbol or growing the sink."""


class SerializationError(QRCodeineError):
    """The image codec failed; no partial image is returned."""


class SinkClosed(QRCodeineError):
    """The output sink was already finalized or discarded."""
