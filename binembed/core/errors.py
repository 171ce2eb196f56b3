"""Error hierarchy for the encode/decode/materialize pipeline.

Two families, deliberately unrelated:

``BinEmbedError``
    Ordinary failures reported to the immediate caller: an unreadable source
    file, a destination that already exists, an I/O error while copying.
    Callers may catch and report these.

``IntegrityFault``
    The embedded artifact itself is corrupt (truncated payload, digest
    mismatch, malformed stored digest).  These can only be produced by a
    broken build and must not be caught and ignored; the process should stop.
"""

from __future__ import annotations


class BinEmbedError(Exception):
    """Base class for recoverable binembed errors."""


# ---------------------------------------------------------------------------
# Encoder
# ---------------------------------------------------------------------------


class ReadError(BinEmbedError):
    """Raised when the source binary cannot be opened or read."""


class CompressionError(BinEmbedError):
    """Raised when the compression stage cannot finalize."""


class EncodingError(BinEmbedError):
    """Raised when the text encoding stage cannot finalize."""


# ---------------------------------------------------------------------------
# Artifact rendering and loading
# ---------------------------------------------------------------------------


class ArtifactFormatError(BinEmbedError):
    """Raised when a generated artifact module is missing required constants."""


# ---------------------------------------------------------------------------
# Decoder
# ---------------------------------------------------------------------------


class DecodeInitError(BinEmbedError):
    """Raised when the text or decompression stage cannot initialize."""


class DecodeReadError(BinEmbedError):
    """Raised when the decode stream fails before reaching end-of-stream."""


# ---------------------------------------------------------------------------
# Materializer
# ---------------------------------------------------------------------------


class MaterializeError(BinEmbedError):
    """Base class for errors writing a decoded binary to disk."""


class DestinationExistsError(MaterializeError):
    """Raised when the destination path already exists."""


class OpenError(MaterializeError):
    """Raised when the destination file cannot be created."""


class CopyError(MaterializeError):
    """Raised when streaming into the destination fails.

    The partially written destination has already been removed.
    """


class CloseError(MaterializeError):
    """Raised when the destination handle cannot be finalized."""


# ---------------------------------------------------------------------------
# Integrity faults
# ---------------------------------------------------------------------------


class IntegrityFault(RuntimeError):
    """The embedded artifact is corrupt.  Not recoverable."""


class TruncatedPayloadError(IntegrityFault):
    """The payload decoded to fewer bytes than the recorded length."""


class PayloadOverrunError(IntegrityFault):
    """The payload decoded to more bytes than the recorded length."""


class DigestMismatchError(IntegrityFault):
    """Recomputed digest does not match the stored digest."""

    def __init__(self, algorithm: str, expected: str, actual: str) -> None:
        self.algorithm = algorithm
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{algorithm} mismatch: expected ({expected}) got ({actual})"
        )


class MalformedDigestError(IntegrityFault):
    """A stored digest string is not valid hex of the expected length."""
