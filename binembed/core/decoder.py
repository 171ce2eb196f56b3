"""Run-time decoder: ``EmbeddedArtifact`` -> original bytes.

The decode pipeline is a chain of readers, each owning the one below it::

    PayloadStream -> gzip.GzipFile -> io.BufferedReader -> Base64Reader -> str

Streams are forward-only and single pass.  Open a new one to read again.
"""

from __future__ import annotations

import base64
import binascii
import gzip
import io
import logging
import zlib

from binembed.config import settings
from binembed.core.errors import (
    DecodeInitError,
    DecodeReadError,
    PayloadOverrunError,
    TruncatedPayloadError,
)
from binembed.models.artifact import EmbeddedArtifact

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"

# Errors the gzip and base64 stages raise on corrupt input.
_STREAM_ERRORS = (OSError, EOFError, zlib.error, binascii.Error)


def _b64decode(chars: str) -> bytes:
    """Decode unpadded standard base64, rejecting characters off the alphabet."""
    rem = len(chars) % 4
    if rem == 1:
        raise binascii.Error("truncated base64 quantum")
    if rem:
        chars += "=" * (4 - rem)
    try:
        return base64.b64decode(chars, validate=True)
    except binascii.Error:
        raise
    except ValueError as exc:
        # non-ASCII input raises a bare ValueError
        raise binascii.Error(str(exc)) from exc


class Base64Reader(io.RawIOBase):
    """Decodes an unpadded base64 string on demand.

    Whitespace is skipped.  At most ``chunk_chars`` characters of the source
    are decoded per refill, so the decoded payload is never held whole.
    """

    def __init__(self, text: str, chunk_chars: int = 4096) -> None:
        super().__init__()
        self._text = text
        self._pos = 0
        self._chunk_chars = chunk_chars
        self._pending = ""  # fewer than 4 alphabet chars awaiting a quantum
        self._buf = b""
        self._eof = False

    def readable(self) -> bool:
        return True

    def _fill(self) -> None:
        while not self._buf and not self._eof:
            raw = self._text[self._pos:self._pos + self._chunk_chars]
            self._pos += len(raw)
            if not raw:
                self._eof = True
                if self._pending:
                    self._buf = _b64decode(self._pending)
                    self._pending = ""
                return
            chars = self._pending + "".join(raw.split())
            usable = len(chars) - len(chars) % 4
            self._pending = chars[usable:]
            if usable:
                self._buf = _b64decode(chars[:usable])

    def readinto(self, b) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed base64 reader")
        self._fill()
        n = min(len(b), len(self._buf))
        b[:n] = self._buf[:n]
        self._buf = self._buf[n:]
        return n


class PayloadStream(io.RawIOBase):
    """Readable stream of the decompressed binary.

    Wraps the gzip stage and translates its failures into
    ``DecodeReadError``.  Closing the stream closes every stage beneath it.
    """

    def __init__(self, gz: gzip.GzipFile, source: io.BufferedReader) -> None:
        super().__init__()
        self._gz = gz
        self._source = source

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed payload stream")
        try:
            return self._gz.readinto(b)
        except _STREAM_ERRORS as exc:
            raise DecodeReadError(f"reading embedded payload: {exc}") from exc

    def close(self) -> None:
        if not self.closed:
            try:
                self._gz.close()
            finally:
                self._source.close()
        super().close()


def open_stream(artifact: EmbeddedArtifact) -> PayloadStream:
    """Build a lazy decode pipeline over the artifact payload.

    Raises ``DecodeInitError`` if the payload is not base64 or does not
    carry a valid gzip header.
    """
    try:
        if Base64Reader(artifact.payload).read(len(GZIP_MAGIC)) != GZIP_MAGIC:
            raise DecodeInitError("embedded payload is not a gzip stream")
    except binascii.Error as exc:
        raise DecodeInitError(f"embedded payload is not base64: {exc}") from exc

    source = io.BufferedReader(
        Base64Reader(artifact.payload), buffer_size=settings.chunk_size
    )
    gz = gzip.GzipFile(fileobj=source, mode="rb")
    try:
        gz.peek(1)
    except _STREAM_ERRORS as exc:
        gz.close()
        source.close()
        raise DecodeInitError(f"initializing gzip reader: {exc}") from exc

    logger.debug("Opened decode stream for '%s'", artifact.binary_name)
    return PayloadStream(gz, source)


def decode(artifact: EmbeddedArtifact) -> bytes:
    """Fully decode the artifact into memory.

    Raises
    ------
    DecodeInitError, DecodeReadError
        The pipeline failed to start or failed mid-stream.
    TruncatedPayloadError
        The stream ended before ``decoded_len`` bytes.
    PayloadOverrunError
        The stream produced more than ``decoded_len`` bytes.
    """
    expected = artifact.decoded_len
    buf = bytearray(expected)
    view = memoryview(buf)
    n = 0
    with open_stream(artifact) as stream:
        while n < expected:
            m = stream.readinto(view[n:])
            if not m:
                break
            n += m
        if n == expected and stream.read(1):
            raise PayloadOverrunError(
                f"payload for '{artifact.binary_name}' exceeds "
                f"decoded length ({expected})"
            )
    view.release()
    if n != expected:
        raise TruncatedPayloadError(
            f"expected decoded length ({expected}): got ({n})"
        )
    return bytes(buf)
