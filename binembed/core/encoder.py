"""Build-time encoder: binary file -> ``EmbeddedArtifact``.

Pipeline: read all bytes, hash them (SHA-1 and SHA-256 over the unmodified
bytes), gzip at maximum compression, base64 without padding.

The gzip header carries a zero modification time and no file name so the
same input always produces the same payload.
"""

from __future__ import annotations

import base64
import binascii
import gzip
import io
import logging
import zlib
from pathlib import Path

from binembed.config import settings
from binembed.core.errors import CompressionError, EncodingError, ReadError
from binembed.core.hasher import compute_digests
from binembed.models.artifact import EmbeddedArtifact

logger = logging.getLogger(__name__)


def compress(data: bytes, level: int | None = None) -> bytes:
    """Gzip-compress ``data`` deterministically.

    Raises ``CompressionError`` if the gzip stream cannot be finalized.
    """
    level = settings.compression_level if level is None else level
    buf = io.BytesIO()
    try:
        with gzip.GzipFile(
            filename="", mode="wb", compresslevel=level, fileobj=buf, mtime=0
        ) as gz:
            gz.write(data)
    except (OSError, ValueError, zlib.error) as exc:
        raise CompressionError(f"gzip stream failed to finalize: {exc}") from exc
    return buf.getvalue()


def encode_text(compressed: bytes) -> str:
    """Base64-encode with the standard alphabet and strip the padding.

    Raises ``EncodingError`` if the text stage fails.
    """
    try:
        return base64.b64encode(compressed).rstrip(b"=").decode("ascii")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise EncodingError(f"base64 encoding failed: {exc}") from exc


def encode_bytes(
    data: bytes,
    *,
    binary_name: str,
    version: str = "",
    build_tags: str = "",
    compression_level: int | None = None,
) -> EmbeddedArtifact:
    """Encode in-memory bytes into an ``EmbeddedArtifact``."""
    digests = compute_digests(data)
    payload = encode_text(compress(data, compression_level))

    logger.debug(
        "Encoded %d bytes into %d payload chars (sha256=%s)",
        len(data),
        len(payload),
        digests.sha256,
    )
    return EmbeddedArtifact(
        decoded_len=len(data),
        binary_name=binary_name,
        digests=digests,
        payload=payload,
        version=version,
        build_tags=build_tags,
    )


def encode_file(
    source_path: Path | str,
    *,
    binary_name: str | None = None,
    version: str = "",
    build_tags: str = "",
    compression_level: int | None = None,
) -> EmbeddedArtifact:
    """Read a binary from disk and encode it.

    Parameters
    ----------
    source_path:
        Existing, readable file.  The whole file is read into memory.
    binary_name:
        Filename to record for materialization.  Defaults to
        ``settings.default_binary_name`` and then to the source file's name.

    Raises
    ------
    ReadError
        The source cannot be opened or read.
    CompressionError, EncodingError
        A pipeline stage failed; no artifact is returned.
    """
    source = Path(source_path)
    try:
        data = source.read_bytes()
    except OSError as exc:
        raise ReadError(f"reading binary file ({source}): {exc}") from exc

    name = binary_name or settings.default_binary_name or source.name
    artifact = encode_bytes(
        data,
        binary_name=name,
        version=version,
        build_tags=build_tags,
        compression_level=compression_level,
    )
    logger.info(
        "Encoded %s as '%s' (%d bytes, %d payload chars)",
        source,
        name,
        artifact.decoded_len,
        len(artifact.payload),
    )
    return artifact
