"""Integrity verifier: ties the stored digests to decoded bytes and files.

Stored digests are hex-decoded at call time.  A malformed stored digest
means the artifact was corrupted or hand-edited, so it raises
``MalformedDigestError`` (an ``IntegrityFault``) rather than an ordinary
error.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from binembed.core.errors import DigestMismatchError, MalformedDigestError
from binembed.core.hasher import compute_digests, digest_stream
from binembed.models.artifact import DigestSet, EmbeddedArtifact

logger = logging.getLogger(__name__)

SHA1_SIZE = hashlib.sha1().digest_size
SHA256_SIZE = hashlib.sha256().digest_size


def _decode_digest(algorithm: str, hex_digest: str, size: int) -> bytes:
    try:
        raw = bytes.fromhex(hex_digest)
    except ValueError as exc:
        raise MalformedDigestError(
            f"stored {algorithm} is not valid hex: {hex_digest!r}"
        ) from exc
    if len(raw) != size:
        raise MalformedDigestError(
            f"stored {algorithm} has {len(raw)} bytes, expected {size}"
        )
    return raw


def sha1(artifact: EmbeddedArtifact) -> bytes:
    """Return the stored 20-byte SHA-1 of the embedded binary."""
    return _decode_digest("sha1", artifact.digests.sha1, SHA1_SIZE)


def sha256(artifact: EmbeddedArtifact) -> bytes:
    """Return the stored 32-byte SHA-256 of the embedded binary."""
    return _decode_digest("sha256", artifact.digests.sha256, SHA256_SIZE)


def check_digests(artifact: EmbeddedArtifact, actual: DigestSet) -> None:
    """Compare recomputed digests against the stored ones, each on its own.

    Raises ``DigestMismatchError`` naming the first algorithm that disagrees.
    """
    if bytes.fromhex(actual.sha1) != sha1(artifact):
        raise DigestMismatchError("sha1", artifact.digests.sha1, actual.sha1)
    if bytes.fromhex(actual.sha256) != sha256(artifact):
        raise DigestMismatchError(
            "sha256", artifact.digests.sha256, actual.sha256
        )


def verify_bytes(artifact: EmbeddedArtifact, data: bytes) -> None:
    """Check decoded bytes against the stored digests."""
    check_digests(artifact, compute_digests(data))


def verify_file(artifact: EmbeddedArtifact, path: Path | str) -> None:
    """Stream a file on disk through both hashes and check them."""
    with open(path, "rb") as fh:
        actual = digest_stream(fh)
    check_digests(artifact, actual)
    logger.debug("Verified %s against '%s'", path, artifact.binary_name)
