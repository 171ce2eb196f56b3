"""Content digest helpers.

SHA-1 and SHA-256 are used for integrity checking of embedded binaries,
not for authentication.
"""

from __future__ import annotations

import hashlib
from typing import BinaryIO

from binembed.models.artifact import DigestSet

_READ_SIZE = 64 * 1024


def sha1_hex(data: bytes) -> str:
    """Return the SHA-1 hex digest of raw bytes."""
    return hashlib.sha1(data).hexdigest()


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def compute_digests(data: bytes) -> DigestSet:
    """Compute both digests over the same byte sequence."""
    return DigestSet(sha1=sha1_hex(data), sha256=sha256_hex(data))


class DigestWriter:
    """Feeds everything written to it into both hashes at once.

    Usable as the sink of ``shutil.copyfileobj`` or as a tee alongside a
    real file.
    """

    def __init__(self) -> None:
        self._sha1 = hashlib.sha1()
        self._sha256 = hashlib.sha256()
        self.size = 0

    def write(self, chunk: bytes) -> int:
        self._sha1.update(chunk)
        self._sha256.update(chunk)
        self.size += len(chunk)
        return len(chunk)

    def digests(self) -> DigestSet:
        return DigestSet(
            sha1=self._sha1.hexdigest(), sha256=self._sha256.hexdigest()
        )


def digest_stream(stream: BinaryIO) -> DigestSet:
    """Hash a readable binary stream to exhaustion without buffering it."""
    writer = DigestWriter()
    while True:
        chunk = stream.read(_READ_SIZE)
        if not chunk:
            break
        writer.write(chunk)
    return writer.digests()
