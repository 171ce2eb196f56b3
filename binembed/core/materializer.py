"""Materializer: writes the decoded binary to disk as an executable.

The destination is opened create-exclusive, so an existing file is never
clobbered and concurrent writers racing for one path produce exactly one
winner.  Any failure after the file is created removes it again: the call
either completes or leaves nothing behind.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import BinaryIO

from binembed.config import settings
from binembed.core.decoder import open_stream
from binembed.core.errors import (
    CloseError,
    CopyError,
    DecodeReadError,
    DestinationExistsError,
    IntegrityFault,
    OpenError,
    PayloadOverrunError,
    TruncatedPayloadError,
)
from binembed.core.hasher import DigestWriter
from binembed.core.verifier import check_digests
from binembed.models.artifact import EmbeddedArtifact

logger = logging.getLogger(__name__)

_OPEN_FLAGS = os.O_CREAT | os.O_EXCL | os.O_WRONLY | getattr(os, "O_BINARY", 0)


class _Sink:
    """Write target that counts, and optionally hashes, what reaches the file."""

    def __init__(self, fh: BinaryIO, digests: DigestWriter | None) -> None:
        self._fh = fh
        self.digests = digests
        self.written = 0

    def write(self, chunk: bytes) -> int:
        n = self._fh.write(chunk)
        if self.digests is not None:
            self.digests.write(chunk)
        self.written += len(chunk)
        return n


def _remove_partial(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.error("Could not remove partial file %s: %s", path, exc)
    else:
        logger.warning("Removed partial file %s", path)


def _abandon(fh: BinaryIO, path: Path) -> None:
    """Close a destination after a failed copy and delete it."""
    try:
        fh.close()
    except OSError as exc:
        logger.debug("Closing %s after copy failure: %s", path, exc)
    _remove_partial(path)


def _create_exclusive(path: Path, mode: int) -> BinaryIO:
    try:
        fd = os.open(path, _OPEN_FLAGS, mode)
    except FileExistsError as exc:
        raise DestinationExistsError(f"destination exists: {path}") from exc
    except OSError as exc:
        raise OpenError(f"creating file ({path}): {exc}") from exc

    try:
        # os.open honours the umask; force the requested bits.
        if hasattr(os, "fchmod"):
            os.fchmod(fd, mode)
        return os.fdopen(fd, "wb")
    except OSError as exc:
        os.close(fd)
        _remove_partial(path)
        raise OpenError(f"setting mode on ({path}): {exc}") from exc


def write_file(
    artifact: EmbeddedArtifact,
    destination: Path | str,
    *,
    mode: int | None = None,
    verify: bool = False,
) -> Path:
    """Write the embedded binary to a new file and set the executable bits.

    Parameters
    ----------
    destination:
        Path that must not exist yet; its directory must exist and be
        writable.
    mode:
        Permission bits, ``settings.file_mode`` (0o755) by default.
    verify:
        Hash the bytes while copying and check them against the stored
        digests.

    Raises
    ------
    DestinationExistsError, OpenError
        The destination could not be created; nothing was written.
    CopyError, CloseError
        Streaming or finalizing failed; the partial file was removed.
    IntegrityFault
        The written content disagrees with the artifact; the file was removed.
    """
    dest = Path(destination)
    mode = settings.file_mode if mode is None else mode

    with open_stream(artifact) as stream:
        fh = _create_exclusive(dest, mode)
        sink = _Sink(fh, DigestWriter() if verify else None)
        try:
            shutil.copyfileobj(stream, sink, settings.chunk_size)
        except (OSError, DecodeReadError) as exc:
            _abandon(fh, dest)
            raise CopyError(f"writing {dest}: {exc}") from exc
        except BaseException:
            _abandon(fh, dest)
            raise

        try:
            fh.close()
        except OSError as exc:
            _remove_partial(dest)
            raise CloseError(f"closing {dest}: {exc}") from exc

    try:
        if sink.written < artifact.decoded_len:
            raise TruncatedPayloadError(
                f"expected decoded length ({artifact.decoded_len}): "
                f"got ({sink.written})"
            )
        if sink.written > artifact.decoded_len:
            raise PayloadOverrunError(
                f"wrote {sink.written} bytes, decoded length is "
                f"{artifact.decoded_len}"
            )
        if sink.digests is not None:
            check_digests(artifact, sink.digests.digests())
    except IntegrityFault:
        _remove_partial(dest)
        raise

    logger.info(
        "Materialized '%s' at %s (%d bytes, mode %o)",
        artifact.binary_name,
        dest,
        sink.written,
        mode,
    )
    return dest
