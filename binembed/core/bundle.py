"""Run-time facade over one embedded executable.

A distributing program ships a generated module and exposes it through an
``EmbeddedBinary``::

    from binembed import EmbeddedBinary

    packer = EmbeddedBinary.from_module("mytool._packer_bin")
    packer.write_file(Path(tmpdir) / packer.name)
    data = packer.read_bytes()

The artifact is loaded once per process and never mutated, so one instance
can be shared freely between threads.  Every call builds its own decode
pipeline.
"""

from __future__ import annotations

import functools
from pathlib import Path

from binembed.core import decoder, materializer, verifier
from binembed.core.decoder import PayloadStream
from binembed.core.renderer import load_artifact
from binembed.models.artifact import EmbeddedArtifact


class EmbeddedBinary:
    """Access to a stored executable: bytes, stream, file and digests."""

    def __init__(self, artifact: EmbeddedArtifact) -> None:
        self._artifact = artifact

    @classmethod
    @functools.cache
    def from_module(cls, module_name: str) -> EmbeddedBinary:
        """Import a generated artifact module once and wrap it."""
        return cls(load_artifact(module_name))

    @property
    def artifact(self) -> EmbeddedArtifact:
        return self._artifact

    @property
    def name(self) -> str:
        """Executable filename, e.g. ``packer`` or ``packer.exe``."""
        return self._artifact.binary_name

    @property
    def version(self) -> str:
        return self._artifact.version

    @property
    def decoded_len(self) -> int:
        return self._artifact.decoded_len

    def read_bytes(self) -> bytes:
        """Return the decoded executable."""
        return decoder.decode(self._artifact)

    def open_stream(self) -> PayloadStream:
        """Return a fresh single-pass stream of the decoded executable."""
        return decoder.open_stream(self._artifact)

    def write_file(
        self, path: Path | str, *, mode: int | None = None, verify: bool = False
    ) -> Path:
        """Write the executable to a new file with execute permission."""
        return materializer.write_file(
            self._artifact, path, mode=mode, verify=verify
        )

    def sha1(self) -> bytes:
        return verifier.sha1(self._artifact)

    def sha256(self) -> bytes:
        return verifier.sha256(self._artifact)

    def verify_file(self, path: Path | str) -> None:
        """Check a file on disk against both stored digests."""
        verifier.verify_file(self._artifact, path)

    def __repr__(self) -> str:
        return (
            f"EmbeddedBinary(name={self.name!r}, version={self.version!r}, "
            f"decoded_len={self.decoded_len})"
        )
