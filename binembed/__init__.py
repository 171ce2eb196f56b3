"""binembed: ship an executable inside a Python module.

Build time: ``binembed encode`` reads a binary, hashes it (SHA-1, SHA-256),
gzips it and writes the base64 payload into a generated module.

Run time: ``EmbeddedBinary`` decodes that module back to the exact original
bytes, as a byte string, a stream, or an executable file on disk, and checks
it against the stored digests.
"""

__version__ = "0.1.0"
__description__ = "Embed executables in generated Python modules"

from binembed.core.bundle import EmbeddedBinary
from binembed.core.decoder import decode, open_stream
from binembed.core.encoder import encode_bytes, encode_file
from binembed.core.materializer import write_file
from binembed.models.artifact import DigestSet, EmbeddedArtifact

__all__ = [
    "EmbeddedBinary",
    "EmbeddedArtifact",
    "DigestSet",
    "encode_bytes",
    "encode_file",
    "decode",
    "open_stream",
    "write_file",
    "__version__",
]
