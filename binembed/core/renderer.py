"""Render an ``EmbeddedArtifact`` as a generated Python module, and load it back.

Generated modules hold five constants and a triple-quoted payload::

    DECODED_LEN = 12
    BINARY_FILENAME = "packer"
    BINARY_VERSION = "v0.12.2"
    BINARY_SHA1 = "<40 hex>"
    BINARY_SHA256 = "<64 hex>"
    BINARY_PAYLOAD = \"\"\"
    H4sIAAAAAAAC/8tIzcnJVyjPL8pJUQQAbkQ...
    \"\"\"

The base64 alphabet contains neither quotes nor backslashes, so the payload
cannot terminate the literal early.
"""

from __future__ import annotations

import importlib
import importlib.machinery
import importlib.util
import json
import logging
from pathlib import Path
from types import ModuleType

from pydantic import ValidationError

from binembed.config import settings
from binembed.core.errors import (
    ArtifactFormatError,
    CopyError,
    DestinationExistsError,
    OpenError,
    ReadError,
)
from binembed.models.artifact import DigestSet, EmbeddedArtifact

logger = logging.getLogger(__name__)

HEADER = """\
# MACHINE GENERATED DO NOT EDIT!
#
# This module contains an encoded executable (BINARY_PAYLOAD): gzip
# compressed, then base64 encoded without padding.
"""

_REQUIRED = (
    "DECODED_LEN",
    "BINARY_FILENAME",
    "BINARY_SHA1",
    "BINARY_SHA256",
    "BINARY_PAYLOAD",
)


def _wrap(payload: str, width: int) -> str:
    return "\n".join(
        payload[i:i + width] for i in range(0, len(payload), width)
    )


def render_artifact(artifact: EmbeddedArtifact, line_width: int | None = None) -> str:
    """Return the source text of a generated artifact module."""
    width = line_width or settings.line_width
    parts = [HEADER]
    if artifact.build_tags:
        parts.append(f"# build-tags: {artifact.build_tags}\n")
    parts.append(
        "\n"
        "# length of decoded binary\n"
        f"DECODED_LEN = {artifact.decoded_len}\n"
        "\n"
        "# name of the executable when written to disk\n"
        f"BINARY_FILENAME = {json.dumps(artifact.binary_name)}\n"
        "\n"
        "# version of the embedded executable\n"
        f"BINARY_VERSION = {json.dumps(artifact.version)}\n"
        "\n"
        "# hex encoded sha1 sum of the executable\n"
        f'BINARY_SHA1 = "{artifact.digests.sha1}"\n'
        "\n"
        "# hex encoded sha256 sum of the executable\n"
        f'BINARY_SHA256 = "{artifact.digests.sha256}"\n'
        "\n"
        "# executable compressed with gzip and base64 encoded\n"
        'BINARY_PAYLOAD = """\n'
        f"{_wrap(artifact.payload, width)}\n"
        '"""\n'
    )
    return "".join(parts)


def write_artifact(
    artifact: EmbeddedArtifact,
    dest_path: Path | str,
    line_width: int | None = None,
) -> Path:
    """Write the rendered module to a new file.

    Refuses to overwrite: an existing destination raises
    ``DestinationExistsError``.  A failed write removes the partial file.
    """
    dest = Path(dest_path)
    source = render_artifact(artifact, line_width)
    try:
        fh = open(dest, "x", encoding="utf-8")
    except FileExistsError as exc:
        raise DestinationExistsError(f"destination exists: {dest}") from exc
    except OSError as exc:
        raise OpenError(f"creating file ({dest}): {exc}") from exc

    try:
        with fh:
            fh.write(source)
    except OSError as exc:
        dest.unlink(missing_ok=True)
        raise CopyError(f"writing {dest}: {exc}") from exc

    logger.info("Wrote artifact module %s (%d chars)", dest, len(source))
    return dest


def load_artifact(module: ModuleType | str) -> EmbeddedArtifact:
    """Build an ``EmbeddedArtifact`` from a generated module or its import name."""
    if isinstance(module, str):
        module = importlib.import_module(module)

    missing = [name for name in _REQUIRED if not hasattr(module, name)]
    if missing:
        raise ArtifactFormatError(
            f"module {module.__name__} is missing {', '.join(missing)}"
        )
    if not isinstance(module.BINARY_PAYLOAD, str):
        raise ArtifactFormatError(f"module {module.__name__}: payload is not a str")
    try:
        return EmbeddedArtifact(
            decoded_len=module.DECODED_LEN,
            binary_name=module.BINARY_FILENAME,
            digests=DigestSet(
                sha1=module.BINARY_SHA1, sha256=module.BINARY_SHA256
            ),
            payload="".join(module.BINARY_PAYLOAD.split()),
            version=getattr(module, "BINARY_VERSION", ""),
        )
    except ValidationError as exc:
        raise ArtifactFormatError(
            f"module {module.__name__} is not a valid artifact: {exc}"
        ) from exc


def load_artifact_file(path: Path | str) -> EmbeddedArtifact:
    """Execute a generated module file without installing it, and load it."""
    path = Path(path)
    if not path.is_file():
        raise ReadError(f"artifact module not found: {path}")

    # explicit loader so any file name loads, not only *.py
    name = f"_binembed_artifact_{path.stem}"
    spec = importlib.util.spec_from_file_location(
        name, path, loader=importlib.machinery.SourceFileLoader(name, str(path))
    )
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except SyntaxError as exc:
        raise ArtifactFormatError(f"{path} is not valid Python: {exc}") from exc
    except OSError as exc:
        raise ReadError(f"reading artifact module ({path}): {exc}") from exc
    except Exception as exc:
        raise ArtifactFormatError(f"executing {path}: {exc}") from exc
    return load_artifact(module)
