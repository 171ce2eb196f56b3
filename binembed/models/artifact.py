"""Embedded artifact models: the data contract between encoder and decoder."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DigestSet(BaseModel):
    """Lowercase hex digests of the uncompressed binary.

    Both are computed over the identical byte sequence but are stored and
    checked independently; callers may rely on either one alone.
    """

    model_config = ConfigDict(frozen=True)

    sha1: str  # 40 hex chars
    sha256: str  # 64 hex chars


class EmbeddedArtifact(BaseModel):
    """An executable encoded for embedding in generated source.

    ``payload`` is the gzip-compressed binary, base64 encoded with the
    standard alphabet and no ``=`` padding.  Whitespace in the payload is
    cosmetic and ignored when decoding.

    The digest strings are not validated here: a corrupt digest is only
    detectable when it is decoded (see ``binembed.core.verifier``).
    """

    model_config = ConfigDict(frozen=True)

    decoded_len: int = Field(ge=0)
    binary_name: str
    digests: DigestSet
    payload: str
    version: str = ""
    build_tags: str = ""
