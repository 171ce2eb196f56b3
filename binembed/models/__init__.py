"""binembed data models: all Pydantic v2, all frozen (immutable)."""

from binembed.models.artifact import DigestSet, EmbeddedArtifact

__all__ = [
    "DigestSet",
    "EmbeddedArtifact",
]
