"""Shared test fixtures for binembed."""

from __future__ import annotations

import random
from collections.abc import Callable
from pathlib import Path

import pytest

from binembed.core.encoder import encode_bytes
from binembed.core.renderer import write_artifact
from binembed.models.artifact import EmbeddedArtifact

HELLO = b"hello world!"


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def hello_artifact() -> EmbeddedArtifact:
    """The 12-byte ``hello world!`` binary, encoded."""
    return encode_bytes(HELLO, binary_name="hello")


@pytest.fixture
def sample_data() -> bytes:
    """Deterministic, mostly incompressible bytes spanning many gzip blocks."""
    rng = random.Random(1234)
    noise = bytes(rng.getrandbits(8) for _ in range(48 * 1024))
    return b"\x7fELF" + noise + b"\x00" * 16 * 1024


@pytest.fixture
def sample_artifact(sample_data: bytes) -> EmbeddedArtifact:
    return encode_bytes(sample_data, binary_name="sample", version="v1.2.3")


@pytest.fixture
def source_file(tmp_dir: Path, sample_data: bytes) -> Path:
    """Write the sample binary to disk."""
    path = tmp_dir / "sample.bin"
    path.write_bytes(sample_data)
    return path


@pytest.fixture
def make_artifact_module(tmp_dir: Path) -> Callable[..., Path]:
    """Factory fixture: render an artifact to ``<tmp>/modules/<name>.py``."""

    def _factory(artifact: EmbeddedArtifact, module_name: str) -> Path:
        modules = tmp_dir / "modules"
        modules.mkdir(exist_ok=True)
        return write_artifact(artifact, modules / f"{module_name}.py")

    return _factory


@pytest.fixture
def large_artifact() -> EmbeddedArtifact:
    """Incompressible binary whose payload outruns the gzip read-ahead."""
    data = random.Random(4321).randbytes(512 * 1024)
    return encode_bytes(data, binary_name="large")


@pytest.fixture
def late_non_ascii_artifact(large_artifact: EmbeddedArtifact) -> EmbeddedArtifact:
    """``large_artifact`` with one non-ASCII character two thirds into the payload."""
    payload = large_artifact.payload
    at = len(payload) * 2 // 3
    return large_artifact.model_copy(
        update={"payload": payload[:at] + "é" + payload[at + 1:]}
    )
