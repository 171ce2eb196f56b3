"""Tests for the decoder: round-trip, streaming, integrity faults."""

from __future__ import annotations

import base64
import binascii
import hashlib

import pytest

from binembed.core.decoder import Base64Reader, decode, open_stream
from binembed.core.encoder import encode_bytes
from binembed.core.errors import (
    BinEmbedError,
    DecodeInitError,
    DecodeReadError,
    IntegrityFault,
    PayloadOverrunError,
    TruncatedPayloadError,
)

HELLO = b"hello world!"


def _truncated(artifact):
    """Cut the payload to two thirds, on a base64 quantum boundary."""
    cut = (len(artifact.payload) * 2 // 3) // 4 * 4
    return artifact.model_copy(update={"payload": artifact.payload[:cut]})


class TestBase64Reader:
    def test_unpadded_tail(self):
        for data in (b"a", b"ab", b"abc", b"abcd", b"hello world!"):
            text = base64.b64encode(data).decode().rstrip("=")
            assert Base64Reader(text).read() == data

    def test_skips_whitespace(self):
        text = base64.b64encode(HELLO).decode()
        wrapped = "\n" + "\n".join(text[i:i + 3] for i in range(0, len(text), 3)) + "\n"
        assert Base64Reader(wrapped, chunk_chars=5).read() == HELLO

    def test_small_reads(self):
        text = base64.b64encode(bytes(range(256))).decode().rstrip("=")
        reader = Base64Reader(text, chunk_chars=7)
        out = b""
        while chunk := reader.read(3):
            out += chunk
        assert out == bytes(range(256))


class TestDecode:
    def test_hello_world(self, hello_artifact):
        data = decode(hello_artifact)
        assert data == HELLO
        assert len(data) == hello_artifact.decoded_len == 12

    def test_round_trip(self, sample_data, sample_artifact):
        data = decode(sample_artifact)
        assert data == sample_data
        assert len(data) == sample_artifact.decoded_len

    def test_empty(self):
        assert decode(encode_bytes(b"", binary_name="empty")) == b""

    def test_digests_agree(self, sample_artifact):
        data = decode(sample_artifact)
        assert hashlib.sha1(data).hexdigest() == sample_artifact.digests.sha1
        assert hashlib.sha256(data).hexdigest() == sample_artifact.digests.sha256

    def test_repeatable(self, hello_artifact):
        assert decode(hello_artifact) == decode(hello_artifact)

    def test_short_stream_is_integrity_fault(self, hello_artifact):
        bad = hello_artifact.model_copy(update={"decoded_len": 20})
        with pytest.raises(TruncatedPayloadError):
            decode(bad)

    def test_long_stream_is_integrity_fault(self, hello_artifact):
        bad = hello_artifact.model_copy(update={"decoded_len": 5})
        with pytest.raises(PayloadOverrunError):
            decode(bad)

    def test_integrity_fault_is_not_ordinary_error(self, hello_artifact):
        bad = hello_artifact.model_copy(update={"decoded_len": 20})
        with pytest.raises(IntegrityFault) as info:
            decode(bad)
        assert not isinstance(info.value, BinEmbedError)

    def test_truncated_payload_is_read_error(self, sample_artifact):
        with pytest.raises(DecodeReadError):
            decode(_truncated(sample_artifact))


class TestOpenStream:
    def test_streams_in_chunks(self, sample_data, sample_artifact):
        chunks = []
        with open_stream(sample_artifact) as stream:
            while chunk := stream.read(4096):
                assert len(chunk) <= 4096
                chunks.append(chunk)
        assert len(chunks) > 1
        assert b"".join(chunks) == sample_data

    def test_single_pass(self, hello_artifact):
        with open_stream(hello_artifact) as stream:
            assert stream.read() == HELLO
            assert stream.read() == b""

    def test_independent_streams(self, hello_artifact):
        with open_stream(hello_artifact) as a, open_stream(hello_artifact) as b:
            assert a.read(5) == b"hello"
            assert b.read() == HELLO
            assert a.read() == b" world!"

    def test_closed_stream(self, hello_artifact):
        stream = open_stream(hello_artifact)
        stream.close()
        assert stream.closed
        with pytest.raises(ValueError):
            stream.read(1)

    def test_not_base64(self, hello_artifact):
        bad = hello_artifact.model_copy(update={"payload": "!!!!not base64!!!!"})
        with pytest.raises(DecodeInitError):
            open_stream(bad)

    def test_not_gzip(self, hello_artifact):
        text = base64.b64encode(b"plain text, no gzip").decode().rstrip("=")
        bad = hello_artifact.model_copy(update={"payload": text})
        with pytest.raises(DecodeInitError):
            open_stream(bad)

    def test_empty_payload(self, hello_artifact):
        with pytest.raises(DecodeInitError):
            open_stream(hello_artifact.model_copy(update={"payload": ""}))

    def test_corrupt_header(self, hello_artifact):
        raw = base64.b64decode(hello_artifact.payload + "=" * (-len(hello_artifact.payload) % 4))
        broken = raw[:2] + b"\x00" + raw[3:]  # compression method byte
        text = base64.b64encode(broken).decode().rstrip("=")
        with pytest.raises(DecodeInitError):
            open_stream(hello_artifact.model_copy(update={"payload": text}))

    def test_truncated_payload_fails_while_reading(self, sample_artifact):
        with open_stream(_truncated(sample_artifact)) as stream:
            with pytest.raises(DecodeReadError):
                stream.read()


class TestNonAsciiPayload:
    def test_base64_reader_raises_binascii_error(self):
        with pytest.raises(binascii.Error):
            Base64Reader("H4sIéAAA").read()

    def test_leading_non_ascii_is_init_error(self, hello_artifact):
        bad = hello_artifact.model_copy(update={"payload": "é" + hello_artifact.payload[1:]})
        with pytest.raises(DecodeInitError):
            open_stream(bad)

    def test_late_non_ascii_is_read_error(self, late_non_ascii_artifact):
        with open_stream(late_non_ascii_artifact) as stream:
            with pytest.raises(DecodeReadError):
                stream.read()

    def test_late_non_ascii_decode(self, late_non_ascii_artifact):
        with pytest.raises(DecodeReadError):
            decode(late_non_ascii_artifact)
