import hashlib
import io

import pytest

from bl2patch.exceptions import FingerprintReadError
from bl2patch.hash_utils import Digest, fingerprint, fingerprint_bytes, fingerprint_file


class _FailingStream(io.BytesIO):
    def __init__(self, data: bytes, fail_after: int):
        super().__init__(data)
        self._fail_after = fail_after

    def read(self, size=-1):
        if self.tell() >= self._fail_after:
            raise OSError("disk went away")
        return super().read(size)


def test_fingerprint_is_deterministic(pristine_bytes):
    first = fingerprint(io.BytesIO(pristine_bytes))
    second = fingerprint(io.BytesIO(pristine_bytes))
    assert first == second
    assert hash(first) == hash(second)


def test_single_byte_difference_changes_digest(pristine_bytes):
    modified = bytearray(pristine_bytes)
    modified[99] ^= 0x01
    assert fingerprint(io.BytesIO(pristine_bytes)) != fingerprint(io.BytesIO(bytes(modified)))


@pytest.mark.parametrize("chunk_size", [1, 7, 64, 0x10000])
def test_chunk_size_does_not_affect_digest(pristine_bytes, chunk_size):
    expected = hashlib.sha1(pristine_bytes).hexdigest()
    assert fingerprint(io.BytesIO(pristine_bytes), chunk_size=chunk_size).hex() == expected


def test_fingerprint_reads_from_current_position_and_leaves_stream_at_eof(pristine_bytes):
    stream = io.BytesIO(pristine_bytes)
    stream.seek(10)
    digest = fingerprint(stream)
    assert digest == fingerprint_bytes(pristine_bytes[10:])
    assert stream.tell() == len(pristine_bytes)
    assert stream.read() == b""


def test_fingerprint_file_matches_hashlib(exe_file, pristine_bytes):
    assert str(fingerprint_file(exe_file)) == hashlib.sha1(pristine_bytes).hexdigest()


def test_read_failure_raises_fingerprint_read_error(pristine_bytes):
    stream = _FailingStream(pristine_bytes, fail_after=32)
    with pytest.raises(FingerprintReadError) as excinfo:
        fingerprint(stream, chunk_size=16)
    assert excinfo.value.details["bytes_read"] == 32
    assert excinfo.value.exit_code == 6


def test_digest_from_hex_roundtrips_text():
    text = "bc1d695c6fdb3dea491b367f73bbb045c316b32e"
    digest = Digest.from_hex(text)
    assert str(digest) == text
    assert digest == Digest.from_hex(text.upper())


def test_digest_rejects_wrong_length():
    with pytest.raises(ValueError):
        Digest(b"\x00" * 4)


def test_fingerprint_rejects_non_positive_chunk_size():
    with pytest.raises(ValueError):
        fingerprint(io.BytesIO(b"abc"), chunk_size=0)
