"""Executable hash utilities - content fingerprints used to identify known game builds."""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Union

from .exceptions import FingerprintReadError


def _read_int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw, 0)
    except ValueError:
        return default


DEFAULT_CHUNK_SIZE = max(1, _read_int_env("BL2PATCH_HASH_CHUNK_SIZE", 0x10000))
DIGEST_ALGORITHM = "sha1"
DIGEST_SIZE = hashlib.new(DIGEST_ALGORITHM).digest_size


@dataclass(frozen=True)
class Digest:
    """Opaque SHA-1 content fingerprint."""

    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != DIGEST_SIZE:
            raise ValueError(f"Digest must be {DIGEST_SIZE} bytes, got {len(self.raw)}")

    @classmethod
    def from_hex(cls, text: str) -> "Digest":
        return cls(bytes.fromhex(text.strip()))

    def hex(self) -> str:
        return self.raw.hex()

    def __str__(self) -> str:
        return self.raw.hex()


def fingerprint(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Digest:
    """Calculate the SHA-1 fingerprint of a stream from its current position to EOF.

    The stream is consumed in chunks of ``chunk_size`` bytes so memory use does
    not depend on file size. The stream is left at EOF; callers that need it
    again must seek back themselves.

    Raises:
        FingerprintReadError: if reading the stream fails.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    sha1 = hashlib.sha1()
    bytes_read = 0
    try:
        while True:
            data = stream.read(chunk_size)
            if not data:
                break
            sha1.update(data)
            bytes_read += len(data)
    except OSError as e:
        raise FingerprintReadError(
            f"I/O error while fingerprinting after {bytes_read} bytes: {e}",
            bytes_read=bytes_read,
        ) from e
    return Digest(sha1.digest())


def fingerprint_file(file_path: Union[str, Path], chunk_size: int = DEFAULT_CHUNK_SIZE) -> Digest:
    """Calculate the SHA-1 fingerprint of a file on disk."""
    with open(file_path, "rb") as f:
        return fingerprint(f, chunk_size)


def fingerprint_bytes(data: bytes) -> Digest:
    """Calculate the SHA-1 fingerprint of an in-memory buffer."""
    return Digest(hashlib.sha1(data).digest())
