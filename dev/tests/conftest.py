from __future__ import annotations

import hashlib
import sys
from pathlib import Path

import pytest

# Ensure repo root on path
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bl2patch.hash_utils import Digest  # noqa: E402
from bl2patch.patching import Change, Version, VersionRegistry  # noqa: E402


def make_pristine_bytes(size: int = 100) -> bytearray:
    data = bytearray((i * 7 + 3) & 0xFF for i in range(size))
    data[50] = 0x73
    return data


def build_version(pristine: bytes, changes, name: str = "synthetic") -> Version:
    patched = bytearray(pristine)
    for change in changes:
        patched[change.offset:change.end] = change.patch
    return Version(
        name=name,
        unpatched_hash=Digest(hashlib.sha1(bytes(pristine)).digest()),
        patched_hash=Digest(hashlib.sha1(bytes(patched)).digest()),
        changes=tuple(changes),
    )


@pytest.fixture
def pristine_bytes() -> bytes:
    """100-byte synthetic executable with 0x73 at offset 50."""
    return bytes(make_pristine_bytes())


@pytest.fixture
def synthetic_version(pristine_bytes) -> Version:
    return build_version(pristine_bytes, [Change(50, b"\x73", b"\x00", "say prefix")])


@pytest.fixture
def synthetic_registry(synthetic_version) -> VersionRegistry:
    return VersionRegistry([synthetic_version])


@pytest.fixture
def exe_file(tmp_path, pristine_bytes) -> Path:
    path = tmp_path / "game" / "Borderlands2.exe"
    path.parent.mkdir(parents=True)
    path.write_bytes(pristine_bytes)
    return path
