"""Known executable versions and the byte changes that patch them.

Every supported release is described by two fingerprints (pristine and
patched) and an ordered list of fixed-offset, same-length substitutions.
Supporting a new release means adding a new ``Version`` to ``VERSIONS``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Sequence, Tuple

from ..exceptions import RegistryError
from ..hash_utils import Digest


@dataclass(frozen=True)
class Change:
    """A single byte substitution at an absolute file offset."""

    offset: int
    original: bytes
    patch: bytes
    description: str = ""

    @property
    def end(self) -> int:
        return self.offset + len(self.patch)

    def source_bytes(self, forward: bool) -> bytes:
        """Bytes expected on disk before writing in the given direction."""
        return self.original if forward else self.patch

    def target_bytes(self, forward: bool) -> bytes:
        """Bytes written in the given direction."""
        return self.patch if forward else self.original


@dataclass(frozen=True)
class Version:
    """A known release of the target executable."""

    name: str
    unpatched_hash: Digest
    patched_hash: Digest
    changes: Tuple[Change, ...] = field(default_factory=tuple)

    def validate(self) -> None:
        """Check change lengths and that no two changes overlap.

        Raises:
            RegistryError: on the first violated invariant.
        """
        if self.unpatched_hash == self.patched_hash:
            raise RegistryError("Patched and unpatched digests are identical", self.name)
        if not self.changes:
            raise RegistryError("Version has no changes", self.name)

        for change in self.changes:
            if change.offset < 0:
                raise RegistryError(f"Negative offset {change.offset}", self.name)
            if not change.patch:
                raise RegistryError(f"Empty change at 0x{change.offset:08x}", self.name)
            if len(change.original) != len(change.patch):
                raise RegistryError(
                    f"Change at 0x{change.offset:08x} alters file length "
                    f"({len(change.original)} -> {len(change.patch)} bytes)",
                    self.name,
                )

        ordered = sorted(self.changes, key=lambda c: c.offset)
        for previous, current in zip(ordered, ordered[1:]):
            if current.offset < previous.end:
                raise RegistryError(
                    f"Changes at 0x{previous.offset:08x} and 0x{current.offset:08x} overlap",
                    self.name,
                )


class VersionRegistry:
    """Read-only catalog of known versions, matched by exact digest."""

    def __init__(self, versions: Iterable[Version]):
        self._versions: Tuple[Version, ...] = tuple(versions)
        for version in self._versions:
            version.validate()

    def __iter__(self) -> Iterator[Version]:
        return iter(self._versions)

    def __len__(self) -> int:
        return len(self._versions)

    @property
    def versions(self) -> Sequence[Version]:
        return self._versions

    def match_unpatched(self, digest: Digest) -> Optional[Version]:
        """Return the version whose pristine digest equals ``digest``."""
        for version in self._versions:
            if version.unpatched_hash == digest:
                return version
        return None

    def match_any(self, digest: Digest) -> Optional[Tuple[Version, bool]]:
        """Return ``(version, is_patched)`` for a pristine or patched digest."""
        for version in self._versions:
            if version.unpatched_hash == digest:
                return version, False
            if version.patched_hash == digest:
                return version, True
        return None


VERSIONS: Tuple[Version, ...] = (
    Version(
        name="win32 cl:ffs 2019-06-24",
        unpatched_hash=Digest.from_hex("bc1d695c6fdb3dea491b367f73bbb045c316b32e"),
        patched_hash=Digest.from_hex("fc8afce04782532b0fe7a70a80ee1070da858e32"),
        changes=(
            Change(0x012F_8B90, b"\x73", b"\x00", "remove the 'say' prefix on console entries"),
            Change(0x0169_9CB2, b"\xb8", b"\xb7", "enable dev commands"),
            Change(0x0042_D740, b"\xc0", b"\xff", "enable 'set'"),
        ),
    ),
)

DEFAULT_REGISTRY = VersionRegistry(VERSIONS)
