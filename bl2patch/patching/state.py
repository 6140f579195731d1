"""Executable state classification and the apply/revert toggle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import BinaryIO, Callable, Optional

from ..exceptions import (
    FingerprintReadError,
    PreflightError,
    UnknownVersionError,
    VerificationError,
)
from ..hash_utils import DEFAULT_CHUNK_SIZE, Digest, fingerprint
from .engine import Direction, apply_changes, check_changes
from .registry import DEFAULT_REGISTRY, Version, VersionRegistry

logger = logging.getLogger(__name__)


class ExeStatus(Enum):
    """Classification of the target file."""

    UNRECOGNIZED = auto()
    UNPATCHED = auto()
    PATCHED = auto()
    CORRUPTED = auto()  # only after a failed write or verification


@dataclass(frozen=True)
class ExeState:
    """Known version plus whether the file currently carries its patch."""

    version: Version
    patched: bool

    @property
    def status(self) -> ExeStatus:
        return ExeStatus.PATCHED if self.patched else ExeStatus.UNPATCHED

    @property
    def direction(self) -> Direction:
        """Direction that moves the file to the opposite state."""
        return Direction.REVERSE if self.patched else Direction.FORWARD

    @property
    def digest(self) -> Digest:
        return self.version.patched_hash if self.patched else self.version.unpatched_hash


@dataclass(frozen=True)
class PatchOutcome:
    """Result of one successful toggle."""

    before: ExeState
    after: ExeState
    direction: Direction
    changes_written: int


BeforeWrite = Callable[[ExeState], None]


class StateResolver:
    """Fingerprints the file, classifies it and drives the patch engine."""

    def __init__(
        self,
        registry: VersionRegistry = DEFAULT_REGISTRY,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        preflight: bool = True,
    ):
        self.registry = registry
        self.chunk_size = chunk_size
        self.preflight = preflight

    def classify(self, handle: BinaryIO) -> ExeState:
        """Rewind ``handle`` and match its fingerprint against the registry.

        Raises:
            UnknownVersionError: if the digest matches no registered version.
            FingerprintReadError: if reading the file fails.
        """
        try:
            handle.seek(0)
        except OSError as e:
            raise FingerprintReadError(f"I/O error while rewinding file: {e}") from e

        digest = fingerprint(handle, self.chunk_size)
        match = self.registry.match_any(digest)
        if match is None:
            logger.debug("no registry entry for %s", digest)
            raise UnknownVersionError(digest, file_path=getattr(handle, "name", None))

        version, patched = match
        state = ExeState(version=version, patched=patched)
        logger.debug("classified %s as %s (%s)", digest, state.status.name, version.name)
        return state

    def toggle(
        self,
        handle: BinaryIO,
        state: Optional[ExeState] = None,
        before_write: Optional[BeforeWrite] = None,
    ) -> PatchOutcome:
        """Apply the patch to an unpatched file or revert a patched one.

        Args:
            handle: Target file opened ``r+b``
            state: Classification from a previous ``classify`` on this handle
            before_write: Called once the file is known and checked, just
                before the first byte is written

        Returns:
            PatchOutcome describing the transition

        Raises:
            UnknownVersionError: unrecognized file, nothing written
            PreflightError: bytes disagree with the registry, nothing written
            VerificationError: post-write verification failed
            PatchWriteError: a write failed partway through
        """
        if state is None:
            state = self.classify(handle)
        direction = state.direction
        changes = state.version.changes

        if self.preflight:
            try:
                mismatched = check_changes(handle, changes, direction)
            except OSError as e:
                raise FingerprintReadError(f"I/O error during pre-flight check: {e}") from e
            if mismatched:
                offsets = ", ".join(f"0x{c.offset:08x}" for c in mismatched)
                raise PreflightError(
                    f"Unexpected bytes at {offsets} before {direction.verb}; nothing was written",
                    offsets=[c.offset for c in mismatched],
                    direction=direction.verb,
                )

        if before_write is not None:
            before_write(state)

        logger.info("%s %d change(s) for %s", direction.verb.capitalize(), len(changes), state.version.name)
        written = apply_changes(handle, changes, direction)

        expected = ExeState(version=state.version, patched=not state.patched)
        try:
            after = self.classify(handle)
        except UnknownVersionError as e:
            raise VerificationError(
                f"Patch did not verify: resulting SHA1 {e.digest} matches no known version",
                expected=str(expected.digest),
                actual=e.digest,
                phase="postwrite",
            ) from e
        except FingerprintReadError as e:
            raise VerificationError(
                f"Patch did not verify: file could not be re-read after {direction.verb}: {e}",
                expected=str(expected.digest),
                phase="postwrite",
            ) from e

        if after != expected:
            raise VerificationError(
                f"Patch did not verify: file is {after.status.name.lower()}, "
                f"expected {expected.status.name.lower()}",
                expected=str(expected.digest),
                actual=after.digest,
                phase="postwrite",
            )

        return PatchOutcome(before=state, after=after, direction=direction, changes_written=written)
