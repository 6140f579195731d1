"""In-place patch engine.

Writes registry changes straight into an open ``r+b`` handle. Nothing is
buffered in memory and the file length never changes.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import BinaryIO, List, Sequence

from ..exceptions import PatchWriteError
from .registry import Change

logger = logging.getLogger(__name__)


class Direction(Enum):
    """Which side of each change gets written."""

    FORWARD = auto()  # write patch bytes
    REVERSE = auto()  # write original bytes back

    @property
    def forward(self) -> bool:
        return self is Direction.FORWARD

    @property
    def verb(self) -> str:
        return "apply" if self.forward else "revert"


def apply_changes(handle: BinaryIO, changes: Sequence[Change], direction: Direction) -> int:
    """Write every change into ``handle`` in the order given.

    Args:
        handle: Binary file object opened for reading and writing
        changes: Disjoint changes of one registry version
        direction: FORWARD writes ``patch``, REVERSE writes ``original``

    Returns:
        Number of changes written

    Raises:
        PatchWriteError: if a seek or write fails. Changes before the failing
            one are already on disk, so the file is in a mixed state.
    """
    total = len(changes)
    committed = 0
    for change in changes:
        data = change.target_bytes(direction.forward)
        try:
            handle.seek(change.offset)
            written = handle.write(data)
            if written is not None and written != len(data):
                raise OSError(f"short write: {written} of {len(data)} bytes")
        except OSError as e:
            raise PatchWriteError(
                f"I/O error while patching at 0x{change.offset:08x}: {e}",
                committed=committed,
                total=total,
                offset=change.offset,
            ) from e
        committed += 1
        logger.debug("%s 0x%08x: %s", direction.verb, change.offset, data.hex())

    try:
        handle.flush()
    except OSError as e:
        raise PatchWriteError(
            f"I/O error while flushing patched file: {e}",
            committed=committed,
            total=total,
        ) from e
    return committed


def check_changes(handle: BinaryIO, changes: Sequence[Change], direction: Direction) -> List[Change]:
    """Return the changes whose current bytes are not what ``direction`` expects.

    Read-only; the handle position is left wherever the last read ended.
    """
    mismatched: List[Change] = []
    for change in changes:
        expected = change.source_bytes(direction.forward)
        handle.seek(change.offset)
        actual = handle.read(len(expected))
        if actual != expected:
            logger.debug(
                "pre-flight mismatch at 0x%08x: expected %s, found %s",
                change.offset, expected.hex(), actual.hex(),
            )
            mismatched.append(change)
    return mismatched
