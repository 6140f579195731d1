"""Patch management module.

Features:
- Version registry - known executable builds and their byte changes
- Patch engine - in-place apply/revert of fixed-offset changes
- State resolver - fingerprint classification and verified toggling
"""

from .registry import (
    Change,
    Version,
    VersionRegistry,
    VERSIONS,
    DEFAULT_REGISTRY,
)
from .engine import (
    Direction,
    apply_changes,
    check_changes,
)
from .state import (
    ExeState,
    ExeStatus,
    PatchOutcome,
    StateResolver,
)

__all__ = [
    # registry
    "Change",
    "Version",
    "VersionRegistry",
    "VERSIONS",
    "DEFAULT_REGISTRY",
    # engine
    "Direction",
    "apply_changes",
    "check_changes",
    # state
    "ExeState",
    "ExeStatus",
    "PatchOutcome",
    "StateResolver",
]
