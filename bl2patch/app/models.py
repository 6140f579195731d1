from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..patching import Direction, ExeState, ExeStatus, PatchOutcome


@dataclass(frozen=True)
class CheckReport:
    target_path: str
    state: ExeState

    @property
    def status(self) -> ExeStatus:
        return self.state.status

    def summary(self) -> str:
        return f"{self.target_path}: {self.status.name.lower()} ({self.state.version.name})"


@dataclass(frozen=True)
class PatchReport:
    target_path: str
    outcome: PatchOutcome
    backup_path: Optional[str] = None

    @property
    def direction(self) -> Direction:
        return self.outcome.direction

    @property
    def status(self) -> ExeStatus:
        return self.outcome.after.status

    def summary(self) -> str:
        action = "Patch applied" if self.direction is Direction.FORWARD else "Patch reverted"
        return f"{action}: {self.target_path} ({self.outcome.after.version.name})"
