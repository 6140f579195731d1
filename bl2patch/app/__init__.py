"""Application workflow."""

from .controller import check_executable, open_target, resolve_target, run_patcher
from .models import CheckReport, PatchReport

__all__ = [
    "check_executable",
    "open_target",
    "resolve_target",
    "run_patcher",
    "CheckReport",
    "PatchReport",
]
