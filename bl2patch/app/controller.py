"""Top-level patch workflow: locate, classify, back up, toggle, verify."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional, Union

from ..config import ConfigModel
from ..exceptions import PatchIntegrityError, PreflightError, TargetFileError
from ..patching import (
    DEFAULT_REGISTRY,
    ExeState,
    ExeStatus,
    StateResolver,
    VersionRegistry,
)
from ..steam import SteamLibrary
from ..utils.backup_utils import backup_file, resolve_backup_dir
from .models import CheckReport, PatchReport

logger = logging.getLogger(__name__)


def resolve_target(config: ConfigModel, exe_path: Optional[Union[str, Path]] = None) -> Path:
    """Path of the executable to patch.

    An explicit ``exe_path`` wins; otherwise the game is located through the
    Steam library and the configured executable path is appended.
    """
    if exe_path:
        return Path(exe_path)
    library = SteamLibrary(config.steam.steam_path)
    install_dir = library.resolve_install_path(config.steam.app_id)
    return install_dir / Path(config.steam.executable)


@contextmanager
def open_target(path: Path, writable: bool = True) -> Iterator[BinaryIO]:
    """Open an existing executable without ever creating or truncating it."""
    mode = "r+b" if writable else "rb"
    try:
        handle = open(path, mode)
    except FileNotFoundError as e:
        raise TargetFileError(f"Executable not found: {path}", file_path=str(path), operation="open") from e
    except OSError as e:
        raise TargetFileError(f"Cannot open executable {path}: {e}", file_path=str(path), operation="open") from e
    with handle:
        yield handle


def _make_resolver(config: ConfigModel, registry: Optional[VersionRegistry]) -> StateResolver:
    return StateResolver(
        registry=registry if registry is not None else DEFAULT_REGISTRY,
        chunk_size=config.patcher.chunk_size,
        preflight=config.patcher.preflight_check,
    )


def check_executable(
    config: ConfigModel,
    exe_path: Optional[Union[str, Path]] = None,
    registry: Optional[VersionRegistry] = None,
) -> CheckReport:
    """Classify the executable without writing to it."""
    target = resolve_target(config, exe_path)
    logger.info("Checking executable %s", target)
    with open_target(target, writable=False) as handle:
        state = _make_resolver(config, registry).classify(handle)
    return CheckReport(target_path=str(target), state=state)


def run_patcher(
    config: ConfigModel,
    exe_path: Optional[Union[str, Path]] = None,
    backup: Optional[bool] = None,
    registry: Optional[VersionRegistry] = None,
) -> PatchReport:
    """Apply the patch to an unpatched executable, or revert a patched one.

    Args:
        config: Loaded configuration
        exe_path: Explicit executable path (skips Steam lookup)
        backup: Override ``config.backup.enabled``
        registry: Known versions (defaults to the shipped registry)

    Raises:
        ManifestResolutionError, TargetFileError, UnknownVersionError,
        FingerprintReadError, BackupError, PreflightError: nothing was written
        PatchWriteError, VerificationError: the file may be corrupted
    """
    target = resolve_target(config, exe_path)
    do_backup = config.backup.enabled if backup is None else backup
    resolver = _make_resolver(config, registry)
    backups: List[Path] = []

    def _before_write(state: ExeState) -> None:
        if not do_backup:
            logger.warning("Backup disabled; patching %s in place", target)
            return
        backup_dir = resolve_backup_dir(config.backup.local_dir, target)
        backups.append(backup_file(target, prefix=config.backup.prefix, backup_dir=backup_dir))

    logger.info("Checking executable %s", target)
    with open_target(target) as handle:
        state = resolver.classify(handle)
        logger.info("Found %s executable (%s)", state.status.name.lower(), state.version.name)
        try:
            outcome = resolver.toggle(handle, state, before_write=_before_write)
        except PreflightError:
            logger.error("Pre-flight check failed for %s; file left %s", target, state.status.name.lower())
            raise
        except PatchIntegrityError as e:
            if backups:
                e.attach_backup(backups[-1])
            logger.error("%s is %s", target, ExeStatus.CORRUPTED.name.lower())
            raise

    return PatchReport(
        target_path=str(target),
        outcome=outcome,
        backup_path=str(backups[-1]) if backups else None,
    )
