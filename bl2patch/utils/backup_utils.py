"""Backup helpers for the target executable."""

from __future__ import annotations

import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from ..exceptions import BackupError

logger = logging.getLogger(__name__)


def resolve_backup_dir(local_dir: Optional[Union[str, Path]], target: Union[str, Path]) -> Path:
    """Configured backup directory, or the target's own directory."""
    if local_dir:
        return Path(str(local_dir)).expanduser().resolve()
    return Path(target).resolve().parent


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


def backup_file(
    file_path: Union[str, Path],
    *,
    prefix: str,
    backup_dir: Union[str, Path],
) -> Path:
    """Copy ``file_path`` to ``<backup_dir>/<prefix>_<timestamp>_<name>``.

    Raises:
        BackupError: if the source is not a regular file or the copy fails.
    """
    file_path_obj = Path(file_path)
    if not file_path_obj.is_file():
        raise BackupError(f"Backup source is not a file: {file_path_obj}", file_path=str(file_path_obj))

    target_dir = Path(backup_dir)
    filename = f"{prefix}_{_timestamp()}_{file_path_obj.name}"
    backup_path = target_dir / filename
    counter = 1
    while backup_path.exists():
        backup_path = target_dir / f"{prefix}_{_timestamp()}_{counter}_{file_path_obj.name}"
        counter += 1

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        shutil.copy2(file_path_obj, backup_path)
    except OSError as exc:
        raise BackupError(
            f"Backup copy failed: {exc}",
            file_path=str(file_path_obj),
            backup_dir=str(target_dir),
        ) from exc

    logger.info("Backup saved: %s", backup_path)
    return backup_path
