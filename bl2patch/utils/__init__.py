"""Shared helpers."""

from .backup_utils import backup_file, resolve_backup_dir

__all__ = ["backup_file", "resolve_backup_dir"]
