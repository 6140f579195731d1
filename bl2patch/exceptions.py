#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
BL2 Patcher - Consolidated Exception Classes

This module contains all exception classes used in the project,
centralized in one place to avoid duplication and improve consistency.
Every error carries an exit code so the CLI can report it without
inspecting the concrete type.
"""

from datetime import datetime
from typing import Dict, Any, List, Optional


class BaseError(Exception):
    """Base class for all project-specific errors."""

    exit_code = 1

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code or "ERROR"
        self.details = details or {}
        self.timestamp = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        """Converts the exception to a dictionary for structured logging."""
        return {
            'error_code': self.error_code,
            'message': str(self),
            'details': self.details,
            'exit_code': self.exit_code,
            'timestamp': self.timestamp.isoformat()
        }


# =====================================================================================================
# Configuration-related errors
# =====================================================================================================

class ConfigurationError(BaseError):
    """Raised when the configuration file cannot be read or validated."""

    exit_code = 2

    def __init__(self, message: str, error_code: Optional[str] = None,
                 file_path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        config_details = details or {}
        if file_path:
            config_details['file_path'] = str(file_path)
        super().__init__(message, error_code or "CONFIG_ERROR", config_details)


class RegistryError(BaseError):
    """Raised when version registry data violates its invariants."""

    exit_code = 9

    def __init__(self, message: str, version: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        registry_details = details or {}
        if version:
            registry_details['version'] = version
        super().__init__(message, "REGISTRY_ERROR", registry_details)


# =====================================================================================================
# Install path resolution errors
# =====================================================================================================

class ManifestResolutionError(BaseError):
    """Base class for failures while locating the game through Steam."""

    exit_code = 3

    def __init__(self, message: str, error_code: Optional[str] = None,
                 app_id: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        manifest_details = details or {}
        if app_id is not None:
            manifest_details['app_id'] = app_id
        super().__init__(message, error_code or "MANIFEST_ERROR", manifest_details)


class SteamNotFoundError(ManifestResolutionError):
    """Raised when no Steam installation directory exists."""

    def __init__(self, message: str, candidates=None,
                 details: Optional[Dict[str, Any]] = None):
        steam_details = details or {}
        if candidates:
            steam_details['candidates'] = [str(c) for c in candidates]
        super().__init__(message, "STEAM_NOT_FOUND", None, steam_details)


class ManifestNotFoundError(ManifestResolutionError):
    """Raised when no library root holds the application's manifest."""

    def __init__(self, message: str, app_id: Optional[int] = None,
                 searched_roots=None,
                 details: Optional[Dict[str, Any]] = None):
        search_details = details or {}
        if searched_roots:
            search_details['searched_roots'] = [str(r) for r in searched_roots]
        super().__init__(message, "MANIFEST_NOT_FOUND", app_id, search_details)


class MalformedManifestError(ManifestResolutionError):
    """Raised when an index or manifest exists but lacks the expected keys."""

    def __init__(self, message: str, file_path: Optional[str] = None,
                 app_id: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        file_details = details or {}
        if file_path:
            file_details['file_path'] = str(file_path)
        super().__init__(message, "MANIFEST_MALFORMED", app_id, file_details)


# =====================================================================================================
# IO and data-related errors
# =====================================================================================================

class TargetFileError(BaseError):
    """Raised when the target executable is missing or cannot be opened."""

    exit_code = 4

    def __init__(self, message: str, file_path: Optional[str] = None,
                 operation: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        file_details = details or {}
        if file_path:
            file_details['file_path'] = str(file_path)
        if operation:
            file_details['operation'] = operation
        super().__init__(message, "TARGET_FILE_ERROR", file_details)


class UnknownVersionError(BaseError):
    """Raised when a fingerprint matches no registered version."""

    exit_code = 5

    def __init__(self, digest, file_path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        version_details = details or {}
        version_details['sha1'] = str(digest)
        if file_path:
            version_details['file_path'] = str(file_path)
        super().__init__(f"Unknown executable version: SHA1: {digest}",
                         "UNKNOWN_VERSION", version_details)
        self.digest = digest


class FingerprintReadError(BaseError):
    """Raised when reading the file for fingerprinting fails."""

    exit_code = 6

    def __init__(self, message: str, bytes_read: int = 0,
                 details: Optional[Dict[str, Any]] = None):
        read_details = details or {}
        read_details['bytes_read'] = bytes_read
        super().__init__(message, "FINGERPRINT_READ_ERROR", read_details)


class BackupError(BaseError):
    """Raised when the pre-write backup cannot be created."""

    exit_code = 7

    def __init__(self, message: str, file_path: Optional[str] = None,
                 backup_dir: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        backup_details = details or {}
        if file_path:
            backup_details['file_path'] = str(file_path)
        if backup_dir:
            backup_details['backup_dir'] = str(backup_dir)
        super().__init__(message, "BACKUP_ERROR", backup_details)


class PreflightError(BaseError):
    """Raised when the file's bytes disagree with the registry before any write."""

    exit_code = 10

    def __init__(self, message: str, offsets: Optional[List[int]] = None,
                 direction: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        preflight_details = details or {}
        self.offsets = list(offsets or [])
        preflight_details['offsets'] = [f"0x{o:08x}" for o in self.offsets]
        if direction:
            preflight_details['direction'] = direction
        super().__init__(message, "PREFLIGHT_MISMATCH", preflight_details)


# =====================================================================================================
# Patch integrity errors
# =====================================================================================================

class PatchIntegrityError(BaseError):
    """Base class for failures that may leave the target file corrupted."""

    exit_code = 8

    RESTORE_HINT = "The file may be corrupted. You should restore it from a backup."

    def __init__(self, message: str, error_code: Optional[str] = None,
                 backup_path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        integrity_details = details or {}
        self.backup_path = backup_path
        if backup_path:
            integrity_details['backup_path'] = str(backup_path)
        super().__init__(message, error_code or "PATCH_INTEGRITY_ERROR", integrity_details)

    def attach_backup(self, backup_path) -> None:
        """Record the backup taken before the failed write."""
        if backup_path is None:
            return
        self.backup_path = str(backup_path)
        self.details['backup_path'] = self.backup_path

    def restore_hint(self) -> str:
        if self.backup_path:
            return f"{self.RESTORE_HINT} Backup: {self.backup_path}"
        return self.RESTORE_HINT


class PatchWriteError(PatchIntegrityError):
    """Raised when a write fails partway through the change list."""

    def __init__(self, message: str, committed: int = 0, total: int = 0,
                 offset: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        write_details = details or {}
        write_details['committed'] = committed
        write_details['total'] = total
        if offset is not None:
            write_details['offset'] = f"0x{offset:08x}"
        super().__init__(message, "PATCH_WRITE_ERROR", None, write_details)
        self.committed = committed
        self.total = total


class VerificationError(PatchIntegrityError):
    """Raised when the file does not match the expected state around a write."""

    def __init__(self, message: str, expected: Optional[str] = None,
                 actual=None, phase: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        verify_details = details or {}
        if expected:
            verify_details['expected'] = expected
        if actual is not None:
            verify_details['actual'] = str(actual)
        if phase:
            verify_details['phase'] = phase
        super().__init__(message, "VERIFICATION_FAILED", None, verify_details)
        self.phase = phase
