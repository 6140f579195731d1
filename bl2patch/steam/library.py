"""Steam library lookup.

Finds where a Steam application is installed by reading the library
index (libraryfolders.vdf) and the per-app manifest (appmanifest_<id>.acf).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import vdf  # python-vdf for Steam config parsing

from ..exceptions import (
    MalformedManifestError,
    ManifestNotFoundError,
    SteamNotFoundError,
)

logger = logging.getLogger(__name__)

BORDERLANDS2_APP_ID = 49520

STEAMAPPS_DIRS = ("steamapps", "SteamApps")
COMMON_DIR = "common"
LIBRARY_INDEX = "libraryfolders.vdf"


def _get_key(node: Any, key: str) -> Any:
    """Case-insensitive key lookup in a parsed VDF block."""
    if not isinstance(node, Mapping):
        return None
    if key in node:
        return node[key]
    wanted = key.lower()
    for name, value in node.items():
        if str(name).lower() == wanted:
            return value
    return None


def _load_vdf(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            data = vdf.load(f)
    except SyntaxError as e:
        raise MalformedManifestError(f"Cannot parse {path}: {e}", file_path=str(path)) from e
    except OSError as e:
        raise MalformedManifestError(f"Cannot read {path}: {e}", file_path=str(path)) from e
    if not isinstance(data, dict):
        raise MalformedManifestError(f"Unexpected content in {path}", file_path=str(path))
    return data


def default_steam_paths() -> List[str]:
    """Usual Steam installation directories for this platform."""
    if os.name == "nt":
        return [
            os.path.expandvars(r"%ProgramFiles(x86)%\Steam"),
            os.path.expandvars(r"%ProgramFiles%\Steam"),
            r"C:\Steam",
        ]
    return [
        os.path.expanduser("~/.steam/steam"),
        os.path.expanduser("~/.local/share/Steam"),
        "/usr/share/steam",
    ]


class SteamLibrary:
    """Resolves application install directories across Steam library roots."""

    def __init__(self, steam_path: Optional[Union[str, Path]] = None):
        """Initialize library lookup.

        Args:
            steam_path: Path to the Steam installation (auto-detected if omitted)
        """
        self._steam_path = Path(steam_path) if steam_path else self._find_steam_path()

    @property
    def steam_path(self) -> Path:
        return self._steam_path

    def _find_steam_path(self) -> Path:
        candidates = default_steam_paths()
        for path in candidates:
            if os.path.isdir(path):
                return Path(path)
        raise SteamNotFoundError("Steam installation not found", candidates=candidates)

    @staticmethod
    def steamapps_dir(root: Path) -> Path:
        """Return the steamapps directory of a library root (legacy casing too)."""
        for name in STEAMAPPS_DIRS:
            candidate = root / name
            if candidate.is_dir():
                return candidate
        return root / STEAMAPPS_DIRS[0]

    def library_roots(self) -> List[Path]:
        """Steam root first, then each library listed in libraryfolders.vdf."""
        roots = [self._steam_path]
        index_path = self.steamapps_dir(self._steam_path) / LIBRARY_INDEX
        if not index_path.is_file():
            logger.warning("Library index not found: %s (using Steam root only)", index_path)
            return roots

        data = _load_vdf(index_path)
        folders = _get_key(data, "libraryfolders")
        if not isinstance(folders, Mapping):
            raise MalformedManifestError(
                f"No 'libraryfolders' block in {index_path}", file_path=str(index_path)
            )

        for key, value in folders.items():
            if not str(key).isdigit():
                continue
            # current layout nests a block with a "path" key, legacy maps straight to the path
            raw = _get_key(value, "path") if isinstance(value, Mapping) else value
            if not isinstance(raw, str) or not raw.strip():
                logger.warning("Skipping library entry %s without a path in %s", key, index_path)
                continue
            root = Path(raw.strip())
            if root not in roots:
                roots.append(root)
        return roots

    def manifest_path(self, root: Path, app_id: int) -> Path:
        return self.steamapps_dir(root) / f"appmanifest_{app_id}.acf"

    def read_install_dir(self, manifest: Path, app_id: Optional[int] = None) -> str:
        """Extract the ``installdir`` value from an app manifest."""
        data = _load_vdf(manifest)
        install_dir = _get_key(data, "installdir")
        if install_dir is None:
            install_dir = _get_key(_get_key(data, "AppState"), "installdir")
        if not isinstance(install_dir, str) or not install_dir.strip():
            raise MalformedManifestError(
                f"No 'installdir' in {manifest}", file_path=str(manifest), app_id=app_id
            )
        return install_dir.strip()

    def resolve_install_path(self, app_id: int) -> Path:
        """Locate the install directory of ``app_id``.

        A library root without the manifest is skipped. A manifest that
        exists but is malformed is remembered and the search goes on.

        Raises:
            ManifestNotFoundError: no root holds the manifest
            MalformedManifestError: the index, or every manifest found, is malformed
        """
        roots = self.library_roots()
        malformed: Optional[MalformedManifestError] = None

        for root in roots:
            manifest = self.manifest_path(root, app_id)
            if not manifest.is_file():
                logger.debug("No manifest for %s under %s", app_id, root)
                continue
            try:
                install_dir = self.read_install_dir(manifest, app_id)
            except MalformedManifestError as e:
                logger.warning("%s", e)
                if malformed is None:
                    malformed = e
                continue
            path = self.steamapps_dir(root) / COMMON_DIR / install_dir
            logger.info("Found app %s in %s", app_id, path)
            return path

        if malformed is not None:
            raise malformed
        raise ManifestNotFoundError(
            f"Manifest for app {app_id} not found under any known library root",
            app_id=app_id,
            searched_roots=roots,
        )


def resolve_install_path(app_id: int = BORDERLANDS2_APP_ID,
                         steam_path: Optional[Union[str, Path]] = None) -> Path:
    """Convenience wrapper around ``SteamLibrary.resolve_install_path``."""
    return SteamLibrary(steam_path).resolve_install_path(app_id)
