"""Steam integration: locating installed applications."""

from .library import (
    BORDERLANDS2_APP_ID,
    SteamLibrary,
    default_steam_paths,
    resolve_install_path,
)

__all__ = [
    "BORDERLANDS2_APP_ID",
    "SteamLibrary",
    "default_steam_paths",
    "resolve_install_path",
]
