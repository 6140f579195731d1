"""Tests for Steam install path resolution."""

from pathlib import Path

import pytest

from bl2patch.exceptions import (
    MalformedManifestError,
    ManifestNotFoundError,
    ManifestResolutionError,
    SteamNotFoundError,
)
from bl2patch.steam import SteamLibrary, resolve_install_path
from bl2patch.steam import library as steam_library

APP_ID = 49520


def _write_index(steam_root: Path, roots, legacy: bool = False, steamapps: str = "steamapps") -> None:
    index_dir = steam_root / steamapps
    index_dir.mkdir(parents=True, exist_ok=True)
    if legacy:
        entries = "\n".join(f'\t"{i}"\t\t"{root}"' for i, root in enumerate(roots, start=1))
        body = f'"LibraryFolders"\n{{\n\t"TimeNextStatsReport"\t\t"1561000000"\n{entries}\n}}\n'
    else:
        entries = "\n".join(
            f'\t"{i}"\n\t{{\n\t\t"path"\t\t"{root}"\n\t\t"label"\t\t""\n\t}}'
            for i, root in enumerate(roots)
        )
        body = f'"libraryfolders"\n{{\n{entries}\n}}\n'
    (index_dir / "libraryfolders.vdf").write_text(body, encoding="utf-8")


def _write_manifest(root: Path, body: str, steamapps: str = "steamapps") -> Path:
    apps = root / steamapps
    apps.mkdir(parents=True, exist_ok=True)
    manifest = apps / f"appmanifest_{APP_ID}.acf"
    manifest.write_text(body, encoding="utf-8")
    return manifest


APP_STATE = (
    '"AppState"\n{\n\t"appid"\t\t"49520"\n\t"name"\t\t"Borderlands 2"\n'
    '\t"installdir"\t\t"Borderlands 2"\n}\n'
)


@pytest.fixture
def steam_root(tmp_path) -> Path:
    root = tmp_path / "steam"
    (root / "steamapps").mkdir(parents=True)
    return root


def test_second_library_root_is_used_when_first_lacks_manifest(tmp_path, steam_root):
    first = tmp_path / "lib_one"
    second = tmp_path / "lib_two"
    (first / "steamapps").mkdir(parents=True)
    _write_index(steam_root, [first, second])
    _write_manifest(second, '"installdir" "Borderlands2"\n')

    path = SteamLibrary(steam_root).resolve_install_path(APP_ID)
    assert path == second / "steamapps" / "common" / "Borderlands2"


def test_manifest_parsing_tolerates_whitespace_and_app_state_block(steam_root):
    _write_manifest(steam_root, APP_STATE)
    assert resolve_install_path(APP_ID, steam_path=steam_root) == (
        steam_root / "steamapps" / "common" / "Borderlands 2"
    )


def test_library_roots_include_steam_root_first_without_duplicates(tmp_path, steam_root):
    other = tmp_path / "games"
    _write_index(steam_root, [steam_root, other])
    assert SteamLibrary(steam_root).library_roots() == [steam_root, other]


def test_legacy_index_layout(tmp_path, steam_root):
    lib = tmp_path / "legacy_lib"
    _write_index(steam_root, [lib], legacy=True)
    _write_manifest(lib, APP_STATE)
    assert SteamLibrary(steam_root).library_roots() == [steam_root, lib]
    assert SteamLibrary(steam_root).resolve_install_path(APP_ID) == (
        lib / "steamapps" / "common" / "Borderlands 2"
    )


def test_legacy_steamapps_casing(tmp_path):
    root = tmp_path / "old_steam"
    (root / "SteamApps").mkdir(parents=True)
    _write_manifest(root, APP_STATE, steamapps="SteamApps")
    assert SteamLibrary(root).resolve_install_path(APP_ID) == (
        root / "SteamApps" / "common" / "Borderlands 2"
    )


def test_missing_index_falls_back_to_steam_root(steam_root):
    assert SteamLibrary(steam_root).library_roots() == [steam_root]


def test_manifest_missing_everywhere(tmp_path, steam_root):
    _write_index(steam_root, [tmp_path / "empty_lib"])
    with pytest.raises(ManifestNotFoundError) as excinfo:
        SteamLibrary(steam_root).resolve_install_path(APP_ID)
    assert excinfo.value.details["app_id"] == APP_ID
    assert len(excinfo.value.details["searched_roots"]) == 2
    assert isinstance(excinfo.value, ManifestResolutionError)
    assert excinfo.value.exit_code == 3


def test_manifest_without_installdir_is_malformed(steam_root):
    _write_manifest(steam_root, '"AppState"\n{\n\t"appid"\t\t"49520"\n}\n')
    with pytest.raises(MalformedManifestError):
        SteamLibrary(steam_root).resolve_install_path(APP_ID)


def test_malformed_manifest_does_not_hide_a_valid_one(tmp_path, steam_root):
    good = tmp_path / "good_lib"
    _write_index(steam_root, [good])
    _write_manifest(steam_root, '"AppState"\n{\n\t"name"\t\t"Borderlands 2"\n}\n')
    _write_manifest(good, APP_STATE)
    assert SteamLibrary(steam_root).resolve_install_path(APP_ID) == (
        good / "steamapps" / "common" / "Borderlands 2"
    )


def test_index_without_libraryfolders_block_is_malformed(steam_root):
    (steam_root / "steamapps" / "libraryfolders.vdf").write_text('"something"\n{\n}\n', encoding="utf-8")
    with pytest.raises(MalformedManifestError):
        SteamLibrary(steam_root).library_roots()


def test_unparseable_index_is_malformed(steam_root):
    (steam_root / "steamapps" / "libraryfolders.vdf").write_text(
        '"libraryfolders"\n{\n\t"0"\n\t{\n', encoding="utf-8"
    )
    with pytest.raises(MalformedManifestError):
        SteamLibrary(steam_root).library_roots()


def test_steam_not_found(monkeypatch, tmp_path):
    monkeypatch.setattr(steam_library, "default_steam_paths", lambda: [str(tmp_path / "nowhere")])
    with pytest.raises(SteamNotFoundError):
        SteamLibrary()


def test_unreadable_index_is_reported_as_malformed(monkeypatch, steam_root):
    _write_index(steam_root, [steam_root])

    def _denied(fp, **kwargs):
        raise PermissionError("access denied")

    monkeypatch.setattr(steam_library.vdf, "load", _denied)
    with pytest.raises(MalformedManifestError) as excinfo:
        SteamLibrary(steam_root).library_roots()
    assert "Cannot read" in str(excinfo.value)
