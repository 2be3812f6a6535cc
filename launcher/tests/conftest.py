import json
from pathlib import Path

import pytest


def write_manifest(folder: Path, **overrides) -> Path:
    """Write a Thunderstore-style manifest.json into ``folder``."""
    data = {
        "name": "SomeMod",
        "version_number": "1.2.3",
        "website_url": "https://example.invalid/somemod",
        "description": "Does some things",
        "dependencies": ["denikson-BepInExPack_Valheim-5.4.2202"],
    }
    data.update(overrides)
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / "manifest.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def game_dir(tmp_path):
    """Unmodded game directory."""
    game = tmp_path / "valheim"
    game.mkdir()
    return game


@pytest.fixture
def modded_game(game_dir):
    """Game directory with the two files BepInEx needs to run."""
    core = game_dir / "BepInEx" / "core"
    core.mkdir(parents=True)
    (core / "BepInEx.Preloader.dll").write_bytes(b"")
    libs = game_dir / "doorstop_libs"
    libs.mkdir()
    (libs / "libdoorstop_x64.so").write_bytes(b"")
    (game_dir / "BepInEx" / "plugins").mkdir()
    return game_dir


SETTINGS_VARS = (
    "GAME_LOCATION", "SERVER_EXECUTABLE", "NAME", "PORT", "WORLD", "PASSWORD",
    "PUBLIC", "DISABLE_BEPINEX", "LOG_LEVEL", "LOG_JSON",
)


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch):
    """Keep the host environment out of Settings()."""
    for var in SETTINGS_VARS:
        monkeypatch.delenv(var, raising=False)
